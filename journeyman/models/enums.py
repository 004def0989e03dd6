from enum import Enum


class StrategyKind(str, Enum):
    LEGACY = "legacy"  # per team/season roster crawl
    DIRECTORY = "directory"  # player directory + landing pages


class RosterGroup(str, Enum):
    FORWARDS = "forwards"
    DEFENSEMEN = "defensemen"
    GOALIES = "goalies"


class GameSide(str, Enum):
    HOME = "home"
    AWAY = "away"
