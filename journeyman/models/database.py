from datetime import datetime, timezone
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from journeyman.models.enums import StrategyKind
from journeyman.models.player import PlayerRecord, PlayerSet


class RawTeamBucket:
    """Players collected under one raw (possibly historical) team code."""

    def __init__(self, team_code: str):
        self.team_code = team_code
        self.players = PlayerSet()

    def add(self, record: PlayerRecord) -> bool:
        return self.players.add(record)

    def __len__(self) -> int:
        return len(self.players)

    def __repr__(self) -> str:
        return f"RawTeamBucket({self.team_code!r}, players={len(self.players)})"


class ConsolidatedDatabase(BaseModel):
    """Players grouped by current franchise, ready to serialize."""

    model_config = ConfigDict(frozen=True)

    teams: Dict[str, List[PlayerRecord]]
    seasons_covered: List[str]
    strategy: StrategyKind
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def total_players(self) -> int:
        """Sum of list lengths; a player on several teams counts once per team."""
        return sum(len(players) for players in self.teams.values())

    def to_document(self) -> Dict[str, Any]:
        """The output contract consumed by the read side."""
        with_details = self.strategy == StrategyKind.DIRECTORY
        return {
            "teams": {
                code: [player.to_entry(with_details) for player in players]
                for code, players in self.teams.items()
            },
            "generated_at": self.generated_at.isoformat(),
            "seasons_covered": list(self.seasons_covered),
        }
