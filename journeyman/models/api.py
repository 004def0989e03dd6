"""Response schemas for the NHL endpoints the fetchers read.

Only the fields the pipeline uses are declared; everything else the API
returns is ignored.
"""

from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from journeyman.models.enums import GameSide, RosterGroup


def _localized(value: Any) -> Any:
    # The web API wraps translatable strings as {"default": ..., "fr": ...}
    if isinstance(value, dict):
        return value.get("default")
    return value


LocalizedStr = Annotated[str, BeforeValidator(_localized)]
OptionalLocalizedStr = Annotated[Optional[str], BeforeValidator(_localized)]


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class NamedPlayer(ApiModel):
    """A player entry that only carries first and last name."""

    first_name: LocalizedStr = Field(..., alias="firstName")
    last_name: LocalizedStr = Field(..., alias="lastName")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


# --- Roster -----------------------------------------------------------------


class RosterResponse(ApiModel):
    forwards: Optional[List[NamedPlayer]] = None
    defensemen: Optional[List[NamedPlayer]] = None
    goalies: Optional[List[NamedPlayer]] = None

    def group(self, group: RosterGroup) -> List[NamedPlayer]:
        return getattr(self, group.value) or []

    def players(self) -> List[NamedPlayer]:
        """Forwards, then defensemen, then goalies. Missing groups are empty."""
        return [player for group in RosterGroup for player in self.group(group)]


# --- Schedule ---------------------------------------------------------------


class ScheduleTeam(ApiModel):
    abbrev: str


class ScheduledGame(ApiModel):
    id: int
    away_team: ScheduleTeam = Field(..., alias="awayTeam")
    home_team: ScheduleTeam = Field(..., alias="homeTeam")

    def side_of(self, team_code: str) -> Optional[GameSide]:
        if self.away_team.abbrev == team_code:
            return GameSide.AWAY
        if self.home_team.abbrev == team_code:
            return GameSide.HOME
        return None


class ScheduleResponse(ApiModel):
    games: List[ScheduledGame]


# --- Boxscore ---------------------------------------------------------------


class BoxscoreTeam(ApiModel):
    skaters: Optional[List[NamedPlayer]] = None
    goalies: Optional[List[NamedPlayer]] = None

    def players(self) -> List[NamedPlayer]:
        return (self.skaters or []) + (self.goalies or [])


class BoxscoreResponse(ApiModel):
    away_team: Optional[BoxscoreTeam] = Field(None, alias="awayTeam")
    home_team: Optional[BoxscoreTeam] = Field(None, alias="homeTeam")

    def side(self, side: GameSide) -> Optional[BoxscoreTeam]:
        return self.home_team if side == GameSide.HOME else self.away_team


# --- Player directory -------------------------------------------------------


class DirectoryPlayer(ApiModel):
    player_id: str = Field(..., alias="playerId")
    name: str
    position_code: Optional[str] = Field(None, alias="positionCode")
    last_season_id: Optional[str] = Field(None, alias="lastSeasonId")
    active: bool = False

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", coerce_numbers_to_str=True
    )


# --- Player landing ---------------------------------------------------------


class SeasonTotal(ApiModel):
    season: int
    team_name: OptionalLocalizedStr = Field(None, alias="teamName")
    league_abbrev: Optional[str] = Field(None, alias="leagueAbbrev")
    game_type_id: Optional[int] = Field(None, alias="gameTypeId")
    points: Optional[int] = None
    save_pctg: Optional[float] = Field(None, alias="savePctg")

    @property
    def is_nhl(self) -> bool:
        # Entries without a league are trusted as NHL entries.
        return self.league_abbrev is None or self.league_abbrev == "NHL"


class DraftDetails(ApiModel):
    year: Optional[int] = None
    team_abbrev: Optional[str] = Field(None, alias="teamAbbrev")
    round: Optional[int] = None
    pick_in_round: Optional[int] = Field(None, alias="pickInRound")
    overall_pick: Optional[int] = Field(None, alias="overallPick")


class PlayerLanding(ApiModel):
    player_id: str = Field(..., alias="playerId")
    first_name: LocalizedStr = Field(..., alias="firstName")
    last_name: LocalizedStr = Field(..., alias="lastName")
    birth_date: Optional[str] = Field(None, alias="birthDate")
    birth_city: OptionalLocalizedStr = Field(None, alias="birthCity")
    birth_country: Optional[str] = Field(None, alias="birthCountry")
    position: Optional[str] = None
    height_in_inches: Optional[int] = Field(None, alias="heightInInches")
    weight_in_pounds: Optional[int] = Field(None, alias="weightInPounds")
    current_team_abbrev: Optional[str] = Field(None, alias="currentTeamAbbrev")
    draft_details: Optional[DraftDetails] = Field(None, alias="draftDetails")
    season_totals: Optional[List[SeasonTotal]] = Field(None, alias="seasonTotals")

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", coerce_numbers_to_str=True
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
