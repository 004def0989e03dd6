from typing import List, Optional, Sequence

from loguru import logger

from journeyman.fetchers.base_fetcher import FetchError
from journeyman.fetchers.boxscore_fetcher import BoxscoreFetcher
from journeyman.fetchers.roster_fetcher import RosterFetcher
from journeyman.fetchers.schedule_fetcher import ScheduleFetcher
from journeyman.models.api import NamedPlayer
from journeyman.models.database import RawTeamBucket
from journeyman.models.enums import StrategyKind
from journeyman.models.player import PlayerRecord, PlayerSet

DEFAULT_GAMES_PER_SEASON = 10


def _records(players: Sequence[NamedPlayer]) -> List[PlayerRecord]:
    records = []
    for player in players:
        try:
            records.append(PlayerRecord(name=player.full_name))
        except ValueError:
            logger.debug(f"Skipping player without a usable name: {player!r}")
    return records


class LegacyAggregationStrategy:
    """Crawls rosters (and optionally boxscores) for every team and season.

    Players are identified by display name only; the roster and boxscore
    endpoints expose no stable id.
    """

    kind = StrategyKind.LEGACY

    def __init__(
        self,
        roster_fetcher: RosterFetcher,
        team_codes: Sequence[str],
        seasons: Sequence[str],
        schedule_fetcher: Optional[ScheduleFetcher] = None,
        boxscore_fetcher: Optional[BoxscoreFetcher] = None,
        include_games: bool = False,
        games_per_season: int = DEFAULT_GAMES_PER_SEASON,
    ):
        if include_games and (schedule_fetcher is None or boxscore_fetcher is None):
            raise ValueError("Game mining needs a schedule and a boxscore fetcher")
        self.roster_fetcher = roster_fetcher
        self.schedule_fetcher = schedule_fetcher
        self.boxscore_fetcher = boxscore_fetcher
        self.team_codes = list(team_codes)
        self.seasons = list(seasons)
        self.include_games = include_games
        self.games_per_season = games_per_season
        self.errors = 0

    async def collect(self) -> List[RawTeamBucket]:
        if not self.include_games:
            self.roster_fetcher.scheduler.expected_total = len(self.team_codes) * len(
                self.seasons
            )
        logger.info(
            f"Collecting rosters for {len(self.seasons)} seasons and "
            f"{len(self.team_codes)} teams (including historical)"
        )

        buckets = []
        for index, team_code in enumerate(self.team_codes, start=1):
            bucket, roster_count, game_only_count = await self._collect_team(team_code)
            buckets.append(bucket)
            if self.include_games and game_only_count:
                logger.info(
                    f"Completed {team_code} ({index}/{len(self.team_codes)}) - "
                    f"{len(bucket)} players ({roster_count} roster + {game_only_count} from games)"
                )
            else:
                logger.info(
                    f"Completed {team_code} ({index}/{len(self.team_codes)}) - "
                    f"{len(bucket)} unique players"
                )
        return buckets

    async def _collect_team(self, team_code: str):
        bucket = RawTeamBucket(team_code)
        roster_seen = PlayerSet()
        game_only = PlayerSet()

        for season in self.seasons:
            roster = PlayerSet(await self._roster_players(team_code, season))
            combined = PlayerSet(roster)
            roster_seen.update(roster)

            if self.include_games:
                added = 0
                for record in await self._game_players(team_code, season):
                    if record not in roster:
                        game_only.add(record)
                        if combined.add(record):
                            added += 1
                if added:
                    logger.info(
                        f"{team_code}/{season} - Games: {added} additional players not in roster"
                    )

            bucket.players.update(combined)

        return bucket, len(roster_seen), len(game_only)

    async def _roster_players(self, team_code: str, season: str) -> List[PlayerRecord]:
        try:
            roster = await self.roster_fetcher.fetch(team_code, season)
        except FetchError as e:
            self.errors += 1
            logger.warning(f"Failed to fetch roster {team_code}/{season}: {e}")
            return []

        records = _records(roster.players())
        if records:
            logger.debug(f"{team_code}/{season} - Roster: {len(records)} players")
        return records

    async def _game_players(self, team_code: str, season: str) -> List[PlayerRecord]:
        """Players from the team's side of its first few games of the season."""
        try:
            games = await self.schedule_fetcher.fetch(team_code, season)
        except FetchError as e:
            self.errors += 1
            logger.warning(f"Failed to fetch schedule for {team_code}/{season}: {e}")
            return []

        own_games = [
            (game, side)
            for game in games
            if (side := game.side_of(team_code)) is not None
        ][: self.games_per_season]
        logger.debug(
            f"{team_code}/{season} - {len(games)} games scheduled, checking {len(own_games)}"
        )

        records: List[PlayerRecord] = []
        for game, side in own_games:
            try:
                boxscore = await self.boxscore_fetcher.fetch(game.id)
            except FetchError as e:
                self.errors += 1
                logger.warning(f"Failed to fetch game {game.id}: {e}")
                continue
            team = boxscore.side(side)
            if team is not None:
                records.extend(_records(team.players()))
        return records
