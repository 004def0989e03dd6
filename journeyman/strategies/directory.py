from typing import Callable, Dict, List, Optional

from loguru import logger

from journeyman.fetchers.base_fetcher import FetchError
from journeyman.fetchers.directory_fetcher import PlayerDirectoryFetcher
from journeyman.fetchers.player_detail_fetcher import PlayerDetailFetcher
from journeyman.models.api import DirectoryPlayer, PlayerLanding
from journeyman.models.database import RawTeamBucket
from journeyman.models.enums import StrategyKind
from journeyman.models.player import PlayerRecord, compose_birth_place
from journeyman.models.season import season_in_range, season_start_year
from journeyman.teams.names import team_code_from_name

TeamLookup = Callable[[Optional[str]], Optional[str]]


def team_codes_in_range(
    landing: PlayerLanding,
    start_year: int,
    end_year: int,
    lookup: TeamLookup = team_code_from_name,
) -> List[str]:
    """Distinct team codes from NHL season totals starting inside the range.

    Order follows the season totals. Entries whose team name is not a known
    NHL club are skipped.
    """
    codes: List[str] = []
    for entry in landing.season_totals or []:
        if not entry.is_nhl or not season_in_range(entry.season, start_year, end_year):
            continue
        code = lookup(entry.team_name)
        if code is None:
            logger.debug(
                f"No team code for '{entry.team_name}' ({entry.season}), player {landing.player_id}"
            )
            continue
        if code not in codes:
            codes.append(code)
    return codes


def player_record(landing: PlayerLanding, listing: Optional[DirectoryPlayer] = None) -> PlayerRecord:
    position = landing.position or (listing.position_code if listing else None)
    return PlayerRecord(
        id=landing.player_id,
        name=landing.full_name,
        birth_date=landing.birth_date,
        birth_place=compose_birth_place(landing.birth_city, landing.birth_country),
        position=position,
    )


class DirectoryAggregationStrategy:
    """Walks the full player directory and buckets players by the teams they
    played for during the season range.
    """

    kind = StrategyKind.DIRECTORY

    def __init__(
        self,
        directory_fetcher: PlayerDirectoryFetcher,
        detail_fetcher: PlayerDetailFetcher,
        start_year: int,
        end_year: int,
        lookup: TeamLookup = team_code_from_name,
        skip_retired_before_range: bool = True,
    ):
        if start_year > end_year:
            raise ValueError(f"Invalid season range: {start_year} > {end_year}")
        self.directory_fetcher = directory_fetcher
        self.detail_fetcher = detail_fetcher
        self.start_year = start_year
        self.end_year = end_year
        self.lookup = lookup
        self.skip_retired_before_range = skip_retired_before_range
        self.errors = 0
        self.dropped = 0
        self.skipped = 0

    async def collect(self) -> List[RawTeamBucket]:
        try:
            directory = await self.directory_fetcher.fetch()
        except FetchError as e:
            self.errors += 1
            logger.error(f"Failed to fetch the player directory: {e}")
            return []

        candidates = [player for player in directory if self._may_be_in_range(player)]
        self.skipped = len(directory) - len(candidates)
        logger.info(
            f"Player directory: {len(directory)} players, {len(candidates)} may have "
            f"played between {self.start_year} and {self.end_year}"
        )
        self.detail_fetcher.scheduler.expected_total = (
            self.detail_fetcher.scheduler.completed + len(candidates)
        )

        buckets: Dict[str, RawTeamBucket] = {}
        for listing in candidates:
            try:
                landing = await self.detail_fetcher.fetch(listing.player_id)
            except FetchError as e:
                self.errors += 1
                logger.warning(f"Failed to fetch details for player {listing.player_id}: {e}")
                continue

            codes = team_codes_in_range(landing, self.start_year, self.end_year, self.lookup)
            if not codes:
                self.dropped += 1
                continue

            try:
                record = player_record(landing, listing)
            except ValueError as e:
                self.errors += 1
                logger.warning(f"Unusable record for player {listing.player_id}: {e}")
                continue

            for code in codes:
                if code not in buckets:
                    buckets[code] = RawTeamBucket(code)
                buckets[code].add(record)

        logger.info(
            f"Directory crawl finished: {len(buckets)} team codes, "
            f"{self.errors} errors, {self.dropped} players without teams in range"
        )
        return list(buckets.values())

    def _may_be_in_range(self, player: DirectoryPlayer) -> bool:
        # A player whose last season ended before the range cannot contribute.
        if not self.skip_retired_before_range or not player.last_season_id:
            return True
        try:
            return season_start_year(player.last_season_id) >= self.start_year
        except ValueError:
            return True
