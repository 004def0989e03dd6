from dataclasses import dataclass
from typing import Optional, Tuple

import httpx
from loguru import logger

from journeyman.config.settings import AppSettings
from journeyman.consolidation.consolidator import Consolidator
from journeyman.fetchers.base_fetcher import build_http_client
from journeyman.fetchers.boxscore_fetcher import BoxscoreFetcher
from journeyman.fetchers.directory_fetcher import PlayerDirectoryFetcher
from journeyman.fetchers.player_detail_fetcher import PlayerDetailFetcher
from journeyman.fetchers.roster_fetcher import RosterFetcher
from journeyman.fetchers.schedule_fetcher import ScheduleFetcher, schedule_templates
from journeyman.models.database import ConsolidatedDatabase
from journeyman.models.enums import StrategyKind
from journeyman.models.season import seasons_in_range
from journeyman.scheduling.scheduler import RequestScheduler
from journeyman.strategies.base import AggregationStrategy
from journeyman.strategies.directory import DirectoryAggregationStrategy
from journeyman.strategies.legacy import LegacyAggregationStrategy
from journeyman.teams.identity import TeamIdentityResolver


@dataclass
class RunStats:
    requests: int = 0
    failed_requests: int = 0
    unit_errors: int = 0
    buckets: int = 0
    discarded_buckets: int = 0


def build_strategy(
    app_settings: AppSettings,
    client: httpx.AsyncClient,
    scheduler: RequestScheduler,
    resolver: Optional[TeamIdentityResolver] = None,
) -> AggregationStrategy:
    """Instantiates the configured strategy with fetchers sharing one scheduler."""
    fetcher_options = {"max_attempts": app_settings.max_request_attempts}

    if app_settings.strategy == StrategyKind.DIRECTORY:
        return DirectoryAggregationStrategy(
            directory_fetcher=PlayerDirectoryFetcher(
                client,
                scheduler,
                base_url=app_settings.search_api_url,
                limit=app_settings.directory_limit,
                **fetcher_options,
            ),
            detail_fetcher=PlayerDetailFetcher(
                client, scheduler, base_url=app_settings.api_base_url, **fetcher_options
            ),
            start_year=app_settings.start_year,
            end_year=app_settings.end_year,
        )

    resolver = resolver or TeamIdentityResolver()
    schedule_fetcher = boxscore_fetcher = None
    if app_settings.include_games:
        schedule_fetcher = ScheduleFetcher(
            client,
            scheduler,
            templates=schedule_templates(
                app_settings.api_base_url, app_settings.legacy_api_url
            ),
        )
        boxscore_fetcher = BoxscoreFetcher(
            client, scheduler, base_url=app_settings.api_base_url, **fetcher_options
        )

    return LegacyAggregationStrategy(
        roster_fetcher=RosterFetcher(
            client, scheduler, base_url=app_settings.api_base_url, **fetcher_options
        ),
        team_codes=resolver.known_codes(),
        seasons=seasons_in_range(app_settings.start_year, app_settings.end_year),
        schedule_fetcher=schedule_fetcher,
        boxscore_fetcher=boxscore_fetcher,
        include_games=app_settings.include_games,
        games_per_season=app_settings.games_per_season_limit,
    )


async def run_pipeline(
    app_settings: AppSettings,
    client: Optional[httpx.AsyncClient] = None,
    scheduler: Optional[RequestScheduler] = None,
) -> Tuple[ConsolidatedDatabase, RunStats]:
    """Runs the configured strategy and consolidates its buckets.

    Nothing is written here; the caller serializes the returned database.
    """
    seasons = seasons_in_range(app_settings.start_year, app_settings.end_year)
    scheduler = scheduler or RequestScheduler(
        app_settings.request_delay_seconds, app_settings.progress_interval
    )
    resolver = TeamIdentityResolver()
    owns_client = client is None
    client = client or build_http_client(app_settings)

    logger.info(
        f"Running {app_settings.strategy.value} strategy for seasons "
        f"{seasons[0]} to {seasons[-1]} (delay {app_settings.request_delay_ms}ms)"
    )
    try:
        strategy = build_strategy(app_settings, client, scheduler, resolver)
        buckets = await strategy.collect()
    finally:
        if owns_client:
            await client.aclose()
            logger.debug("Closed HTTP client")

    consolidator = Consolidator(resolver)
    for bucket in buckets:
        consolidator.fold(bucket)
    database = consolidator.build(seasons, strategy.kind)

    stats = RunStats(
        requests=scheduler.completed,
        failed_requests=scheduler.failed,
        unit_errors=strategy.errors,
        buckets=len(buckets),
        discarded_buckets=len(consolidator.discarded),
    )
    logger.success(
        f"Consolidated {database.total_players} player entries across "
        f"{len(database.teams)} teams ({stats.requests} requests, {stats.unit_errors} errors)"
    )
    return database, stats
