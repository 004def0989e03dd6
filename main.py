import sys
import asyncio
import os

# --- Settings/Logging ---
from journeyman.logging.setup import setup_logging
from journeyman.config.settings import ConfigurationError, load_settings

setup_logging()

from loguru import logger

from journeyman.models.enums import StrategyKind
from journeyman.pipeline import run_pipeline
from journeyman.storage.artifact_writer import write_database

from rich import print
from rich.panel import Panel


async def main() -> int:
    """Builds the player database and writes it once, at the end."""
    try:
        app_settings = load_settings()
    except ConfigurationError as e:
        logger.critical(f"Invalid configuration: {e}")
        return 1
    setup_logging(app_settings.log_level)

    logger.info("NHL Player Database Generator")
    logger.info(f"Output file: {app_settings.output_path}")
    logger.info(f"Rate limit delay: {app_settings.request_delay_ms}ms")
    logger.info(
        f"Seasons: {app_settings.start_year}-{app_settings.start_year + 1} to "
        f"{app_settings.end_year}-{app_settings.end_year + 1}"
    )

    database, stats = await run_pipeline(app_settings)

    try:
        path = write_database(database, app_settings.output_path)
    except OSError as e:
        logger.error(f"Failed to write database to {app_settings.output_path}: {e}")
        return 1

    if app_settings.strategy == StrategyKind.DIRECTORY:
        sources = "Player directory + player landing pages"
    elif app_settings.include_games:
        sources = (
            "Team rosters + game-by-game player appearances "
            f"(first {app_settings.games_per_season_limit} games per team/season)"
        )
    else:
        sources = "Team rosters only"

    print(
        Panel.fit(
            f"Teams: {len(database.teams)}\n"
            f"Total players: {database.total_players}\n"
            f"Seasons covered: {app_settings.start_year} to {app_settings.end_year}\n"
            f"Data sources: {sources}\n"
            f"Requests: {stats.requests} ({stats.failed_requests} failed)\n"
            f"File size: {os.path.getsize(path) / 1024:.2f} KB",
            title="Database Summary",
        )
    )
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(130)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)
