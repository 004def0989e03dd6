from typing import List, Optional, Sequence

import httpx
from loguru import logger

from journeyman.config.settings import get_settings
from journeyman.models.api import ScheduledGame, ScheduleResponse
from journeyman.scheduling.scheduler import RequestScheduler
from .base_fetcher import BaseFetcher, FetchError, HttpStatusError, ParseError


class ScheduleUnavailableError(FetchError):
    """Every schedule endpoint template failed for a team/season."""

    def __init__(self, team_code: str, season: str, attempted_urls: Sequence[str]):
        super().__init__(
            f"All schedule API endpoints failed for {team_code}/{season}: "
            + ", ".join(attempted_urls)
        )
        self.team_code = team_code
        self.season = season
        self.attempted_urls = list(attempted_urls)


def schedule_templates(api_base_url: str, legacy_api_url: str) -> List[str]:
    """Current generation first, then the alternate shape, then the legacy API."""
    return [
        f"{api_base_url}/club-schedule-season/{{team}}/{{season}}",
        f"{api_base_url}/schedule/{{team}}/{{season}}",
        f"{legacy_api_url}/teams/{{team}}/schedule?season={{season}}",
    ]


class ScheduleFetcher(BaseFetcher):
    """Season schedule for a team, trying each endpoint template in order."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        scheduler: RequestScheduler,
        templates: Optional[Sequence[str]] = None,
        **kwargs,
    ):
        super().__init__(client, scheduler, **kwargs)
        if templates is None:
            app_settings = get_settings()
            templates = schedule_templates(
                app_settings.api_base_url, app_settings.legacy_api_url
            )
        self.templates = list(templates)
        if not self.templates:
            raise ValueError("ScheduleFetcher needs at least one endpoint template")

    async def fetch(self, team_code: str, season: str) -> List[ScheduledGame]:
        """Games in schedule order. Raises ScheduleUnavailableError if all templates fail.

        Each template is tried exactly once; a failing endpoint hands over to
        the next template instead of being retried.
        """
        attempted: List[str] = []
        for template in self.templates:
            url = template.format(team=team_code, season=season)
            attempted.append(url)
            try:
                response = await self.scheduler.submit(lambda: self._send(url))
                schedule: ScheduleResponse = self._parse(response, ScheduleResponse, url)
            except ParseError as e:
                # 2xx with an unexpected body: try the next shape
                logger.debug(f"Schedule body from {url} did not parse: {e}")
                continue
            except HttpStatusError as e:
                logger.debug(f"Schedule endpoint {url} returned {e.status_code}")
                continue
            except FetchError as e:
                logger.debug(f"Schedule endpoint {url} failed: {e}")
                continue
            return schedule.games

        raise ScheduleUnavailableError(team_code, season, attempted)
