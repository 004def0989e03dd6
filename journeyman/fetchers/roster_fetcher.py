from typing import Optional

import httpx

from journeyman.config.settings import get_settings
from journeyman.models.api import RosterResponse
from journeyman.scheduling.scheduler import RequestScheduler
from .base_fetcher import BaseFetcher


class RosterFetcher(BaseFetcher):
    """Season roster snapshot for one team."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        scheduler: RequestScheduler,
        base_url: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(client, scheduler, **kwargs)
        self.base_url = (base_url or get_settings().api_base_url).rstrip("/")

    def url_for(self, team_code: str, season: str) -> str:
        return f"{self.base_url}/roster/{team_code}/{season}"

    async def fetch(self, team_code: str, season: str) -> RosterResponse:
        """Raises TransportError, HttpStatusError or ParseError on failure."""
        return await self._get_json(self.url_for(team_code, season), RosterResponse)
