from typing import Optional

import httpx

from journeyman.config.settings import get_settings
from journeyman.models.api import PlayerLanding
from journeyman.scheduling.scheduler import RequestScheduler
from .base_fetcher import BaseFetcher


class PlayerDetailFetcher(BaseFetcher):
    """A player's landing page: bio plus season-by-season totals."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        scheduler: RequestScheduler,
        base_url: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(client, scheduler, **kwargs)
        self.base_url = (base_url or get_settings().api_base_url).rstrip("/")

    def url_for(self, player_id: str) -> str:
        return f"{self.base_url}/player/{player_id}/landing"

    async def fetch(self, player_id: str) -> PlayerLanding:
        return await self._get_json(self.url_for(player_id), PlayerLanding)
