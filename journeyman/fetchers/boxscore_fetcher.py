from typing import Optional

import httpx

from journeyman.config.settings import get_settings
from journeyman.models.api import BoxscoreResponse
from journeyman.scheduling.scheduler import RequestScheduler
from .base_fetcher import BaseFetcher


class BoxscoreFetcher(BaseFetcher):
    """Players who dressed for a single game, per side."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        scheduler: RequestScheduler,
        base_url: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(client, scheduler, **kwargs)
        self.base_url = (base_url or get_settings().api_base_url).rstrip("/")

    def url_for(self, game_id: int) -> str:
        return f"{self.base_url}/gamecenter/{game_id}/boxscore"

    async def fetch(self, game_id: int) -> BoxscoreResponse:
        return await self._get_json(self.url_for(game_id), BoxscoreResponse)
