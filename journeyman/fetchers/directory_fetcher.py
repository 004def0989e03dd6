from typing import List, Optional

import httpx
from loguru import logger
from pydantic import TypeAdapter

from journeyman.config.settings import get_settings
from journeyman.models.api import DirectoryPlayer
from journeyman.scheduling.scheduler import RequestScheduler
from .base_fetcher import BaseFetcher

_DIRECTORY_ADAPTER = TypeAdapter(List[DirectoryPlayer])


class PlayerDirectoryFetcher(BaseFetcher):
    """Every player the search service knows about, in a single call.

    The search endpoint is not paginated here; ``limit`` must be larger than
    the player universe.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        scheduler: RequestScheduler,
        base_url: Optional[str] = None,
        limit: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(client, scheduler, **kwargs)
        self.base_url = (base_url or get_settings().search_api_url).rstrip("/")
        self.limit = limit or get_settings().directory_limit

    @property
    def url(self) -> str:
        return f"{self.base_url}/search/player"

    async def fetch(self) -> List[DirectoryPlayer]:
        params = {"culture": "en-us", "limit": self.limit, "q": "*"}
        players: List[DirectoryPlayer] = await self._get_json(
            self.url, _DIRECTORY_ADAPTER, params=params
        )
        if len(players) >= self.limit:
            logger.warning(
                f"Player directory returned {len(players)} records, the configured limit. "
                "The directory is probably truncated; raise DIRECTORY_LIMIT."
            )
        return players
