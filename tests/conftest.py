from typing import Any, Dict, List, Tuple, Union

import httpx
import pytest

from journeyman.config.settings import load_settings
from journeyman.scheduling.scheduler import RequestScheduler

API = "https://api-web.nhle.com/v1"
SEARCH = "https://search.d3.nhle.com/api/v1"
LEGACY = "https://statsapi.web.nhl.com/api/v1"

Reply = Union[Tuple[int, Any], Exception]


def _bare_url(request: httpx.Request) -> str:
    return f"{request.url.scheme}://{request.url.host}{request.url.path}"


class FakeNhlApi:
    """httpx.MockTransport handler serving canned replies by URL (query ignored).

    Unknown URLs answer 404. Every request is recorded in order.
    """

    def __init__(self, routes: Dict[str, Reply] = None):
        self.routes: Dict[str, Reply] = dict(routes or {})
        self.requests: List[httpx.Request] = []

    def add(self, url: str, body: Any, status: int = 200) -> None:
        self.routes[url] = (status, body)

    def fail(self, url: str, exc: Exception) -> None:
        self.routes[url] = exc

    @property
    def urls(self) -> List[str]:
        return [_bare_url(request) for request in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.routes.get(_bare_url(request))
        if reply is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if isinstance(reply, Exception):
            raise reply
        status, body = reply
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.MockTransport(self),
            headers={"User-Agent": "NHL Player Database Generator 1.0"},
        )


class RecordingSleep:
    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def roster_body(*names: str, group: str = "forwards") -> Dict[str, Any]:
    return {
        group: [
            {"firstName": {"default": first}, "lastName": {"default": last}}
            for first, last in (name.split(" ", 1) for name in names)
        ]
    }


def landing_body(
    player_id: int, first: str, last: str, season_totals: List[Dict[str, Any]], **extra
) -> Dict[str, Any]:
    body = {
        "playerId": player_id,
        "firstName": {"default": first},
        "lastName": {"default": last},
        "seasonTotals": season_totals,
    }
    body.update(extra)
    return body


@pytest.fixture
def api() -> FakeNhlApi:
    return FakeNhlApi()


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def scheduler(sleeper) -> RequestScheduler:
    return RequestScheduler(0.1, progress_interval=20, sleep=sleeper)


@pytest.fixture
def make_settings():
    def _make(**overrides):
        base = {"request_delay_ms": 0, "start_year": 2015, "end_year": 2015}
        base.update(overrides)
        return load_settings(**base)

    return _make
