from typing import Any, Dict, Optional, Type, TypeVar, Union

import httpx
from loguru import logger
from pydantic import BaseModel, TypeAdapter, ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from journeyman.config.settings import AppSettings, get_settings
from journeyman.scheduling.scheduler import RequestScheduler

# Define common HTTP status codes that warrant a retry
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}

ModelT = TypeVar("ModelT", bound=BaseModel)
Schema = Union[Type[ModelT], TypeAdapter]


class FetchError(Exception):
    """A single unit of work failed. Never fatal for the pipeline."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class TransportError(FetchError):
    """Connection failure or timeout."""

    pass


class HttpStatusError(FetchError):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code: int, url: str):
        super().__init__(f"HTTP {status_code} for {url}", url=url)
        self.status_code = status_code


class ParseError(FetchError):
    """The body was not JSON or did not match the expected schema."""

    pass


def is_transient(exc: BaseException) -> bool:
    if isinstance(exc, TransportError):
        return True
    return isinstance(exc, HttpStatusError) and exc.status_code in RETRYABLE_STATUS_CODES


def build_http_client(app_settings: Optional[AppSettings] = None) -> httpx.AsyncClient:
    """The one client shared by every fetcher in a run."""
    app_settings = app_settings or get_settings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(app_settings.request_timeout_seconds),
        follow_redirects=True,
        headers={
            "User-Agent": app_settings.user_agent,
            "Accept": "application/json",
        },
    )


class BaseFetcher:
    """Shared request/parse plumbing for the NHL API fetchers.

    Every HTTP attempt goes through the scheduler, so retries are paced by
    the same inter-request delay as first attempts.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        scheduler: RequestScheduler,
        max_attempts: int = 1,
        retry_wait: Optional[wait_base] = None,
    ):
        self.client = client
        self.scheduler = scheduler
        self.max_attempts = max_attempts
        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=10)

    async def _get(
        self, url: str, params: Optional[Dict[str, Any]] = None
    ) -> httpx.Response:
        """GET with retry on transient failures. Raises FetchError subclasses."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self.retry_wait,
            retry=retry_if_exception(is_transient),
            before_sleep=lambda state: logger.warning(
                f"Retrying {url} (attempt {state.attempt_number} failed: {state.outcome.exception()})"
            ),
            reraise=True,
        )
        return await retrying(self.scheduler.submit, lambda: self._send(url, params))

    async def _send(
        self, url: str, params: Optional[Dict[str, Any]] = None
    ) -> httpx.Response:
        logger.debug(f"GET {url}", params=params)
        try:
            response = await self.client.get(url, params=params)
        except httpx.RequestError as e:
            raise TransportError(f"Request to {url} failed: {e!r}", url=url) from e

        if not response.is_success:
            raise HttpStatusError(response.status_code, url)
        logger.debug(f"Request successful: {response.status_code} for {url}")
        return response

    @staticmethod
    def _parse(response: httpx.Response, schema: Schema, url: str) -> Any:
        try:
            payload = response.json()
        except ValueError as e:
            raise ParseError(f"Body from {url} is not JSON: {e}", url=url) from e

        try:
            if isinstance(schema, TypeAdapter):
                return schema.validate_python(payload)
            return schema.model_validate(payload)
        except ValidationError as e:
            raise ParseError(
                f"Body from {url} does not match the expected schema: "
                f"{e.error_count()} error(s), first: {e.errors()[0]['msg']}",
                url=url,
            ) from e

    async def _get_json(
        self, url: str, schema: Schema, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        response = await self._get(url, params=params)
        return self._parse(response, schema, url)
