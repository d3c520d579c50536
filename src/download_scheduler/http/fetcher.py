"""Single-attempt HTTP client returning raw bytes or a classified failure."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar

import httpx

from download_scheduler.config import DEFAULT_USER_AGENT
from download_scheduler.models import FailureClass

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
HTTP_NOT_FOUND = 404


@dataclass(slots=True)
class FetchError(Exception):
    """Base fetch error."""

    message: str
    url: str
    status_code: int | None = None

    failure_class: ClassVar[FailureClass] = FailureClass.FETCH_FAILED

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class UnreachableError(FetchError):
    """DNS or connection failure; worth another attempt."""

    failure_class: ClassVar[FailureClass] = FailureClass.UNREACHABLE


@dataclass(slots=True)
class AssetNotFoundError(FetchError):
    """Remote asset answered 404."""

    failure_class: ClassVar[FailureClass] = FailureClass.NOT_FOUND


@dataclass(slots=True)
class FetchFailedError(FetchError):
    """Any other HTTP or transport failure."""

    failure_class: ClassVar[FailureClass] = FailureClass.FETCH_FAILED


class HttpFetcher:
    """HTTP client wrapper with timeout, proxy, and user-agent configuration.

    The underlying ``httpx.Client`` keeps one connection pool that is shared by
    every worker lane, so one fetcher serves the whole scheduler.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        proxy: str | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        headers: dict[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        base_headers = {"User-Agent": user_agent}
        if headers:
            base_headers.update(headers)
        self._client = httpx.Client(
            timeout=httpx.Timeout(timeout_seconds),
            headers=base_headers,
            proxy=proxy,
            transport=transport,
            follow_redirects=True,
        )

    def fetch(self, url: str) -> bytes:
        """GET ``url`` once and return the response body as bytes."""

        try:
            response = self._client.get(url)
        except httpx.ConnectError as exc:
            logger.debug("Connection failure fetching %s: %s", url, exc)
            raise UnreachableError(
                message=f"Could not connect to {url}: {exc}",
                url=url,
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchFailedError(
                message=f"HTTP error fetching {url}: {exc!r}",
                url=url,
            ) from exc

        if response.status_code == HTTP_NOT_FOUND:
            raise AssetNotFoundError(
                message=f"Asset not found: {url}",
                url=url,
                status_code=response.status_code,
            )
        if not response.is_success:
            raise FetchFailedError(
                message=f"HTTP {response.status_code} fetching {url}",
                url=url,
                status_code=response.status_code,
            )
        return response.content

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpFetcher:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
