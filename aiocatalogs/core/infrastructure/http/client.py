"""JSON-over-HTTP transport used for every upstream addon call.

All failures (timeouts, connection errors, malformed URLs, non-2xx statuses,
bodies that are not JSON) are folded into a JsonResponse instead of being
raised, so callers only ever branch on ``response.ok``.
"""

import time
from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger

from aiocatalogs.core.config import settings


@dataclass
class JsonResponse:
    """Outcome of one JSON GET."""

    url: str
    status_code: int | None = None
    data: Any = None
    error: str | None = None
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return (
            self.error is None
            and self.status_code is not None
            and 200 <= self.status_code < 300
        )


class JsonHttpClient:
    """Async JSON client with a bounded timeout on every request.

    An ``httpx.AsyncClient`` may be injected (tests pass one built on
    ``httpx.MockTransport``); otherwise a short-lived client is opened per call.
    """

    def __init__(
        self,
        *,
        timeout_sec: float | None = None,
        user_agent: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.timeout_sec = timeout_sec or settings.FETCH_TIMEOUT_SEC
        self.user_agent = user_agent or settings.FETCHER_USER_AGENT
        self._client = client

    async def get_json(self, url: str) -> JsonResponse:
        start_time = time.time()
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}

        try:
            if self._client is not None:
                response = await self._client.get(
                    url, headers=headers, timeout=self.timeout_sec
                )
            else:
                async with httpx.AsyncClient(
                    timeout=self.timeout_sec,
                    follow_redirects=True,
                ) as client:
                    response = await client.get(url, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning(f"Upstream fetch timeout for {url}: {e}")
            return JsonResponse(
                url=url,
                error=f"Timeout: {e}",
                duration_ms=_elapsed_ms(start_time),
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Upstream fetch error for {url}: {e}")
            return JsonResponse(
                url=url,
                error=f"Error: {e}",
                duration_ms=_elapsed_ms(start_time),
            )

        duration_ms = _elapsed_ms(start_time)
        if not response.is_success:
            logger.warning(f"Upstream fetch HTTP error for {url}: {response.status_code}")
            return JsonResponse(
                url=url,
                status_code=response.status_code,
                error=f"HTTP {response.status_code}",
                duration_ms=duration_ms,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.warning(f"Upstream response from {url} is not valid JSON: {e}")
            return JsonResponse(
                url=url,
                status_code=response.status_code,
                error="Invalid JSON",
                duration_ms=duration_ms,
            )

        return JsonResponse(
            url=url,
            status_code=response.status_code,
            data=data,
            duration_ms=duration_ms,
        )


def _elapsed_ms(start_time: float) -> int:
    return int((time.time() - start_time) * 1000)
