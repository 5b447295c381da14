from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from .config import TradeRepublicConfig
from .exceptions import (
    TradeRepublicAPIError,
    TradeRepublicAuthError,
    TradeRepublicNotFoundError,
    TradeRepublicRateLimitError,
)
from .models import ApiResponse

logger = logging.getLogger(__name__)


class TradeRepublicClient:
    """Async HTTP client for the timeline endpoints.

    Sends an already issued session token as a cookie. Logging in and
    renewing the session happen elsewhere.

    Usage:
        async with TradeRepublicClient(session_token="...") as client:
            page = await client.fetch_timeline_page()
    """

    def __init__(
        self,
        config: TradeRepublicConfig | None = None,
        session_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or TradeRepublicConfig()
        self.session_token = session_token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        logger.info(
            f"Initialized TradeRepublicClient (base_url={self.config.base_url}, "
            f"session={'set' if self.session_token else 'missing'})"
        )

    async def __aenter__(self) -> TradeRepublicClient:
        limits = httpx.Limits(
            max_connections=self.config.max_connections,
            max_keepalive_connections=self.config.max_keepalive_connections,
        )
        headers = {"Accept": "application/json"}
        if self.session_token:
            headers["Cookie"] = f"{self.config.session_cookie_name}={self.session_token}"

        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout_seconds,
            limits=limits,
            headers=headers,
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: Exception | None,
        exc_tb: Any,
    ) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Closed TradeRepublicClient")

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(
                "TradeRepublicClient must be used as async context manager"
            )
        return self._client

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        retry_count = 0
        last_error: Exception | None = None
        rate_limited = False

        while retry_count < self.config.max_retries:
            wait_time = self.config.retry_backoff_seconds * 2**retry_count
            try:
                response = await self.client.request(
                    method=method,
                    url=endpoint,
                    params=params,
                )
            except httpx.TimeoutException as e:
                last_error = e
                retry_count += 1
                if retry_count < self.config.max_retries:
                    logger.warning(f"Timeout on {endpoint}, retrying ({retry_count})...")
                    await asyncio.sleep(wait_time)
                continue
            except httpx.RequestError as e:
                last_error = e
                logger.error(f"Network error on {endpoint}: {e}")
                break

            if response.status_code in (401, 403):
                raise TradeRepublicAuthError(
                    "Session rejected, a new session token is required",
                    status_code=response.status_code,
                )
            elif response.status_code == 404:
                raise TradeRepublicNotFoundError(
                    f"Resource not found: {endpoint}", status_code=404
                )
            elif response.status_code == 429 or response.status_code >= 500:
                rate_limited = response.status_code == 429
                last_error = TradeRepublicAPIError(
                    f"HTTP {response.status_code}", status_code=response.status_code
                )
                retry_count += 1
                if retry_count < self.config.max_retries:
                    logger.warning(
                        f"HTTP {response.status_code} on {endpoint}, "
                        f"retrying in {wait_time}s..."
                    )
                    await asyncio.sleep(wait_time)
                continue

            return self._parse_response(endpoint, response)

        if rate_limited:
            raise TradeRepublicRateLimitError(
                f"Rate limited on {endpoint} after {retry_count} retries", status_code=429
            )
        raise TradeRepublicAPIError(
            f"Request to {endpoint} failed after {retry_count} retries: {last_error}"
        )

    def _parse_response(self, endpoint: str, response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as e:
            raise TradeRepublicAPIError(
                f"Invalid JSON from {endpoint}", status_code=response.status_code
            ) from e

        envelope = ApiResponse.from_api(payload)
        if envelope.is_error or response.is_error:
            error = envelope.error
            message = (error.message if error else None) or envelope.message
            logger.error(f"Trade Republic API error on {endpoint}: {error or message}")
            raise TradeRepublicAPIError(
                message or f"HTTP {response.status_code}",
                status_code=response.status_code,
                code=error.code if error else None,
            )

        if not isinstance(payload, dict):
            raise TradeRepublicAPIError(
                f"Unexpected response type from {endpoint}: {type(payload).__name__}",
                status_code=response.status_code,
            )
        return payload

    async def fetch_timeline_page(self, cursor: str | None = None) -> dict[str, Any]:
        return await self._fetch_page(self.config.timeline_transactions_path, cursor)

    async def fetch_activity_page(self, cursor: str | None = None) -> dict[str, Any]:
        return await self._fetch_page(self.config.timeline_activity_path, cursor)

    async def fetch_detail(self, event_id: str) -> dict[str, Any]:
        endpoint = self.config.timeline_detail_path.format(event_id=event_id)
        return await self._request("GET", endpoint)

    async def _fetch_page(self, endpoint: str, cursor: str | None) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if cursor is not None:
            params["after"] = cursor
        return await self._request("GET", endpoint, params=params or None)


def create_trade_republic_client(
    session_token: str | None = None,
    config: TradeRepublicConfig | None = None,
) -> TradeRepublicClient:
    return TradeRepublicClient(config or TradeRepublicConfig(), session_token)
