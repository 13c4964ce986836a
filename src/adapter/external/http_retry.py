"""Shared HTTP helpers for identity provider adapters."""

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

API_TIMEOUT_SECONDS = 5.0


@retry(
    retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=4),
    reraise=True,
)
async def get_with_retry(
    client: httpx.AsyncClient, url: str, params: dict[str, str] | None = None,
) -> httpx.Response:
    """GET with automatic retry on transient failures."""
    return await client.get(url, params=params)
