"""Outbound GET with a timeout and retry on transient failures."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from app import config
from satcore.errors import CatalogFetchError

logger = logging.getLogger(__name__)

# Status codes worth another try; other 4xx answers will not change
RETRYABLE_STATUS = {408, 429, 500, 502, 503, 504}


async def get_with_retry(
    url: str,
    params: dict[str, Any] | None = None,
    timeout: float | None = None,
    retries: int | None = None,
    backoff: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.Response:
    """
    GET `url`, retrying timeouts, transport errors and 5xx/429 answers.

    Raises:
        CatalogFetchError: the request still failed after the last attempt,
            the server answered with a non-retryable status, or httpx failed
            in a way a retry cannot fix (redirect loop, decoding, bad URL).
    """
    timeout = config.FETCH_TIMEOUT if timeout is None else timeout
    retries = max(1, config.FETCH_RETRIES if retries is None else retries)
    backoff = config.FETCH_BACKOFF if backoff is None else backoff

    last_exc: Exception | None = None
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True, transport=transport) as client:
        for attempt in range(1, retries + 1):
            try:
                resp = await client.get(url, params=params)
                resp.raise_for_status()
                return resp
            except httpx.HTTPStatusError as exc:
                if exc.response.status_code not in RETRYABLE_STATUS:
                    raise CatalogFetchError(
                        f"GET {url} answered {exc.response.status_code}"
                    ) from exc
                last_exc = exc
            except httpx.TransportError as exc:
                # TimeoutException is a TransportError
                last_exc = exc
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                # Redirect loop, undecodable body or malformed URL
                raise CatalogFetchError(f"GET {url} failed: {exc}") from exc

            logger.warning("GET %s failed (attempt %d/%d): %s", url, attempt, retries, last_exc)
            if attempt < retries and backoff > 0:
                await asyncio.sleep(backoff * attempt)

    raise CatalogFetchError(f"GET {url} failed after {retries} attempts: {last_exc}") from last_exc
