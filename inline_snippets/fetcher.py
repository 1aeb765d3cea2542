"""Retrieval of raw file content over HTTP."""

from __future__ import annotations

import httpx
from loguru import logger

from .config import SnippetConfig
from .exceptions import FetchError


def open_client(config: SnippetConfig | None = None) -> httpx.AsyncClient:
    """Create the HTTP client shared by all fetches of one transform run."""
    config = config or SnippetConfig()
    return httpx.AsyncClient(timeout=config.timeout, follow_redirects=True)


async def fetch_content(raw_url: str, client: httpx.AsyncClient) -> str:
    """Fetch the full text served at `raw_url`.

    A single attempt is made; nothing is cached.

    Args:
        raw_url: Raw-content URL to request.
        client: Client used for the request.

    Returns:
        str: Response body decoded as text.

    Raises:
        FetchError: If the URL cannot be requested, the request fails at the
            transport level, or the response status is not a success. The
            original exception is chained as the cause.

    Examples:
        async with open_client() as client:
            text = await fetch_content("https://raw.githubusercontent.com/o/r/main/a.py", client)
    """
    logger.debug(f"Fetching {raw_url}")
    try:
        response = await client.get(raw_url)
        response.raise_for_status()
    except httpx.HTTPStatusError as error:
        raise FetchError(raw_url, error.response.status_code) from error
    except (httpx.HTTPError, httpx.InvalidURL) as error:
        raise FetchError(raw_url) from error

    return response.text
