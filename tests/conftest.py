from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest
from click.testing import CliRunner


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


def make_transport(
    files: dict[str, str | None], requested: list[str] | None = None
) -> httpx.MockTransport:
    """Serve `files` keyed by URL; unknown URLs answer 404.

    A value of None makes the request fail with a connection error.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if requested is not None:
            requested.append(url)
        if url not in files:
            return httpx.Response(404, text="404: Not Found")
        if files[url] is None:
            raise httpx.ConnectError("connection reset", request=request)
        return httpx.Response(200, text=files[url])

    return httpx.MockTransport(handler)


@pytest.fixture()
def client_factory() -> Callable[..., httpx.AsyncClient]:
    """Builds async clients backed by an in-memory file map."""

    def factory(
        files: dict[str, str | None], requested: list[str] | None = None
    ) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=make_transport(files, requested))

    return factory
