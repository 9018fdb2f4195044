"""Fetch capability: load stylesheet text relative to the code base."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import httpx

from mailweaver.config import MailConfig
from mailweaver.errors import FetchError


@dataclass(frozen=True)
class FetchResponse:
    """Result of fetching one code-base resource."""

    path: str
    status_code: int
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class Fetcher(Protocol):
    """Anything that can fetch a code-base path such as ``/styles/a.css``."""

    async def fetch(self, path: str) -> FetchResponse: ...


class HttpFetcher:
    """Fetch resources over HTTP with :mod:`httpx`, relative to a base URL."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
            follow_redirects=True,
        )

    async def fetch(self, path: str) -> FetchResponse:
        """GET *path*; transport failures raise :class:`FetchError`."""
        try:
            resp = await self._client.get(path)
        except httpx.HTTPError as exc:
            raise FetchError(f"Request for {path} failed: {exc}", path=path, cause=exc) from exc
        return FetchResponse(path=path, status_code=resp.status_code, text=resp.text)

    async def aclose(self) -> None:
        await self._client.aclose()


class FileFetcher:
    """Fetch resources from a local code-base directory.

    Missing files answer 404 and paths escaping the root answer 403, the
    way a static file server would.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    async def fetch(self, path: str) -> FetchResponse:
        target = (self.root / path.lstrip("/")).resolve()
        if not target.is_relative_to(self.root):
            return FetchResponse(path=path, status_code=403)
        if not target.is_file():
            return FetchResponse(path=path, status_code=404)
        try:
            text = await asyncio.to_thread(target.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise FetchError(f"Reading {path} failed: {exc}", path=path, cause=exc) from exc
        return FetchResponse(path=path, status_code=200, text=text)

    async def aclose(self) -> None:
        return None


def create_fetcher(config: MailConfig) -> HttpFetcher | FileFetcher:
    """Pick an HTTP or file fetcher depending on the configured code base."""
    if config.is_remote:
        return HttpFetcher(config.code_base, timeout=config.fetch_timeout)
    return FileFetcher(config.code_base)
