"""Shared builders for mailweaver tests."""

from __future__ import annotations

import asyncio
from typing import Any

from mailweaver.config import MailConfig
from mailweaver.errors import FetchError
from mailweaver.loader.fetch import FetchResponse
from mailweaver.model.context import RenderContext
from mailweaver.model.tree import Page


class DictFetcher:
    """In-memory fetcher: unknown paths answer 404.

    ``delays`` postpones individual responses so tests can force
    out-of-order completion; ``broken`` paths raise FetchError.
    """

    def __init__(
        self,
        files: dict[str, str] | None = None,
        *,
        delays: dict[str, float] | None = None,
        broken: set[str] | None = None,
    ) -> None:
        self.files = dict(files or {})
        self.delays = dict(delays or {})
        self.broken = set(broken or ())
        self.requested: list[str] = []

    async def fetch(self, path: str) -> FetchResponse:
        self.requested.append(path)
        await asyncio.sleep(self.delays.get(path, 0))
        if path in self.broken:
            raise FetchError(f"connection reset for {path}", path=path)
        if path not in self.files:
            return FetchResponse(path=path, status_code=404)
        return FetchResponse(path=path, status_code=200, text=self.files[path])

    async def aclose(self) -> None:
        return None


def block_wrapper(name: str) -> str:
    return f'<div class="{name}-wrapper"><div class="{name} block" data-block-name="{name}"></div></div>'


def default_wrapper(*children: str) -> str:
    return f'<div class="default-content-wrapper">{"".join(children)}</div>'


def section(*wrappers: str, classes: str = "") -> str:
    cls = f"section {classes}".strip()
    return f'<div class="{cls}">{"".join(wrappers)}</div>'


def page_html(*sections: str, body_class: str = "") -> str:
    body_attr = f' class="{body_class}"' if body_class else ""
    return f"<html><head></head><body{body_attr}><main>{''.join(sections)}</main></body></html>"


def make_context(
    html: str | None = None,
    files: dict[str, str] | None = None,
    *,
    config: MailConfig | None = None,
    fetcher: Any = None,
) -> RenderContext:
    page = Page.from_html(html or page_html())
    return RenderContext(
        config=config or MailConfig(),
        page=page,
        fetcher=fetcher or DictFetcher(files),
    )
