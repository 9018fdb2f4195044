"""Stylesheet loader: fetch stylesheets and turn them into MJML head markup."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from mailweaver.errors import FetchError
from mailweaver.events import types as events
from mailweaver.stylesheet.extractor import StyleRuleExtractor
from mailweaver.stylesheet.formatter import format_attributes, format_style
from mailweaver.stylesheet.selector import SelectorClassifier
from mailweaver.stylesheet.syntax import SYNTAX_SERVICE_KEY, load_css_syntax

if TYPE_CHECKING:
    from mailweaver.model.context import RenderContext

logger = logging.getLogger(__name__)


class StylesheetLoader:
    """Load stylesheets concurrently and join their head markup in input order.

    A stylesheet that cannot be fetched contributes nothing; it never fails
    the batch. Only an unavailable CSS syntax service propagates.
    """

    def __init__(self, context: RenderContext) -> None:
        self._context = context
        config = context.config
        self._classifier = SelectorClassifier(
            prefix=config.semantic_prefix,
            wildcard_tag=config.wildcard_tag,
            wildcard_class=config.wildcard_class,
            root_matcher=context.page.matches_root,
        )

    async def load(self, paths: Sequence[str], inline: bool = False) -> str:
        """Load *paths*, all with the same inline flag."""
        return await self._gather([(path, inline) for path in paths])

    async def load_declared(
        self, styles: Sequence[str] = (), inline_styles: Sequence[str] = ()
    ) -> str:
        """Load non-inline *styles* then *inline_styles* as one batch."""
        jobs = [(path, False) for path in styles] + [(path, True) for path in inline_styles]
        return await self._gather(jobs)

    async def _gather(self, jobs: list[tuple[str, bool]]) -> str:
        results = await asyncio.gather(*(self._load_one(path, inline) for path, inline in jobs))
        return "".join(results)

    async def _load_one(self, path: str, inline: bool) -> str:
        try:
            resp = await self._context.fetcher.fetch(path)
        except FetchError as exc:
            logger.warning("Failed to load stylesheet %s: %s", path, exc)
            self._context.events.emit(events.StylesheetFailed(path=path, error=str(exc)))
            return ""
        if not resp.ok:
            logger.warning("Failed to load stylesheet %s: HTTP %d", path, resp.status_code)
            self._context.events.emit(
                events.StylesheetFailed(path=path, error=f"HTTP {resp.status_code}")
            )
            return ""

        text = resp.text.strip()
        if not text:
            return ""

        syntax = await self._context.scripts.load(SYNTAX_SERVICE_KEY, load_css_syntax)
        attributes, css = StyleRuleExtractor(syntax, self._classifier).extract(text)
        self._context.events.emit(
            events.StylesheetLoaded(path=path, inline=inline, attribute_count=len(attributes))
        )
        return format_attributes(attributes, self._context.config.wildcard_class) + format_style(
            css, inline
        )
