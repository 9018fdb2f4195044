"""MailPipeline: page -> assembled MJML -> rendered HTML."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from mailweaver.assembly.assembler import DocumentAssembler
from mailweaver.assembly.template import wrap_document
from mailweaver.blocks.modules import FileModuleLoader, ModuleLoader
from mailweaver.blocks.resolver import BlockResolver
from mailweaver.config import MailConfig
from mailweaver.events.bus import EventBus
from mailweaver.loader.fetch import Fetcher, create_fetcher
from mailweaver.loader.scripts import ScriptRegistry
from mailweaver.model.context import RenderContext
from mailweaver.model.tree import Page
from mailweaver.render.renderer import Renderer, load_cli_renderer, renderer_key

logger = logging.getLogger(__name__)

RendererFactory = Callable[[], Awaitable[Renderer]]


class MailPipeline:
    """Wire the components for a code base and run them over pages.

    Args:
        config: Settings for the run.
        fetcher: Fetch capability. Derived from ``config.code_base`` if None.
        module_loader: Block module loader. Required for a remote code base;
            a local code base defaults to loading ``blocks/<name>/<name>.py``.
        renderer_factory: Coroutine factory producing the renderer. Defaults
            to the ``mjml`` command from ``config.renderer_command``.
        scripts: Shared single-flight registry for service loads.
        events: Event bus receiving assembly events.
    """

    def __init__(
        self,
        config: MailConfig,
        *,
        fetcher: Fetcher | None = None,
        module_loader: ModuleLoader | None = None,
        renderer_factory: RendererFactory | None = None,
        scripts: ScriptRegistry | None = None,
        events: EventBus | None = None,
    ) -> None:
        if module_loader is None:
            if config.is_remote:
                raise ValueError("A module_loader is required for a remote code base")
            module_loader = FileModuleLoader(config.code_base, config.blocks_path)
        self.config = config
        self.module_loader = module_loader
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or create_fetcher(config)
        self._renderer_factory = renderer_factory or (
            lambda: load_cli_renderer(config.renderer_command)
        )
        self.scripts = scripts or ScriptRegistry()
        self.events = events or EventBus()

    def context_for(self, page: Page) -> RenderContext:
        return RenderContext(
            config=self.config,
            page=page,
            fetcher=self.fetcher,
            scripts=self.scripts,
            events=self.events,
        )

    async def to_mjml(self, page: Page) -> str:
        """Assemble *page* and wrap it in the root template."""
        context = self.context_for(page)
        assembler = DocumentAssembler(context, BlockResolver(context, self.module_loader))
        fragment = await assembler.assemble()
        mjml = wrap_document(
            fragment.head, fragment.body, page.body_classes, width=self.config.body_width
        )
        logger.debug("Assembled MJML:\n%s", mjml)
        return mjml

    async def render(self, page: Page) -> str:
        """Assemble *page* and render it; renderer failures are fatal."""
        mjml, renderer = await asyncio.gather(
            self.to_mjml(page),
            self.scripts.load(renderer_key(self.config.renderer_command), self._renderer_factory),
        )
        return await renderer.render(mjml)

    async def aclose(self) -> None:
        if self._owns_fetcher:
            await self.fetcher.aclose()  # type: ignore[attr-defined]
