"""Document assembly: walk sections and wrappers concurrently, fold in source order."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from bs4 import Tag

from mailweaver.assembly.default_content import DefaultContentFolder
from mailweaver.blocks.resolver import BlockResolver
from mailweaver.errors import FATAL_ERRORS
from mailweaver.events import types as events
from mailweaver.loader.styles import StylesheetLoader
from mailweaver.model.context import RenderContext
from mailweaver.model.fragment import Fragment, fold_fragments
from mailweaver.model.tree import Section, WrapperKind, element_children, find_block, wrapper_kind

logger = logging.getLogger(__name__)

_DIVIDER = (
    '<mj-divider mj-class="mj-section-divider" border-width="1px" '
    'border-color="rgb(210,210,210)" width="30%" />'
)


def block_markup(result: Any) -> str:
    """Turn whatever a block's decorate function returned into body markup."""
    if result is None:
        return ""
    return str(result)


class DocumentAssembler:
    """Assemble the page into a ``(body, head)`` fragment.

    Sections, wrappers and stylesheets are processed concurrently; the
    output always follows source order. A failing block contributes an
    empty fragment without affecting its siblings. Only an unavailable
    CSS syntax service or renderer aborts assembly.
    """

    def __init__(
        self,
        context: RenderContext,
        resolver: BlockResolver,
        *,
        styles: StylesheetLoader | None = None,
        folder: DefaultContentFolder | None = None,
    ) -> None:
        self._context = context
        self._resolver = resolver
        self._styles = styles or StylesheetLoader(context)
        config = context.config
        self._folder = folder or DefaultContentFolder(
            text_class=config.text_class,
            image_class=config.image_class,
            button_class=config.button_class,
            page_url=config.page_url,
        )

    async def assemble(self) -> Fragment:
        config = self._context.config
        sections = self._context.page.sections()
        self._context.events.emit(events.AssemblyStarted(section_count=len(sections)))

        global_head, section_fragments = await asyncio.gather(
            self._styles.load_declared(config.global_styles, config.global_inline_styles),
            asyncio.gather(*(self._section(section, len(sections)) for section in sections)),
        )
        folded = fold_fragments(section_fragments)
        result = Fragment(body=folded.body, head=global_head + folded.head)

        self._context.events.emit(
            events.AssemblyCompleted(body_length=len(result.body), head_length=len(result.head))
        )
        return result

    def is_last(self, index: int, count: int) -> bool:
        return index >= count - self._context.config.last_section_span

    async def _section(self, section: Section, count: int) -> Fragment:
        fragments = await asyncio.gather(*(self._wrapper(w, section) for w in section.wrappers))
        folded = fold_fragments(fragments)

        first = section.index == 0
        last = self.is_last(section.index, count)
        classes = ["mj-content-wrapper"]
        if first:
            classes.append("mj-first")
        if last:
            classes.append("mj-last")
        self._context.events.emit(events.SectionAssembled(index=section.index, first=first, last=last))
        return Fragment(
            body=f'<mj-wrapper mj-class="{" ".join(classes)}">{folded.body}</mj-wrapper>',
            head=folded.head,
        )

    async def _wrapper(self, wrapper: Tag, section: Section) -> Fragment:
        kind = wrapper_kind(wrapper)
        if kind is WrapperKind.DEFAULT:
            return Fragment(body=self._default_section(wrapper, section))
        if kind is WrapperKind.BLOCK:
            return await self._block(wrapper)
        return Fragment.empty()

    def _default_section(self, wrapper: Tag, section: Section) -> str:
        classes = []
        if section.index == 0:
            classes.append("mj-first")
        classes.append("mj-content-section")
        classes.extend(f"mj-{c}" for c in section.classes)
        content = self._folder.fold(element_children(wrapper))
        return (
            f'<mj-section mj-class="{" ".join(classes)}">'
            f'<mj-column mj-class="mj-content-column">{content}</mj-column>'
            f"</mj-section>{_DIVIDER}"
        )

    async def _block(self, wrapper: Tag) -> Fragment:
        block = find_block(wrapper)
        if block is None:
            return Fragment.empty()
        try:
            resolution = await self._resolver.resolve(block)
            decorator = resolution.unwrap()
            result, head = await asyncio.gather(
                decorator(block),
                self._styles.load_declared(decorator.styles, decorator.inline_styles),
            )
        except FATAL_ERRORS:
            raise
        except Exception:
            logger.exception("Block %s contributes nothing", block.get("data-block-name"))
            return Fragment.empty()
        return Fragment(body=block_markup(result), head=head)
