"""Block resolution: block element -> decorator with declared stylesheets."""

from __future__ import annotations

import inspect
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from bs4 import Tag

from mailweaver.blocks.modules import ModuleLoader
from mailweaver.errors import (
    FATAL_ERRORS,
    DecorationError,
    MailweaverError,
    ModuleContractError,
    ModuleLoadError,
)
from mailweaver.events import types as events
from mailweaver.model.tree import (
    BLOCK_NAME_ATTR,
    BlockStatus,
    get_block_status,
    set_block_status,
)

if TYPE_CHECKING:
    from mailweaver.model.context import RenderContext

logger = logging.getLogger(__name__)

BLOCK_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


@dataclass
class BlockDecorator:
    """Callable wrapper around a block module's ``decorate`` function.

    Failures raised by the transform are logged and turned into ``None``.
    """

    name: str
    transform: Callable[[Tag], Any] | None = None
    styles: tuple[str, ...] = ()
    inline_styles: tuple[str, ...] = ()

    @classmethod
    def noop(cls, name: str) -> BlockDecorator:
        return cls(name=name)

    async def __call__(self, element: Tag) -> Any:
        if self.transform is None:
            return None
        try:
            result = self.transform(element)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            err = DecorationError(f"Decorating block {self.name} failed: {exc}", block_name=self.name, cause=exc)
            logger.warning("%s", err, exc_info=True)
            return None
        return result


@dataclass(frozen=True)
class Resolution:
    """Either a resolved decorator or the error that prevented it."""

    decorator: BlockDecorator | None = None
    error: MailweaverError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> BlockDecorator:
        if self.error is not None:
            raise self.error
        assert self.decorator is not None
        return self.decorator


def _declared_paths(module: Any, attr: str, name: str) -> list[str] | None:
    value = getattr(module, attr, None)
    if value is None:
        return None
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ModuleContractError(
            f"Block {name} declares {attr} as {type(value).__name__}, expected a list of paths",
            block_name=name,
        )
    if not all(isinstance(path, str) for path in value):
        raise ModuleContractError(f"Block {name} declares non-string {attr} entries", block_name=name)
    return list(value)


class BlockResolver:
    """Resolve block elements to decorators through a pluggable module loader.

    The element's ``data-block-status`` marker guards against resolving
    the same element twice concurrently. The check and the update are not
    atomic across suspension points.
    """

    def __init__(self, context: RenderContext, loader: ModuleLoader) -> None:
        self._context = context
        self._loader = loader

    async def resolve(self, block: Tag) -> Resolution:
        name = str(block.get(BLOCK_NAME_ATTR) or "")
        if get_block_status(block) is BlockStatus.LOADING:
            logger.warning("Tried to load block twice: %s", name)
            return Resolution(decorator=BlockDecorator.noop(name))

        set_block_status(block, BlockStatus.LOADING)
        try:
            decorator = await self._load(name)
        except FATAL_ERRORS:
            raise
        except ModuleLoadError as exc:
            return self._failed(name, exc)
        except Exception as exc:
            return self._failed(
                name,
                ModuleLoadError(f"Loading block {name} failed: {exc}", block_name=name, cause=exc),
            )
        finally:
            set_block_status(block, BlockStatus.LOADED)

        self._context.events.emit(
            events.BlockResolved(
                block_name=name,
                styles=decorator.styles,
                inline_styles=decorator.inline_styles,
            )
        )
        return Resolution(decorator=decorator)

    def _failed(self, name: str, exc: ModuleLoadError) -> Resolution:
        logger.warning("Failed to load block %s: %s", name, exc)
        self._context.events.emit(events.BlockFailed(block_name=name, error=str(exc)))
        return Resolution(error=exc)

    async def _load(self, name: str) -> BlockDecorator:
        if not BLOCK_NAME_RE.match(name):
            raise ModuleLoadError(f"Invalid block name {name!r}", block_name=name)

        module = await self._loader.load(name)
        transform = getattr(module, "decorate", None)
        if not callable(transform):
            raise ModuleContractError(f"Block {name} has no decorate function", block_name=name)

        folder = f"{self._context.config.blocks_path.rstrip('/')}/{name}"
        styles = _declared_paths(module, "styles", name)
        inline_styles = _declared_paths(module, "inline_styles", name)
        decorator = BlockDecorator(name=name, transform=transform)
        if styles is not None:
            decorator.styles = tuple(f"{folder}/{s}" for s in styles)
        if inline_styles is not None:
            decorator.inline_styles = tuple(f"{folder}/{s}" for s in inline_styles)
        if styles is None and inline_styles is None:
            decorator.inline_styles = (f"{folder}/{name}.css",)
        return decorator
