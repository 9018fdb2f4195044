"""Content tree accessor: sections, wrappers and blocks of a decorated page."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

import soupsieve
from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

BLOCK_NAME_ATTR = "data-block-name"
BLOCK_STATUS_ATTR = "data-block-status"


class WrapperKind(Enum):
    """How a section child is turned into markup."""

    DEFAULT = "default"
    BLOCK = "block"
    OTHER = "other"


class BlockStatus(Enum):
    """Resolution marker stored on a block element."""

    UNSET = ""
    LOADING = "loading"
    LOADED = "loaded"


def _classes(tag: Tag) -> list[str]:
    value = tag.get("class") or []
    if isinstance(value, str):
        return value.split()
    return list(value)


def wrapper_kind(wrapper: Tag) -> WrapperKind:
    """Classify a section child as default content, block, or anything else."""
    if "default-content-wrapper" in _classes(wrapper):
        return WrapperKind.DEFAULT
    if find_block(wrapper) is not None:
        return WrapperKind.BLOCK
    return WrapperKind.OTHER


def find_block(wrapper: Tag) -> Tag | None:
    """Return the first ``.block`` element inside *wrapper*, if any."""
    return wrapper.find(lambda t: isinstance(t, Tag) and "block" in _classes(t))


def element_children(tag: Tag) -> list[Tag]:
    """Return the element children of *tag*, skipping text and comments."""
    return [child for child in tag.children if isinstance(child, Tag)]


def get_block_status(block: Tag) -> BlockStatus:
    raw = block.get(BLOCK_STATUS_ATTR) or ""
    try:
        return BlockStatus(raw)
    except ValueError:
        return BlockStatus.UNSET


def set_block_status(block: Tag, status: BlockStatus) -> None:
    block[BLOCK_STATUS_ATTR] = status.value


@dataclass
class Section:
    """One section of the page, in source order."""

    element: Tag
    index: int

    @property
    def classes(self) -> list[str]:
        return _classes(self.element)

    @property
    def wrappers(self) -> list[Tag]:
        return element_children(self.element)


class Page:
    """Read access to a decorated page.

    The page must already carry the structure produced by the decoration
    pass: ``main > .section`` children holding ``.default-content-wrapper``
    or block wrappers with a ``.block`` element.
    """

    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup
        self.body: Tag | None = soup.body
        main = soup.find("main")
        self.main: Tag | None = main if isinstance(main, Tag) else None

    @classmethod
    def from_html(cls, html: str) -> Page:
        return cls(BeautifulSoup(html, "html.parser"))

    @property
    def body_classes(self) -> list[str]:
        if self.body is None:
            return []
        return _classes(self.body)

    def sections(self) -> list[Section]:
        """Return the ``.section`` children of ``<main>`` in source order."""
        if self.main is None:
            return []
        found = [
            child for child in element_children(self.main) if "section" in _classes(child)
        ]
        return [Section(element=el, index=i) for i, el in enumerate(found)]

    def matches_root(self, selector: str) -> bool:
        """Return True if *selector* matches the page ``<body>``.

        An invalid selector is a non-match.
        """
        if self.body is None or not selector:
            return False
        try:
            return soupsieve.match(selector, self.body)
        except soupsieve.SelectorSyntaxError:
            logger.warning("Ignoring unparseable root selector %r", selector)
            return False
