"""Selector paths: parsing with Lark and classification into semantic targets."""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Callable

from lark import Lark, Token, Transformer

from mailweaver.errors import ParseError
from mailweaver.model.attributes import SelectorElement, SemanticTarget

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"

RootMatcher = Callable[[str], bool]


class SelectorTransformer(Transformer):  # type: ignore[type-arg]
    """Turn a selector parse tree into a flat list of SelectorElements."""

    def tag(self, items: list[Token]) -> SelectorElement:
        return SelectorElement(kind="tag", value=str(items[0]))

    def cls(self, items: list[Token]) -> SelectorElement:
        return SelectorElement(kind="class", value="." + str(items[0]))

    def id(self, items: list[Token]) -> SelectorElement:
        return SelectorElement(kind="id", value="#" + str(items[0]))

    def universal(self, items: list[Token]) -> SelectorElement:
        return SelectorElement(kind="universal", value="*")

    def attribute(self, items: list[Token]) -> SelectorElement:
        return SelectorElement(kind="attribute", value=str(items[0]))

    def pseudo(self, items: list[Token]) -> SelectorElement:
        return SelectorElement(kind="pseudo", value=str(items[0]))

    def start(self, items: list[SelectorElement]) -> list[SelectorElement]:
        return list(items)


@functools.cache
def _parser() -> Lark:
    return Lark(GRAMMAR_PATH.read_text(), parser="lalr", start="start")


def parse_selector(source: str) -> list[SelectorElement]:
    """Parse one selector (no commas) into its simple selector elements."""
    try:
        tree = _parser().parse(source)
    except Exception as e:
        line = getattr(e, "line", None)
        column = getattr(e, "column", None)
        raise ParseError(f"Invalid selector {source!r}: {e}", line=line, column=column, cause=e) from e
    return SelectorTransformer().transform(tree)


def _never(selector: str) -> bool:
    return False


class SelectorClassifier:
    """Decide which semantic target, if any, a selector path addresses.

    Rules, applied to the first two elements of the path:

    1. ``.mj-foo`` alone maps to ``(mj-all, foo)``. A second element or a
       nested dot in the class name is rejected.
    2. ``mj-foo`` maps to ``(mj-foo, *)``. Followed by a class it is only
       accepted for the wildcard tag: ``mj-all.bar`` maps to
       ``(mj-all, bar)``.
    3. When the first element is neither, the second element is one of
       the above and the first element matches the page root (for example
       ``body .mj-foo``), the rules are applied to elements two and three.

    Anything else addresses nothing.
    """

    def __init__(
        self,
        *,
        prefix: str = "mj-",
        wildcard_tag: str = "mj-all",
        wildcard_class: str = "*",
        root_matcher: RootMatcher | None = None,
    ) -> None:
        self.prefix = prefix
        self.wildcard_tag = wildcard_tag
        self.wildcard_class = wildcard_class
        self._root_matcher = root_matcher or _never

    def is_tag_marker(self, element: SelectorElement | None) -> bool:
        return element is not None and element.kind == "tag" and element.value.startswith(self.prefix)

    def is_class_marker(self, element: SelectorElement | None) -> bool:
        return (
            element is not None
            and element.kind == "class"
            and element.value.startswith("." + self.prefix)
        )

    def _is_marker(self, element: SelectorElement | None) -> bool:
        return self.is_tag_marker(element) or self.is_class_marker(element)

    def classify(self, selector: str) -> SemanticTarget | None:
        """Return the target addressed by *selector*, or None."""
        try:
            elements = parse_selector(selector)
        except ParseError as exc:
            logger.warning("Skipping malformed selector: %s", exc)
            return None
        return self.classify_elements(elements, selector)

    def classify_elements(
        self, elements: list[SelectorElement], selector: str = ""
    ) -> SemanticTarget | None:
        first, second, third = (list(elements[:3]) + [None, None, None])[:3]
        if self._is_marker(first):
            return self._to_target(first, second, selector)  # type: ignore[arg-type]
        if self._is_marker(second) and first is not None and self._matches_root(first.value):
            return self._to_target(second, third, selector)  # type: ignore[arg-type]
        return None

    def _matches_root(self, value: str) -> bool:
        try:
            return bool(self._root_matcher(value))
        except Exception:
            logger.warning("Root matcher failed for %r", value, exc_info=True)
            return False

    def _to_target(
        self, first: SelectorElement, second: SelectorElement | None, selector: str
    ) -> SemanticTarget | None:
        if self.is_class_marker(first):
            class_name = first.value[1:]
            if second is not None or "." in class_name:
                logger.warning("Chaining mj-class selectors is not supported: %r", selector)
                return None
            return SemanticTarget(tag=self.wildcard_tag, css_class=class_name)

        if second is not None and second.kind == "class":
            if first.value != self.wildcard_tag:
                logger.warning(
                    "Classes are only supported on %s, not %s: %r",
                    self.wildcard_tag,
                    first.value,
                    selector,
                )
                return None
            return SemanticTarget(tag=first.value, css_class=second.value[1:])
        return SemanticTarget(tag=first.value, css_class=self.wildcard_class)
