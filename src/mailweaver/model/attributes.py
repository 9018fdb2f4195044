"""Attribute model: selector elements, semantic targets and the attribute map."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class SelectorElement:
    """One simple selector of a selector path.

    ``value`` keeps the selector's textual form: ``mj-text`` for a tag,
    ``.mj-hero`` for a class, ``#id``, ``*``, ``[attr]`` or ``:pseudo``.
    """

    kind: str  # "tag", "class", "id", "universal", "attribute", "pseudo"
    value: str


@dataclass(frozen=True)
class SemanticTarget:
    """An output element/class a selector resolves to."""

    tag: str
    css_class: str


class AttributeMap:
    """tag -> class -> property -> value, in insertion order.

    Merging is property-level last-write-wins: a property keeps the
    position of its first write and the value of its last.
    """

    def __init__(self) -> None:
        self._data: dict[str, dict[str, dict[str, str]]] = {}

    def merge(self, target: SemanticTarget, declarations: Mapping[str, str]) -> None:
        classes = self._data.setdefault(target.tag, {})
        props = classes.setdefault(target.css_class, {})
        props.update(declarations)

    def get(self, tag: str, css_class: str) -> dict[str, str] | None:
        props = self._data.get(tag, {}).get(css_class)
        return dict(props) if props is not None else None

    def tags(self) -> list[str]:
        return list(self._data)

    def entries(self) -> Iterator[tuple[str, str, dict[str, str]]]:
        """Yield ``(tag, class, properties)`` tags-first in insertion order."""
        for tag, classes in self._data.items():
            for css_class, props in classes.items():
                yield tag, css_class, dict(props)

    def to_dict(self) -> dict[str, dict[str, dict[str, str]]]:
        return {tag: {c: dict(p) for c, p in classes.items()} for tag, classes in self._data.items()}

    def __bool__(self) -> bool:
        return bool(self._data)

    def __len__(self) -> int:
        return sum(len(classes) for classes in self._data.values())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AttributeMap):
            return self.to_dict() == other.to_dict()
        if isinstance(other, dict):
            return self.to_dict() == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"AttributeMap({self.to_dict()!r})"
