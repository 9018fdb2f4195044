"""Fragment model: the (body, head) markup pair folded at every tree level."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Fragment:
    """A pair of body and head markup."""

    body: str = ""
    head: str = ""

    @classmethod
    def empty(cls) -> Fragment:
        return cls()

    def __add__(self, other: Fragment) -> Fragment:
        return Fragment(body=self.body + other.body, head=self.head + other.head)


def fold_fragments(fragments: Iterable[Fragment | None]) -> Fragment:
    """Concatenate fragments in the given order; ``None`` counts as empty."""
    bodies: list[str] = []
    heads: list[str] = []
    for frag in fragments:
        if frag is None:
            continue
        bodies.append(frag.body)
        heads.append(frag.head)
    return Fragment(body="".join(bodies), head="".join(heads))
