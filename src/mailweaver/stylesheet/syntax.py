"""CSS syntax service: parse and print stylesheets through tinycss2."""

from __future__ import annotations

import importlib
from types import ModuleType
from typing import Any

from mailweaver.errors import ServiceUnavailableError

SYNTAX_SERVICE_KEY = "css-syntax:tinycss2"


class CssSyntax:
    """Thin facade over tinycss2.

    Nodes are tinycss2 AST nodes; callers only look at ``node.type``
    (``qualified-rule``, ``at-rule``, ``comment``, ``whitespace``,
    ``declaration``, ``error``) and the attributes documented by tinycss2.
    """

    def __init__(self, module: ModuleType) -> None:
        self._css = module

    def parse(self, text: str) -> list[Any]:
        """Parse a stylesheet into a mutable list of top-level nodes."""
        return list(self._css.parse_stylesheet(text, skip_comments=False, skip_whitespace=False))

    def print(self, nodes: list[Any]) -> str:
        """Serialize nodes back to CSS text."""
        return self._css.serialize(nodes)

    def selectors(self, rule: Any) -> list[str]:
        """Split a qualified rule's prelude into its comma-separated selectors, minus comments."""
        groups: list[list[Any]] = [[]]
        for token in rule.prelude:
            if token.type == "comment":
                continue
            if token.type == "literal" and token.value == ",":
                groups.append([])
            else:
                groups[-1].append(token)
        return [self._css.serialize(group).strip() for group in groups]

    def declarations(self, rule: Any) -> list[Any]:
        """Parse a qualified rule's block into declarations (and parse errors)."""
        return list(
            self._css.parse_declaration_list(rule.content, skip_comments=True, skip_whitespace=True)
        )

    def value_text(self, declaration: Any) -> str:
        return self._css.serialize(declaration.value).strip()


async def load_css_syntax() -> CssSyntax:
    """Load the syntax service; its absence is fatal for the pipeline."""
    try:
        module = importlib.import_module("tinycss2")
    except ImportError as exc:
        raise ServiceUnavailableError(
            "CSS syntax service (tinycss2) is not available", service="css-syntax", cause=exc
        ) from exc
    return CssSyntax(module)
