"""Extract MJML attribute rules from ordinary stylesheet text.

Rule-sets whose selectors address ``mj-*`` elements or ``.mj-*`` classes
are lifted out of the stylesheet into an :class:`AttributeMap`. Everything
else is printed back unchanged as the residual CSS. Comments are dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from mailweaver.errors import ParseError
from mailweaver.model.attributes import AttributeMap, SemanticTarget
from mailweaver.stylesheet.selector import SelectorClassifier
from mailweaver.stylesheet.syntax import CssSyntax

logger = logging.getLogger(__name__)

_QUOTES = ("'", '"')


def unquote(value: str) -> str:
    """Remove exactly one layer of matching surrounding quotes."""
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value


@dataclass
class _Classified:
    node: Any
    targets: list[SemanticTarget] = field(default_factory=list)
    drop: bool = False


class StyleRuleExtractor:
    """Split a stylesheet into MJML attributes and residual CSS."""

    def __init__(self, syntax: CssSyntax, classifier: SelectorClassifier | None = None) -> None:
        self._syntax = syntax
        self._classifier = classifier or SelectorClassifier()

    def extract(self, css_text: str) -> tuple[AttributeMap, str]:
        """Return ``(attributes, residual_css)`` for *css_text*."""
        classified = [self._classify(node) for node in self._syntax.parse(css_text)]

        attributes = AttributeMap()
        residual: list[Any] = []
        after_removed = False
        for item in classified:
            if item.targets:
                declarations = self._declarations(item.node)
                if declarations:
                    for target in item.targets:
                        attributes.merge(target, declarations)
                after_removed = True
            elif item.drop:
                after_removed = True
            elif after_removed and item.node.type == "whitespace":
                # whitespace that only separated a removed node
                continue
            else:
                residual.append(item.node)
                after_removed = False

        return attributes, self._syntax.print(residual).strip()

    def _classify(self, node: Any) -> _Classified:
        if node.type == "comment":
            return _Classified(node, drop=True)
        if node.type == "error":
            err = ParseError(node.message, line=node.source_line, column=node.source_column)
            logger.warning("Dropping unparseable stylesheet content at %s:%s: %s", err.line, err.column, err)
            return _Classified(node, drop=True)
        if node.type != "qualified-rule":
            return _Classified(node)

        targets: list[SemanticTarget] = []
        for selector in self._syntax.selectors(node):
            target = self._classifier.classify(selector)
            if target is not None:
                targets.append(target)
        return _Classified(node, targets=targets)

    def _declarations(self, rule: Any) -> dict[str, str]:
        declarations: dict[str, str] = {}
        for decl in self._syntax.declarations(rule):
            if decl.type == "declaration":
                declarations[decl.name] = unquote(self._syntax.value_text(decl))
            elif decl.type == "error":
                logger.warning(
                    "Skipping malformed declaration at %s:%s: %s",
                    decl.source_line,
                    decl.source_column,
                    decl.message,
                )
        return declarations
