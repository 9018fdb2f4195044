"""Render extracted attributes and residual CSS as MJML head markup."""

from __future__ import annotations

from html import escape

from mailweaver.model.attributes import AttributeMap


def _attrs(properties: dict[str, str]) -> str:
    return " ".join(f'{name}="{escape(value, quote=True)}"' for name, value in properties.items())


def format_attributes(attributes: AttributeMap, wildcard_class: str = "*") -> str:
    """Render *attributes* as an ``<mj-attributes>`` block.

    Wildcard-class entries become attributes on an element named for the
    tag; named classes become ``<mj-class name="...">`` entries. An empty
    map renders as the empty string.
    """
    if not attributes:
        return ""
    lines = ["<mj-attributes>"]
    for tag, css_class, properties in attributes.entries():
        if css_class == wildcard_class:
            opening = f"<{tag}"
        else:
            opening = f'<mj-class name="{escape(css_class, quote=True)}"'
        rendered = _attrs(properties)
        lines.append(f"{opening} {rendered}/>" if rendered else f"{opening}/>")
    lines.append("</mj-attributes>")
    return "\n".join(lines) + "\n"


def format_style(css: str, inline: bool = False) -> str:
    """Wrap residual CSS in an ``<mj-style>`` block; empty CSS renders nothing."""
    if not css.strip():
        return ""
    marker = ' inline="inline"' if inline else ""
    return f"\n<mj-style{marker}>\n{css}\n</mj-style>\n"
