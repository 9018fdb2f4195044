"""Root MJML template."""

from __future__ import annotations

from collections.abc import Sequence
from html import escape

_TEMPLATE = """<mjml>
  <mj-head>
    {head}
  </mj-head>
  <mj-body width="{width}" css-class="{classes}">
    {body}
  </mj-body>
</mjml>
"""


def wrap_document(head: str, body: str, body_classes: Sequence[str] = (), width: int = 800) -> str:
    """Wrap assembled head and body markup in the root ``<mjml>`` element."""
    return _TEMPLATE.format(
        head=head,
        body=body,
        width=width,
        classes=escape(" ".join(body_classes), quote=True),
    )
