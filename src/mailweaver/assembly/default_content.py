"""Fold the children of a default-content wrapper into MJML content elements."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from html import escape
from urllib.parse import urljoin

from bs4 import Tag


def _mj_class(css_class: str) -> str:
    return f' mj-class="{escape(css_class, quote=True)}"' if css_class else ""


@dataclass
class _FoldState:
    """Emitted fragments plus the currently open text container, if any."""

    parts: list[str] = field(default_factory=list)
    text: list[str] | None = None

    def close_text(self, css_class: str) -> None:
        if self.text is not None:
            self.parts.append(f"<mj-text{_mj_class(css_class)}>{''.join(self.text)}</mj-text>")
            self.text = None


class DefaultContentFolder:
    """Left fold over wrapper children.

    Images become ``<mj-image>``, ``.button-container`` paragraphs become
    ``<mj-button>``, anything else is text. Consecutive text children share
    one ``<mj-text>`` container.
    """

    def __init__(
        self,
        *,
        text_class: str = "",
        image_class: str = "",
        button_class: str = "",
        page_url: str = "",
    ) -> None:
        self.text_class = text_class
        self.image_class = image_class
        self.button_class = button_class
        self.page_url = page_url

    def fold(self, children: Iterable[Tag]) -> str:
        state = _FoldState()
        for child in children:
            self.step(state, child)
        state.close_text(self.text_class)
        return "".join(state.parts)

    def step(self, state: _FoldState, child: Tag) -> None:
        img = child if child.name == "img" else child.find("img")
        if isinstance(img, Tag):
            state.close_text(self.text_class)
            state.parts.append(self._image(img))
            return
        link = child.find("a", recursive=False) if "button-container" in (child.get("class") or []) else None
        if isinstance(link, Tag):
            state.close_text(self.text_class)
            state.parts.append(self._button(link))
            return
        if state.text is None:
            state.text = []
        state.text.append(str(child))

    def _resolve(self, url: str) -> str:
        return urljoin(self.page_url, url) if self.page_url else url

    def _image(self, img: Tag) -> str:
        src = self._resolve(str(img.get("src") or ""))
        return f'<mj-image{_mj_class(self.image_class)} src="{escape(src, quote=True)}" />'

    def _button(self, link: Tag) -> str:
        href = self._resolve(str(link.get("href") or ""))
        label = escape(link.get_text(strip=True))
        return f'<mj-button{_mj_class(self.button_class)} href="{escape(href, quote=True)}">{label}</mj-button>'
