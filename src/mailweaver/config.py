"""Settings for a mailweaver run."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MailConfig:
    code_base: str = "."  # URL prefix or local directory holding /styles and /blocks
    page_url: str = ""  # used to resolve relative image sources
    semantic_prefix: str = "mj-"
    wildcard_tag: str = "mj-all"
    wildcard_class: str = "*"
    global_styles: tuple[str, ...] = ("/styles/email-styles.css",)
    global_inline_styles: tuple[str, ...] = ("/styles/email-inline-styles.css",)
    blocks_path: str = "/blocks"
    body_width: int = 800
    # A section counts as "last" when it is within this many of the end.
    # The default of 2 assumes a trailing footer section.
    last_section_span: int = 2
    text_class: str = "mj-content-text"
    image_class: str = "mj-content-image"
    button_class: str = "mj-content-button"
    renderer_command: tuple[str, ...] = ("mjml", "-i", "-s", "--config.minify", "true")
    fetch_timeout: float = 10.0

    @property
    def is_remote(self) -> bool:
        return self.code_base.startswith(("http://", "https://"))
