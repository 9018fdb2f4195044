"""Render context: the explicit environment threaded through every component."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mailweaver.config import MailConfig
from mailweaver.events.bus import EventBus
from mailweaver.loader.scripts import ScriptRegistry
from mailweaver.model.tree import Page

if TYPE_CHECKING:
    from mailweaver.loader.fetch import Fetcher


@dataclass
class RenderContext:
    """Configuration, page, fetch capability and shared registries for one run."""

    config: MailConfig
    page: Page
    fetcher: Fetcher
    scripts: ScriptRegistry = field(default_factory=ScriptRegistry)
    events: EventBus = field(default_factory=EventBus)
