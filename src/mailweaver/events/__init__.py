"""Event system: bus and event types for document assembly."""

from mailweaver.events.bus import EventBus
from mailweaver.events.types import (
    AssemblyCompleted,
    AssemblyStarted,
    BlockFailed,
    BlockResolved,
    SectionAssembled,
    StylesheetFailed,
    StylesheetLoaded,
)

__all__ = [
    "EventBus",
    "AssemblyCompleted",
    "AssemblyStarted",
    "BlockFailed",
    "BlockResolved",
    "SectionAssembled",
    "StylesheetFailed",
    "StylesheetLoaded",
]
