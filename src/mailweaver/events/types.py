"""Event types emitted while assembling a document."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AssemblyStarted:
    section_count: int


@dataclass(frozen=True)
class AssemblyCompleted:
    body_length: int
    head_length: int


@dataclass(frozen=True)
class SectionAssembled:
    index: int
    first: bool
    last: bool


@dataclass(frozen=True)
class StylesheetLoaded:
    path: str
    inline: bool
    attribute_count: int


@dataclass(frozen=True)
class StylesheetFailed:
    path: str
    error: str


@dataclass(frozen=True)
class BlockResolved:
    block_name: str
    styles: tuple[str, ...]
    inline_styles: tuple[str, ...]


@dataclass(frozen=True)
class BlockFailed:
    block_name: str
    error: str
