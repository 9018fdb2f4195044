"""Renderers turn the MJML document into deliverable HTML."""

from __future__ import annotations

import asyncio
import logging
import shutil
from collections.abc import Sequence
from typing import Protocol

from mailweaver.errors import RenderError, ServiceUnavailableError

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """Protocol for MJML renderers."""

    async def render(self, mjml: str) -> str: ...


class MjmlCliRenderer:
    """Pipe the document through the ``mjml`` command line tool.

    The document is written to stdin and the HTML read from stdout. A
    non-zero exit status raises :class:`RenderError`.
    """

    def __init__(self, command: Sequence[str] = ("mjml", "-i", "-s")) -> None:
        self.command = tuple(command)

    async def render(self, mjml: str) -> str:
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ServiceUnavailableError(
                f"Cannot start renderer {self.command[0]!r}: {exc}", service="renderer", cause=exc
            ) from exc
        stdout, stderr = await proc.communicate(mjml.encode("utf-8"))
        if proc.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            raise RenderError(
                f"Renderer exited with status {proc.returncode}: {message}",
                exit_code=proc.returncode,
                stderr=message,
            )
        if stderr:
            logger.warning("Renderer reported: %s", stderr.decode("utf-8", errors="replace").strip())
        return stdout.decode("utf-8")


def renderer_key(command: Sequence[str]) -> str:
    return "renderer:" + " ".join(command)


async def load_cli_renderer(command: Sequence[str]) -> MjmlCliRenderer:
    """Locate the renderer executable; its absence is fatal."""
    if not command or shutil.which(command[0]) is None:
        name = command[0] if command else "<empty>"
        raise ServiceUnavailableError(f"Renderer executable {name!r} not found", service="renderer")
    return MjmlCliRenderer(command)
