"""Keyed single-flight registry for third-party service loads."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ScriptRegistry:
    """Share one in-flight or finished load per key.

    Concurrent callers asking for the same key await the same task. The
    outcome is cached for the registry's lifetime, failures included, so
    a service that failed to load keeps failing for that key.
    """

    def __init__(self) -> None:
        self._loads: dict[str, asyncio.Future[Any]] = {}

    async def load(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        task = self._loads.get(key)
        if task is None:
            logger.debug("Loading %s", key)
            task = asyncio.ensure_future(factory())
            self._loads[key] = task
        return await task

    def __contains__(self, key: str) -> bool:
        return key in self._loads

    def __len__(self) -> int:
        return len(self._loads)
