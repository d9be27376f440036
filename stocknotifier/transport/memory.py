# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
In-memory transport - a scripted update source and a recording sink.

Useful for tests and local demos. The source replays a queue of updates,
tombstones, and errors in order, then raises EndOfStream. A blocking source
instead waits for more items to be pushed until the read is cancelled.
"""

import asyncio
from collections import deque
from typing import Deque, List

from stocknotifier.exceptions import EndOfStream
from stocknotifier.stock import Notification, Update
from stocknotifier.transport import wait_or_cancel

_TOMBSTONE = object()


class MemoryUpdateSource:
    """Replays queued updates, tombstones, and errors."""

    def __init__(self, items: List[object] | None = None, block_when_empty: bool = False):
        self._queue: Deque[object] = deque(items or [])
        self._block_when_empty = block_when_empty
        self._available = asyncio.Event()
        self.reads = 0

    def _push(self, item: object) -> None:
        self._queue.append(item)
        self._available.set()

    def add_update(self, update: Update) -> None:
        self._push(update)

    def add_tombstone(self) -> None:
        self._push(_TOMBSTONE)

    def add_error(self, error: Exception) -> None:
        self._push(error)

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        pass

    async def _next(self) -> Update | None:
        while not self._queue:
            if not self._block_when_empty:
                raise EndOfStream()
            # Only a push or cancellation gets us out
            self._available.clear()
            await self._available.wait()

        self.reads += 1
        item = self._queue.popleft()
        if item is _TOMBSTONE:
            return None
        if isinstance(item, Exception):
            raise item
        return item  # type: ignore[return-value]

    async def read_update(self, stop_event: asyncio.Event | None = None) -> Update | None:
        return await wait_or_cancel(self._next(), stop_event)


class MemoryNotificationSink:
    """Collects written notifications; can be primed to fail."""

    def __init__(self) -> None:
        self.written: List[Notification] = []
        self.next_errors: Deque[Exception] = deque()

    def fail_next(self, error: Exception) -> None:
        self.next_errors.append(error)

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        pass

    async def _write(self, notification: Notification) -> None:
        if self.next_errors:
            raise self.next_errors.popleft()
        self.written.append(notification)

    async def write_notification(
        self,
        notification: Notification,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        await wait_or_cancel(self._write(notification), stop_event)
