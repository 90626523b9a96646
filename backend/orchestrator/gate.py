"""
One-shot completion gate.

Several sources race to finish a wait (connectivity callback, poll tick,
poll timeout). The gate accepts the first resolution and ignores the rest.

Rules:
- resolve()/fail() are safe to call from any thread.
- The first call wins; later calls return False and have no effect.
- The winning value is delivered on the owning event loop.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Generic, TypeVar

T = TypeVar("T")


class CompletionGate(Generic[T]):
    """Single-resolution future guarded by an atomic flag."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._future: asyncio.Future[T] = loop.create_future()
        self._lock = threading.Lock()
        self._closed = False
        self._source: str | None = None

    # ------------------------------------------------------------------
    # Producers
    # ------------------------------------------------------------------

    def resolve(self, value: T, *, source: str) -> bool:
        """Complete the gate with a value. Returns True if this call won."""
        if not self._claim(source):
            return False
        self._loop.call_soon_threadsafe(self._set_result, value)
        return True

    def fail(self, exc: BaseException, *, source: str) -> bool:
        """Complete the gate with an exception. Returns True if this call won."""
        if not self._claim(source):
            return False
        self._loop.call_soon_threadsafe(self._set_exception, exc)
        return True

    def cancel(self) -> bool:
        """Close the gate without a result. Waiters get CancelledError."""
        if not self._claim("cancel"):
            return False
        self._loop.call_soon_threadsafe(self._future.cancel)
        return True

    # ------------------------------------------------------------------
    # Consumer
    # ------------------------------------------------------------------

    async def wait(self) -> T:
        """Wait for the winning resolution (raises if it was a failure)."""
        return await self._future

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    @property
    def source(self) -> str | None:
        """Which producer won, or None while open."""
        with self._lock:
            return self._source

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _claim(self, source: str) -> bool:
        with self._lock:
            if self._closed:
                return False
            self._closed = True
            self._source = source
            return True

    def _set_result(self, value: T) -> None:
        if not self._future.done():
            self._future.set_result(value)

    def _set_exception(self, exc: BaseException) -> None:
        if not self._future.done():
            self._future.set_exception(exc)
