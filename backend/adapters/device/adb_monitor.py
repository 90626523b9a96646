"""
Host-side connectivity subscription for ADB devices.

adb offers no push notification for network changes, so this monitor runs
one sampling task per device and turns transitions of the active transport
into edge-triggered callbacks, the same shape as an OS network callback.

Lifecycle:
1. First register() starts the sampling task
2. Each sample compares (available, transport) with the previous one
3. On change, every registered callback is notified
4. Last unregister() stops the task
"""

from __future__ import annotations

import asyncio
from asyncio import Task

from adapters.device.base import (
    ConnectivityCallback,
    ConnectivityMonitor,
    ConnectivityQuery,
)
from orchestrator.enums.transport import Transport
from orchestrator.errors import DeviceError

from constants import MONITOR_SAMPLE_INTERVAL_MS


class AdbConnectivityMonitor(ConnectivityMonitor):
    """Sampling connectivity monitor over a ConnectivityQuery."""

    def __init__(
        self,
        query: ConnectivityQuery,
        *,
        sample_interval_ms: int = MONITOR_SAMPLE_INTERVAL_MS,
    ) -> None:
        self._query = query
        self._interval_s = sample_interval_ms / 1000.0
        self._callbacks: list[ConnectivityCallback] = []
        self._task: Task[None] | None = None

    # ------------------------------------------------------------------
    # ConnectivityMonitor
    # ------------------------------------------------------------------

    def register(self, callback: ConnectivityCallback) -> None:
        """Must be called from the event loop thread."""
        if callback in self._callbacks:
            return
        self._callbacks.append(callback)
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._sample_loop())

    def unregister(self, callback: ConnectivityCallback) -> None:
        try:
            self._callbacks.remove(callback)
        except ValueError as exc:
            raise DeviceError("callback not registered") from exc

        if not self._callbacks and self._task is not None:
            self._task.cancel()
            self._task = None

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _sample_loop(self) -> None:
        last: tuple[bool, Transport | None] | None = None
        while True:
            try:
                transport = await self._query.active_transport()
            except DeviceError:
                transport = None

            current = (transport is not None, transport)

            # First sample only reports an already-available network
            if current != last and (last is not None or current[0]):
                for callback in list(self._callbacks):
                    callback(*current)
            last = current

            await asyncio.sleep(self._interval_s)
