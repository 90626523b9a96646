# pylint: disable=missing-module-docstring,missing-function-docstring

import asyncio

import pytest

from adapters.device.adb_monitor import AdbConnectivityMonitor
from adapters.device.base import ConnectivityQuery
from orchestrator.enums.transport import Transport
from orchestrator.errors import DeviceError


class ScriptedQuery(ConnectivityQuery):
    """Returns scripted samples, repeating the last one."""

    def __init__(self, samples: list) -> None:
        self._samples = list(samples)

    async def active_transport(self) -> Transport | None:
        sample = self._samples.pop(0) if len(self._samples) > 1 else self._samples[0]
        if isinstance(sample, Exception):
            raise sample
        return sample


async def collect(monitor: AdbConnectivityMonitor, want: int) -> list[tuple]:
    seen: list[tuple] = []

    def callback(available: bool, transport: Transport | None) -> None:
        seen.append((available, transport))

    monitor.register(callback)
    for _ in range(500):
        if len(seen) >= want:
            break
        await asyncio.sleep(0.001)
    monitor.unregister(callback)
    return seen


def test_edges_are_reported_once():
    query = ScriptedQuery([None, Transport.WIFI, Transport.WIFI, DeviceError("adb"), None])
    monitor = AdbConnectivityMonitor(query, sample_interval_ms=1)

    seen = asyncio.run(collect(monitor, 2))

    assert seen == [(True, Transport.WIFI), (False, None)]


def test_already_available_network_is_reported_at_registration():
    monitor = AdbConnectivityMonitor(ScriptedQuery([Transport.WIFI]), sample_interval_ms=1)

    seen = asyncio.run(collect(monitor, 1))

    assert seen == [(True, Transport.WIFI)]


def test_unregister_unknown_callback_raises():
    monitor = AdbConnectivityMonitor(ScriptedQuery([None]), sample_interval_ms=1)

    with pytest.raises(DeviceError):
        monitor.unregister(lambda available, transport: None)
