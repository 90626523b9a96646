"""
ADB-backed device adapter.

Implements RadioControl, ConnectivityQuery and ActivityLauncher for one
Android device reachable through an adb server, using adbutils.

Architectural constraints:
- Blocking adbutils calls run in a worker thread (asyncio.to_thread).
- Every adbutils failure is translated to DeviceError.
- No retries, timers or fallbacks live here.
"""

from __future__ import annotations

import asyncio
import re
from typing import TYPE_CHECKING

import adbutils

from adapters.device.base import ActivityLauncher, ConnectivityQuery, RadioControl
from navigation.targets import DEVELOPER_OPTIONS
from orchestrator.enums.transport import Transport
from orchestrator.errors import DeviceError

from constants import ADB_COMMAND_TIMEOUT_S

if TYPE_CHECKING:
    from navigation.targets import NavigationTarget


_ACTIVE_NETWORK_RE = re.compile(r"Active default network:\s*(\S+)")
_TRANSPORTS_RE = re.compile(r"Transports:\s*([A-Z_|]+)")
_LEGACY_NAI_RE = re.compile(r"NetworkAgentInfo\s*\[\s*([A-Z_]+)")
_START_ERROR_MARKERS = ("Error:", "Exception", "Security exception")


class AdbDevice(RadioControl, ConnectivityQuery, ActivityLauncher):
    """One device, addressed by serial (or the only attached device)."""

    def __init__(
        self,
        *,
        serial: str | None = None,
        host: str = "127.0.0.1",
        port: int = 5037,
        timeout_s: float = ADB_COMMAND_TIMEOUT_S,
    ) -> None:
        self._client = adbutils.AdbClient(host=host, port=port)
        self._serial = serial
        self._timeout_s = timeout_s
        self._device: adbutils.AdbDevice | None = None

    @property
    def serial(self) -> str | None:
        return self._device.serial if self._device is not None else self._serial

    # ------------------------------------------------------------------
    # RadioControl
    # ------------------------------------------------------------------

    async def is_wifi_enabled(self) -> bool:
        out = await self._shell(["settings", "get", "global", "wifi_on"])
        try:
            return int(out) != 0
        except ValueError as exc:
            raise DeviceError(f"unexpected wifi_on value: {out!r}") from exc

    async def set_wifi_enabled(self, enabled: bool) -> None:
        out = await self._shell(["svc", "wifi", "enable" if enabled else "disable"])
        lowered = out.lower()
        if "permission" in lowered or "not found" in lowered:
            raise DeviceError(f"svc wifi refused: {out}")

    # ------------------------------------------------------------------
    # ConnectivityQuery
    # ------------------------------------------------------------------

    async def active_transport(self) -> Transport | None:
        out = await self._shell(["dumpsys", "connectivity"])
        return parse_active_transport(out)

    # ------------------------------------------------------------------
    # ActivityLauncher
    # ------------------------------------------------------------------

    async def sdk_level(self) -> int:
        out = await self._shell(["getprop", "ro.build.version.sdk"])
        try:
            return int(out)
        except ValueError as exc:
            raise DeviceError(f"unexpected sdk level: {out!r}") from exc

    async def resolves(self, target: NavigationTarget) -> bool:
        out = await self._shell(
            ["cmd", "package", "resolve-activity", "--brief", *target.intent_args()]
        )
        return parse_resolve_output(out)

    async def launch(self, target: NavigationTarget) -> None:
        out = await self._shell(["am", "start", *target.intent_args()])
        if any(marker in out for marker in _START_ERROR_MARKERS):
            raise DeviceError(f"am start failed for {target.label}: {out}")

    async def open_developer_options(self) -> None:
        await self.launch(DEVELOPER_OPTIONS)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _shell(self, args: list[str]) -> str:
        return await asyncio.to_thread(self._shell_blocking, args)

    def _shell_blocking(self, args: list[str]) -> str:
        try:
            if self._device is None:
                self._device = self._client.device(serial=self._serial)
            out = self._device.shell(args, timeout=self._timeout_s)
        except (adbutils.AdbError, OSError) as exc:
            raise DeviceError(f"adb {' '.join(args[:3])}: {exc}") from exc
        return str(out).strip()


# ---------------------------------------------------------------------
# Output parsers (pure, tested directly)
# ---------------------------------------------------------------------

def parse_active_transport(dumpsys: str) -> Transport | None:
    """
    Extract the transport of the active default network from
    `dumpsys connectivity` output.

    Returns None when there is no active default network. Returns
    Transport.OTHER when a network is active but its agent line is missing
    or unrecognized.
    """
    match = _ACTIVE_NETWORK_RE.search(dumpsys)
    if match is None or match.group(1).lower() in ("none", "null"):
        return None

    net_id = match.group(1)
    for line in dumpsys.splitlines():
        if "NetworkAgentInfo" not in line:
            continue
        if f"network{{{net_id}}}" not in line and f" - {net_id}]" not in line:
            continue

        transports = _TRANSPORTS_RE.search(line)
        if transports is not None:
            return Transport.parse(transports.group(1).split("|")[0])

        legacy = _LEGACY_NAI_RE.search(line)
        if legacy is not None:
            return Transport.parse(legacy.group(1))

    return Transport.OTHER


def parse_resolve_output(out: str) -> bool:
    """True if `cmd package resolve-activity --brief` named a component."""
    if not out or "No activity found" in out:
        return False
    lines = [line.strip() for line in out.splitlines() if line.strip()]
    return bool(lines) and "/" in lines[-1]
