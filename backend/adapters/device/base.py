"""
Device port contracts.

This module defines the *interfaces only*: the OS capabilities the
connectivity orchestrator and navigation presenter depend on. No polling,
timeouts, fallbacks or orchestration decisions live here.

Key invariants:
- Port methods raise DeviceError on OS/transport failure. Callers decide
  what a failure means (usually "take the next fallback step").
- Connectivity callbacks may be invoked from any thread.
- unregister() of an unknown callback raises DeviceError; callers that need
  idempotence must tolerate it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable

from orchestrator.enums.transport import Transport

if TYPE_CHECKING:
    from navigation.targets import NavigationTarget


# (available, transport). transport is None when no network is active.
ConnectivityCallback = Callable[[bool, "Transport | None"], None]


class RadioControl(ABC):
    """WiFi radio power toggle."""

    @abstractmethod
    async def is_wifi_enabled(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def set_wifi_enabled(self, enabled: bool) -> None:
        """Request a radio power change. Returns before the radio settles."""
        raise NotImplementedError


class ConnectivityQuery(ABC):
    """Active-connection query."""

    @abstractmethod
    async def active_transport(self) -> Transport | None:
        """Transport of the active default network, or None if offline."""
        raise NotImplementedError


class ConnectivityMonitor(ABC):
    """
    Connectivity-change subscription.

    Implementations notify every registered callback on availability edges:
    (True, transport) when a network becomes available (including at
    registration time if one already is), (False, None) when it is lost.
    """

    @abstractmethod
    def register(self, callback: ConnectivityCallback) -> None:
        raise NotImplementedError

    @abstractmethod
    def unregister(self, callback: ConnectivityCallback) -> None:
        raise NotImplementedError


class ActivityLauncher(ABC):
    """Activity-launch facility with a resolvability check."""

    @abstractmethod
    async def sdk_level(self) -> int:
        raise NotImplementedError

    @abstractmethod
    async def resolves(self, target: NavigationTarget) -> bool:
        """True if the OS reports a handler for the target."""
        raise NotImplementedError

    @abstractmethod
    async def launch(self, target: NavigationTarget) -> None:
        raise NotImplementedError

    @abstractmethod
    async def open_developer_options(self) -> None:
        """Open the generic developer-options screen."""
        raise NotImplementedError
