"""
DevLink exception hierarchy.

User-visible failures are the two wait timeouts. Both subclass the builtin
TimeoutError so callers may catch either the specific type or the family.
"""

from __future__ import annotations


class DevLinkError(Exception):
    """Base class for all DevLink errors."""


class DeviceError(DevLinkError):
    """An OS/device call failed (ADB transport error, bad output, etc.)."""


class WifiTimeout(DevLinkError, TimeoutError):
    """A wait phase exhausted its budget."""

    def __init__(self, message: str, *, elapsed_ms: int) -> None:
        super().__init__(message)
        self.message = message
        self.elapsed_ms = elapsed_ms


class WifiEnableTimeout(WifiTimeout):
    """The radio did not report on within the budget."""


class WifiConnectTimeout(WifiTimeout):
    """No WiFi transport connection appeared within the budget."""
