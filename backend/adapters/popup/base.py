"""
Popup surface contract.

A popup is a short instructional message that dismisses itself after a
duration and can be dismissed early by user action.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Callable


class PopupHandle:
    """
    One visible popup.

    Dismissal happens exactly once, either when the duration elapses
    ("timeout") or when dismiss() is called first.
    """

    def __init__(
        self,
        message: str,
        duration_s: float,
        *,
        on_dismiss: Callable[[PopupHandle, str], None] | None = None,
    ) -> None:
        self.message = message
        self.duration_s = duration_s
        self.dismiss_reason: str | None = None
        self._on_dismiss = on_dismiss
        self._dismissed = asyncio.Event()
        self._timer = asyncio.get_running_loop().call_later(
            duration_s, self.dismiss, "timeout"
        )

    @property
    def dismissed(self) -> bool:
        return self._dismissed.is_set()

    def dismiss(self, reason: str = "user") -> bool:
        """Dismiss the popup. Returns False if it was already dismissed."""
        if self._dismissed.is_set():
            return False
        self._timer.cancel()
        self.dismiss_reason = reason
        self._dismissed.set()
        if self._on_dismiss is not None:
            self._on_dismiss(self, reason)
        return True

    async def wait(self) -> str:
        """Wait until dismissed; returns the dismiss reason."""
        await self._dismissed.wait()
        assert self.dismiss_reason is not None
        return self.dismiss_reason


class PopupSurface(ABC):
    """Minimal popup surface: text plus an auto-dismiss duration."""

    @abstractmethod
    async def show(self, message: str, duration_s: float) -> PopupHandle:
        raise NotImplementedError
