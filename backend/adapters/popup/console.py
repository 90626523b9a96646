"""
Console popup surface.

Renders the popup in the operator's terminal (the host side of an ADB
session) and logs show/dismiss events.
"""

from __future__ import annotations

import sys
from typing import TextIO

from adapters.popup.base import PopupHandle, PopupSurface
from observability.logger import log_event, now_ms


class ConsolePopup(PopupSurface):
    """Writes a boxed message to a text stream (stderr by default)."""

    def __init__(
        self,
        *,
        session_id: str | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self.session_id = session_id
        self._stream = stream
        self.active: PopupHandle | None = None

    async def show(self, message: str, duration_s: float) -> PopupHandle:
        stream = self._stream if self._stream is not None else sys.stderr
        border = "+" + "-" * (len(message) + 2) + "+"
        stream.write(f"{border}\n| {message} |\n{border}\n")
        stream.flush()

        log_event({
            "ts_ms": now_ms(),
            "event_type": "POPUP_SHOWN",
            "session_id": self.session_id,
            "message": message,
            "duration_s": duration_s,
        })

        self.active = PopupHandle(message, duration_s, on_dismiss=self._dismissed)
        return self.active

    def dismiss(self) -> bool:
        """Dismiss the visible popup early (user action)."""
        if self.active is None:
            return False
        return self.active.dismiss("user")

    def _dismissed(self, handle: PopupHandle, reason: str) -> None:
        log_event({
            "ts_ms": now_ms(),
            "event_type": "POPUP_DISMISSED",
            "session_id": self.session_id,
            "reason": reason,
        })
        if self.active is handle:
            self.active = None
