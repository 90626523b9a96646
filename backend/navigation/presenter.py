"""
Navigation fallback presenter.

Responsibilities:
- Try candidate targets in priority order; first viable target wins
- Treat any failure of a single target as "not viable" and move on
- When nothing is viable, open developer options and show a popup

Non-responsibilities:
- No connectivity handling
- No knowledge of what the intent strings mean

present() never raises for device failures: total navigation failure
degrades to the popup path.
"""

from __future__ import annotations

from typing import Sequence

from adapters.device.base import ActivityLauncher
from adapters.popup.base import PopupHandle, PopupSurface
from navigation.targets import DEFAULT_TARGETS, NavigationTarget
from observability.logger import log_event, now_ms
from orchestrator.outcomes import Navigated, PopupShown, PresentResult

from constants import (
    MIN_SDK_WIRELESS_DEBUGGING,
    MSG_REQUIRES_ANDROID_11,
    MSG_TAP_WIRELESS_DEBUGGING,
    POPUP_DISMISS_MS,
)


class NavigationFallbackPresenter:
    """Ordered list of launch attempts with a popup fallback."""

    def __init__(
        self,
        *,
        launcher: ActivityLauncher,
        popup: PopupSurface,
        targets: Sequence[NavigationTarget] = DEFAULT_TARGETS,
        popup_dismiss_ms: int = POPUP_DISMISS_MS,
        session_id: str | None = None,
    ) -> None:
        self._launcher = launcher
        self._popup = popup
        self._targets = tuple(targets)
        self._popup_duration_s = popup_dismiss_ms / 1000.0
        self._session_id = session_id
        self.popup_handle: PopupHandle | None = None

    async def present(self) -> PresentResult:
        if not await self._supports_wireless_debugging():
            return await self._fallback(MSG_REQUIRES_ANDROID_11)

        for position, target in enumerate(self._targets, start=1):
            if await self._try_launch(target, position):
                return Navigated(target=target, position=position)

        self._log("NAVIGATION_FALLBACK", candidates=len(self._targets))
        return await self._fallback(MSG_TAP_WIRELESS_DEBUGGING)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _supports_wireless_debugging(self) -> bool:
        try:
            level = await self._launcher.sdk_level()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            # Unknown level: try the candidates anyway
            self._log("SDK_LEVEL_UNKNOWN", exception=type(exc).__name__, message=str(exc))
            return True
        return level >= MIN_SDK_WIRELESS_DEBUGGING

    async def _try_launch(self, target: NavigationTarget, position: int) -> bool:
        """Launch target if the OS resolves it. False means "try the next one"."""
        try:
            if not await self._launcher.resolves(target):
                return False
            await self._launcher.launch(target)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._log(
                "NAVIGATION_ATTEMPT_FAILED",
                target=target.label,
                position=position,
                exception=type(exc).__name__,
                message=str(exc),
            )
            return False

        self._log("NAVIGATED", target=target.label, position=position)
        return True

    async def _fallback(self, message: str) -> PopupShown:
        try:
            await self._launcher.open_developer_options()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._log("FALLBACK_SCREEN_FAILED", exception=type(exc).__name__, message=str(exc))

        try:
            self.popup_handle = await self._popup.show(message, self._popup_duration_s)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._log("POPUP_FAILED", exception=type(exc).__name__, message=str(exc))

        return PopupShown(message=message)

    def _log(self, event_type: str, **fields: object) -> None:
        log_event({
            "ts_ms": now_ms(),
            "event_type": event_type,
            "session_id": self._session_id,
            **fields,
        })
