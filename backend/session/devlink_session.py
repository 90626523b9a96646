"""
DevLink session: one "app launch".

Responsibilities:
- Wire ConnectivityOrchestrator -> NavigationFallbackPresenter
- Turn wait timeouts into a transient user-visible message
- Own cancellation (hosting screen closed -> close())
- Record the terminal status and outcome

Not a state machine: the orchestrator owns connection state, the presenter
owns navigation. This class sequences them.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Sequence
from uuid import uuid4

from adapters.device.adb_device import AdbDevice
from adapters.device.adb_monitor import AdbConnectivityMonitor
from adapters.device.base import (
    ActivityLauncher,
    ConnectivityMonitor,
    ConnectivityQuery,
    RadioControl,
)
from adapters.popup.base import PopupHandle, PopupSurface
from adapters.popup.console import ConsolePopup
from navigation.presenter import NavigationFallbackPresenter
from navigation.targets import DEFAULT_TARGETS, NavigationTarget, load_targets
from observability.logger import log_event, now_ms
from observability.metrics import timed
from orchestrator.connectivity import ConnectivityOrchestrator, SleepFn
from orchestrator.errors import WifiTimeout
from orchestrator.outcomes import Navigated, PresentResult
from orchestrator.state_dataclass import TimeoutBudget

from constants import ERROR_MESSAGE_DISPLAY_MS, POPUP_DISMISS_MS

if TYPE_CHECKING:
    from config import AppConfig


def _new_session_id() -> str:
    return f"sess_{uuid4().hex[:12]}"


class SessionStatus(str, Enum):
    """Lifecycle status of one session. Everything after RUNNING is terminal."""

    PENDING = "PENDING"
    RUNNING = "RUNNING"
    NAVIGATED = "NAVIGATED"
    POPUP_SHOWN = "POPUP_SHOWN"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class SessionResult:
    """Terminal outcome of a session."""
    session_id: str
    status: SessionStatus
    outcome: PresentResult | None = None
    error: str | None = None
    elapsed_ms: int = 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "session_id": self.session_id,
            "status": self.status.value,
            "error": self.error,
            "elapsed_ms": self.elapsed_ms,
        }
        if isinstance(self.outcome, Navigated):
            data["target"] = self.outcome.target.label
            data["position"] = self.outcome.position
        elif self.outcome is not None:
            data["message"] = self.outcome.message
        return data


class DevLinkSession:
    """One launch of the enable-WiFi / wait / navigate flow."""

    def __init__(
        self,
        *,
        radio: RadioControl,
        query: ConnectivityQuery,
        monitor: ConnectivityMonitor,
        launcher: ActivityLauncher,
        popup: PopupSurface,
        targets: Sequence[NavigationTarget] = DEFAULT_TARGETS,
        budget: TimeoutBudget | None = None,
        popup_dismiss_ms: int = POPUP_DISMISS_MS,
        session_id: str | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.session_id = session_id or _new_session_id()
        self._popup = popup
        self._status = SessionStatus.PENDING
        self._result: SessionResult | None = None
        self._closed = False
        self._started_ns = 0
        self._error_handle: PopupHandle | None = None

        self.orchestrator = ConnectivityOrchestrator(
            radio=radio,
            query=query,
            monitor=monitor,
            budget=budget,
            session_id=self.session_id,
            sleep=sleep,
        )
        self.presenter = NavigationFallbackPresenter(
            launcher=launcher,
            popup=popup,
            targets=targets,
            popup_dismiss_ms=popup_dismiss_ms,
            session_id=self.session_id,
        )

    # ------------------------------------------------------------------
    # Construction from config
    # ------------------------------------------------------------------

    @staticmethod
    def from_config(
        config: AppConfig,
        *,
        serial: str | None = None,
        popup: PopupSurface | None = None,
    ) -> DevLinkSession:
        """Build an ADB-backed session for one device."""
        session_id = _new_session_id()
        device = AdbDevice(
            serial=serial or config.device_serial,
            host=config.adb_host,
            port=config.adb_port,
        )
        return DevLinkSession(
            radio=device,
            query=device,
            monitor=AdbConnectivityMonitor(device),
            launcher=device,
            popup=popup or ConsolePopup(session_id=session_id),
            targets=load_targets(config.targets_file),
            budget=TimeoutBudget(
                duration_ms=config.wifi_timeout_ms,
                poll_interval_ms=config.wifi_poll_interval_ms,
            ),
            popup_dismiss_ms=config.popup_dismiss_ms,
            session_id=session_id,
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def result(self) -> SessionResult | None:
        return self._result

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def run(self) -> SessionResult:
        """
        Run the flow once.

        Raises:
            RuntimeError if the session was already started.
        """
        if self._status is not SessionStatus.PENDING:
            raise RuntimeError(f"session {self.session_id} already started")

        self._started_ns = time.monotonic_ns()
        if self._closed:
            return self._finish(SessionStatus.CANCELLED)

        self._status = SessionStatus.RUNNING
        self._log("SESSION_STARTED")

        try:
            with timed("session", session_id=self.session_id):
                try:
                    await self.orchestrator.run()
                except WifiTimeout as exc:
                    await self._show_error(exc.message)
                    return self._finish(SessionStatus.FAILED, error=exc.message)

                if self._closed:
                    return self._finish(SessionStatus.CANCELLED)
                outcome = await self.presenter.present()
        except asyncio.CancelledError:
            if not self._closed:
                raise
            return self._finish(SessionStatus.CANCELLED)

        status = (
            SessionStatus.NAVIGATED
            if isinstance(outcome, Navigated)
            else SessionStatus.POPUP_SHOWN
        )
        return self._finish(status, outcome=outcome)

    def close(self) -> None:
        """
        Cancel the flow. Idempotent.

        Releases the connectivity subscription and poll timer. A navigation
        already in progress is allowed to finish.
        """
        if self._closed:
            return
        self._closed = True
        self.orchestrator.cancel()

    def dismiss_popup(self) -> bool:
        """Dismiss any visible popup early (user action)."""
        dismissed = False
        for handle in (self.presenter.popup_handle, self._error_handle):
            if handle is not None and handle.dismiss("user"):
                dismissed = True
        return dismissed

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _show_error(self, message: str) -> None:
        self._log("USER_ERROR", message=message)
        try:
            self._error_handle = await self._popup.show(
                message, ERROR_MESSAGE_DISPLAY_MS / 1000.0
            )
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._log("POPUP_FAILED", exception=type(exc).__name__, message=str(exc))

    def _finish(
        self,
        status: SessionStatus,
        *,
        outcome: PresentResult | None = None,
        error: str | None = None,
    ) -> SessionResult:
        self._status = status
        self._result = SessionResult(
            session_id=self.session_id,
            status=status,
            outcome=outcome,
            error=error,
            elapsed_ms=(time.monotonic_ns() - self._started_ns) // 1_000_000,
        )
        self._log("SESSION_ENDED", status=status.value, error=error)
        return self._result

    def _log(self, event_type: str, **fields: object) -> None:
        log_event({
            "ts_ms": now_ms(),
            "event_type": event_type,
            "session_id": self.session_id,
            **fields,
        })
