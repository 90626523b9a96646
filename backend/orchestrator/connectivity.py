"""
Connectivity orchestrator for a single launch.

Responsibilities:
- Turn the WiFi radio on if it is off
- Wait for the radio, then for a WiFi transport connection
- Race a connectivity subscription against a 1s poll; first signal wins
- Report exactly one outcome: NavigationReady or a timeout error

Non-responsibilities:
- No navigation (see navigation.presenter)
- No user-facing presentation of errors (see session)

Guarantees:
- Every success/timeout path goes through one CompletionGate, so at most
  one outcome is ever produced per run
- The subscription and the poll task are released on every exit path,
  including cancel()
- unregister failures are logged and swallowed
"""

from __future__ import annotations

import asyncio
from asyncio import Task
from typing import Awaitable, Callable

from adapters.device.base import ConnectivityMonitor, ConnectivityQuery, RadioControl
from observability.logger import log_event, now_ms
from observability.metrics import timed
from orchestrator.enums.phase import WaitPhase
from orchestrator.enums.state import ConnectionState
from orchestrator.enums.transport import Transport
from orchestrator.errors import (
    WifiConnectTimeout,
    WifiEnableTimeout,
    WifiTimeout,
)
from orchestrator.gate import CompletionGate
from orchestrator.outcomes import NavigationReady
from orchestrator.state_dataclass import ConnectivityState, TimeoutBudget

from constants import MSG_CONNECT_TIMEOUT, MSG_ENABLE_TIMEOUT


SleepFn = Callable[[float], Awaitable[None]]


class ConnectivityOrchestrator:
    """
    Owns the connection state for one launch.

    Lifecycle:
    1. run() inspects the radio; requests enable if off
    2. A poll task walks ENABLE -> CONNECT phases, ticking every interval
    3. Connectivity callbacks may resolve the gate at any point
    4. run() tears down the poll task and subscription, then returns or raises
    """

    def __init__(
        self,
        *,
        radio: RadioControl,
        query: ConnectivityQuery,
        monitor: ConnectivityMonitor,
        budget: TimeoutBudget | None = None,
        session_id: str | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._radio = radio
        self._query = query
        self._monitor = monitor
        self._budget = budget or TimeoutBudget()
        self._session_id = session_id
        self._sleep = sleep

        self._state = ConnectivityState()
        self._gate: CompletionGate[NavigationReady] | None = None
        self._poll_task: Task[None] | None = None
        self._subscribed = False

    @property
    def state(self) -> ConnectivityState:
        return self._state

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(self) -> NavigationReady:
        """
        Drive the radio/connection waits to completion.

        Raises:
            WifiEnableTimeout: radio never reported on within the budget
            WifiConnectTimeout: no WiFi connection within the budget
            asyncio.CancelledError: cancel() was called
        """
        gate: CompletionGate[NavigationReady] = CompletionGate(asyncio.get_running_loop())
        self._gate = gate

        try:
            if not await self._radio_enabled():
                await self._request_enable()
                self._transition(ConnectionState.ENABLING)
                self._subscribe()
                first_phase = WaitPhase.ENABLE
            elif await self._is_connected():
                # cancel() may have landed while the query was in flight
                if gate.closed:
                    raise asyncio.CancelledError()
                return self._connected(NavigationReady(source="query"))
            else:
                self._transition(ConnectionState.ENABLING)
                self._subscribe()
                first_phase = WaitPhase.CONNECT

            self._poll_task = asyncio.create_task(self._poll_loop(gate, first_phase))

            try:
                with timed("wifi_wait", session_id=self._session_id,
                           details={"first_phase": first_phase.value}):
                    ready = await gate.wait()
            except WifiTimeout as exc:
                self._transition(ConnectionState.FAILED)
                log_event({
                    "ts_ms": now_ms(),
                    "event_type": (
                        "WIFI_ENABLE_TIMEOUT"
                        if isinstance(exc, WifiEnableTimeout)
                        else "WIFI_CONNECT_TIMEOUT"
                    ),
                    "session_id": self._session_id,
                    "elapsed_ms": exc.elapsed_ms,
                })
                raise

            return self._connected(ready)
        finally:
            self._teardown()

    def cancel(self) -> None:
        """
        Abort the flow (hosting screen closed).

        Idempotent. A pending run() raises asyncio.CancelledError.
        """
        if self._gate is not None:
            self._gate.cancel()
        self._teardown()

    # ------------------------------------------------------------------
    # Poll path
    # ------------------------------------------------------------------

    async def _poll_loop(
        self,
        gate: CompletionGate[NavigationReady],
        phase: WaitPhase,
    ) -> None:
        try:
            await self._poll_phases(gate, phase)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            # The gate must complete even if the poll task dies
            log_event({
                "ts_ms": now_ms(),
                "event_type": "POLL_FATAL_ERROR",
                "session_id": self._session_id,
                "exception": type(exc).__name__,
                "message": str(exc),
            })
            gate.fail(exc, source="poll")

    async def _poll_phases(
        self,
        gate: CompletionGate[NavigationReady],
        phase: WaitPhase,
    ) -> None:
        interval_ms = self._budget.poll_interval_ms
        self._state.enter_phase(phase)

        while not gate.closed:
            if phase is WaitPhase.ENABLE:
                if await self._radio_enabled():
                    # Radio is up: switch phase and check the connection now
                    phase = WaitPhase.CONNECT
                    self._state.enter_phase(phase)
                    continue

                elapsed = self._state.tick(interval_ms)
                if elapsed >= self._budget.duration_ms:
                    gate.fail(
                        WifiEnableTimeout(MSG_ENABLE_TIMEOUT, elapsed_ms=elapsed),
                        source="poll",
                    )
                    return
            else:
                if await self._is_connected():
                    gate.resolve(
                        NavigationReady(source="poll", elapsed_ms=self._state.elapsed_ms),
                        source="poll",
                    )
                    return

                elapsed = self._state.tick(interval_ms)
                if elapsed >= self._budget.duration_ms:
                    gate.fail(
                        WifiConnectTimeout(MSG_CONNECT_TIMEOUT, elapsed_ms=elapsed),
                        source="poll",
                    )
                    return

            await self._sleep(self._budget.poll_interval_s)

    # ------------------------------------------------------------------
    # Event path (may run on any thread)
    # ------------------------------------------------------------------

    def _on_connectivity(self, available: bool, transport: Transport | None) -> None:
        log_event({
            "ts_ms": now_ms(),
            "event_type": "CONNECTIVITY_EVENT",
            "session_id": self._session_id,
            "available": available,
            "transport": transport.value if transport is not None else None,
        })

        if not available:
            self._state.set_connected(False)
            return

        if transport is not Transport.WIFI:
            return

        self._state.set_connected(True)
        gate = self._gate
        if gate is not None:
            gate.resolve(
                NavigationReady(source="event", elapsed_ms=self._state.elapsed_ms),
                source="event",
            )

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def _subscribe(self) -> None:
        if self._subscribed:
            return
        self._monitor.register(self._on_connectivity)
        self._subscribed = True

    def _unsubscribe(self) -> None:
        """Idempotent; unregister errors are not fatal."""
        if not self._subscribed:
            return
        self._subscribed = False
        try:
            self._monitor.unregister(self._on_connectivity)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            log_event({
                "ts_ms": now_ms(),
                "event_type": "UNREGISTER_FAILED",
                "session_id": self._session_id,
                "exception": type(exc).__name__,
                "message": str(exc),
            })

    def _teardown(self) -> None:
        task = self._poll_task
        self._poll_task = None
        if task is not None and not task.done():
            task.cancel()
        self._unsubscribe()

    # ------------------------------------------------------------------
    # OS calls (failures become the next fallback step)
    # ------------------------------------------------------------------

    async def _radio_enabled(self) -> bool:
        try:
            return await self._radio.is_wifi_enabled()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._log_device_error("is_wifi_enabled", exc)
            return False

    async def _request_enable(self) -> None:
        log_event({
            "ts_ms": now_ms(),
            "event_type": "WIFI_ENABLE_REQUESTED",
            "session_id": self._session_id,
        })
        try:
            await self._radio.set_wifi_enabled(True)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            # Keep polling; the enable wait times out if the radio never comes up
            self._log_device_error("set_wifi_enabled", exc)

    async def _is_connected(self) -> bool:
        if self._state.is_connected():
            return True
        try:
            transport = await self._query.active_transport()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._log_device_error("active_transport", exc)
            return False
        return transport is Transport.WIFI

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def _connected(self, ready: NavigationReady) -> NavigationReady:
        self._state.set_connected(True)
        self._transition(ConnectionState.CONNECTED)
        log_event({
            "ts_ms": now_ms(),
            "event_type": "WIFI_CONNECTED",
            "session_id": self._session_id,
            "source": ready.source,
        })
        return ready

    def _transition(self, new_state: ConnectionState) -> None:
        old = self._state.transition(new_state)
        if old is new_state:
            return
        log_event({
            "ts_ms": now_ms(),
            "event_type": "STATE_CHANGED",
            "session_id": self._session_id,
            "from": old.value,
            "to": new_state.value,
        })

    def _log_device_error(self, call: str, exc: Exception) -> None:
        log_event({
            "ts_ms": now_ms(),
            "event_type": "DEVICE_CALL_FAILED",
            "session_id": self._session_id,
            "call": call,
            "exception": type(exc).__name__,
            "message": str(exc),
        })
