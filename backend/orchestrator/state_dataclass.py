"""
Orchestrator-owned connectivity state.

Rules:
- One instance per orchestrator (per launch). Never a module global.
- Mutated from the event loop and from connectivity callbacks, which may
  run on another thread, so every access goes through the lock.
- TimeoutBudget is pure, immutable data.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field

from orchestrator.enums.phase import WaitPhase
from orchestrator.enums.state import ConnectionState

from constants import WIFI_POLL_INTERVAL_MS, WIFI_TIMEOUT_MS


# =============================================================================
# Timeout budget
# =============================================================================

@dataclass(frozen=True)
class TimeoutBudget:
    """
    Fixed wait duration and poll cadence, applied per wait phase.
    """
    duration_ms: int = WIFI_TIMEOUT_MS
    poll_interval_ms: int = WIFI_POLL_INTERVAL_MS

    def __post_init__(self) -> None:
        if self.duration_ms <= 0 or self.poll_interval_ms <= 0:
            raise ValueError("timeout budget values must be positive")

    @property
    def poll_interval_s(self) -> float:
        return self.poll_interval_ms / 1000.0


# =============================================================================
# Mutable connectivity state
# =============================================================================

@dataclass
class ConnectivityState:
    """
    Connection state, current wait phase and its elapsed time, and the
    connected flag set by connectivity notifications.
    """

    state: ConnectionState = ConnectionState.DISABLED
    phase: WaitPhase | None = None
    elapsed_ms: int = 0
    wifi_connected: bool = False
    _lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def transition(self, new_state: ConnectionState) -> ConnectionState:
        """Set the connection state; returns the previous one."""
        with self._lock:
            old = self.state
            self.state = new_state
            return old

    def current(self) -> ConnectionState:
        with self._lock:
            return self.state

    def enter_phase(self, phase: WaitPhase) -> None:
        """Start a wait phase; elapsed time resets."""
        with self._lock:
            self.phase = phase
            self.elapsed_ms = 0

    def tick(self, interval_ms: int) -> int:
        """Accumulate one poll interval; returns elapsed time in this phase."""
        with self._lock:
            self.elapsed_ms += interval_ms
            return self.elapsed_ms

    def set_connected(self, connected: bool) -> None:
        with self._lock:
            self.wifi_connected = connected

    def is_connected(self) -> bool:
        with self._lock:
            return self.wifi_connected
