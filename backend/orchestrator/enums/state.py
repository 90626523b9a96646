"""
Connection state enumeration.

Rules:
- This enum defines ONLY the connectivity states of one launch.
- No behavior, no helper methods, no side effects.
- Transitions are made exclusively by the connectivity orchestrator.
"""

from __future__ import annotations

from enum import Enum


class ConnectionState(str, Enum):
    """
    Connectivity state owned by a single orchestrator instance.

    DISABLED:
        WiFi radio is off (or not yet inspected).

    ENABLING:
        Waiting for the radio to come up or for a WiFi connection.

    CONNECTED:
        A WiFi transport connection is active. Terminal.

    FAILED:
        A wait phase ran out of budget. Terminal.
    """

    DISABLED = "DISABLED"
    ENABLING = "ENABLING"
    CONNECTED = "CONNECTED"
    FAILED = "FAILED"
