"""
Wait phase enumeration.

Phases are orthogonal to connection states:
- State answers: "What is the radio/connection doing?"
- Phase answers: "Which wait does the elapsed-time budget belong to?"
"""

from __future__ import annotations

from enum import Enum


class WaitPhase(str, Enum):
    """
    ENABLE:
        Waiting for the radio to report on.

    CONNECT:
        Waiting for a WiFi transport connection.
    """

    ENABLE = "ENABLE"
    CONNECT = "CONNECT"
