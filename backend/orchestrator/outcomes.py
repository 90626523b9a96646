"""
Outcome values for the connectivity and navigation steps.

Outcomes carry data only. Failures are exceptions (see orchestrator.errors).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from navigation.targets import NavigationTarget


@dataclass(frozen=True)
class NavigationReady:
    """
    WiFi is connected; navigation may proceed.

    source: which signal won ("query", "event" or "poll").
    """
    source: str
    elapsed_ms: int = 0


@dataclass(frozen=True)
class Navigated:
    """A candidate target was launched."""
    target: NavigationTarget
    position: int


@dataclass(frozen=True)
class PopupShown:
    """No candidate was viable; the fallback screen and popup were shown."""
    message: str


PresentResult = Union[Navigated, PopupShown]
