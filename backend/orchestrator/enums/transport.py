"""
Transport type enumeration.

Rules:
- Mirrors the OS classification of the active network connection.
- Only WIFI is meaningful to the orchestrator; no policy lives here.
"""

from __future__ import annotations

from enum import Enum


class Transport(str, Enum):
    """Transport type of the active network."""

    WIFI = "WIFI"
    CELLULAR = "CELLULAR"
    ETHERNET = "ETHERNET"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, raw: str) -> Transport:
        """Map an OS transport name to a Transport, defaulting to OTHER."""
        try:
            return cls(raw.strip().upper())
        except ValueError:
            return cls.OTHER
