"""
Application configuration.

Responsibilities:
- Load deployment-specific configuration
- Read environment variables
- Provide a typed, immutable config object

Non-responsibilities:
- No orchestration logic
- No behavioral constants (see constants.py)
- No runtime mutation
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from constants import (
    POPUP_DISMISS_MS,
    WIFI_POLL_INTERVAL_MS,
    WIFI_TIMEOUT_MS,
)


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable application configuration.

    Constructed once at process startup.
    Passed downward to session bootstrap code (CLI or HTTP app).
    """

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    env: str
    log_level: str

    # ------------------------------------------------------------------
    # ADB
    # ------------------------------------------------------------------

    adb_host: str
    adb_port: int
    device_serial: str | None

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    targets_file: str | None

    # ------------------------------------------------------------------
    # Timing
    # ------------------------------------------------------------------

    wifi_timeout_ms: int = WIFI_TIMEOUT_MS
    wifi_poll_interval_ms: int = WIFI_POLL_INTERVAL_MS
    popup_dismiss_ms: int = POPUP_DISMISS_MS

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    enable_json_logs: bool = True

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @staticmethod
    def load_from_env() -> AppConfig:
        """
        Load configuration from environment variables.

        Raises:
            ValueError if a numeric variable is not an integer.
        """
        return AppConfig(
            env=os.environ.get("ENV", "dev"),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),

            adb_host=os.environ.get("ADB_HOST", "127.0.0.1"),
            adb_port=int(os.environ.get("ADB_PORT", "5037")),
            device_serial=os.environ.get("DEVLINK_SERIAL") or None,

            targets_file=os.environ.get("DEVLINK_TARGETS_FILE") or None,

            wifi_timeout_ms=int(os.environ.get("WIFI_TIMEOUT_MS", str(WIFI_TIMEOUT_MS))),
            wifi_poll_interval_ms=int(
                os.environ.get("WIFI_POLL_INTERVAL_MS", str(WIFI_POLL_INTERVAL_MS))
            ),
            popup_dismiss_ms=int(os.environ.get("POPUP_DISMISS_MS", str(POPUP_DISMISS_MS))),

            enable_json_logs=os.environ.get("ENABLE_JSON_LOGS", "1") == "1",
        )
