"""
BEHAVIOR-AS-CONSTANTS
---------------------
Single source of truth for all behavioral constants in DevLink.

Rules:
- If changing a value changes runtime behavior, it belongs here.
- No magic numbers elsewhere in the codebase.
- Other modules MUST import from this file.
"""

from __future__ import annotations

from typing import Final

# =============================================================================
# WiFi wait budgets
# =============================================================================

WIFI_TIMEOUT_MS: Final[int] = 30_000
WIFI_POLL_INTERVAL_MS: Final[int] = 1_000

# =============================================================================
# Connectivity monitor (host-side subscription emulation over ADB)
# =============================================================================

MONITOR_SAMPLE_INTERVAL_MS: Final[int] = 250

# =============================================================================
# Popup
# =============================================================================

POPUP_DISMISS_MS: Final[int] = 4_000

# Transient error message (toast equivalent)
ERROR_MESSAGE_DISPLAY_MS: Final[int] = 3_500

# =============================================================================
# HTTP session registry
# =============================================================================

# How long a finished session stays readable over HTTP
SESSION_RETENTION_S: Final[float] = 300.0

# =============================================================================
# Platform
# =============================================================================

# Wireless debugging exists from Android 11 (API 30)
MIN_SDK_WIRELESS_DEBUGGING: Final[int] = 30

ADB_COMMAND_TIMEOUT_S: Final[float] = 10.0

# =============================================================================
# User-visible messages
# =============================================================================

MSG_ENABLE_TIMEOUT: Final[str] = "Failed to enable WiFi within the timeout period"
MSG_CONNECT_TIMEOUT: Final[str] = "Failed to connect to WiFi within the timeout period"
MSG_TAP_WIRELESS_DEBUGGING: Final[str] = 'Scroll down and tap on "Wireless debugging"'
MSG_REQUIRES_ANDROID_11: Final[str] = "Wireless debugging requires Android 11+"
