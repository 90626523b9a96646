"""
Navigation targets for the "Wireless debugging" settings screen.

Rules:
- A target is an opaque intent description; nothing here interprets the
  strings.
- The candidate list is configuration data, ordered by priority.
- No launching, no resolvability checks (see ActivityLauncher).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping


@dataclass(frozen=True)
class NavigationTarget:
    """
    One candidate navigation destination.

    At least one of action, component or data must be set.
    component uses the "package/class" form.
    """
    label: str
    action: str | None = None
    component: str | None = None
    data: str | None = None
    extras: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not (self.action or self.component or self.data):
            raise ValueError(f"target {self.label!r} has no action, component or data")

    def intent_args(self) -> list[str]:
        """Intent flags in `am start` / `resolve-activity` syntax."""
        args: list[str] = []
        if self.action:
            args += ["-a", self.action]
        if self.data:
            args += ["-d", self.data]
        if self.component:
            args += ["-n", self.component]
        for key, value in self.extras:
            args += ["--es", key, value]
        return args

    @staticmethod
    def from_mapping(raw: Mapping[str, Any]) -> NavigationTarget:
        extras = raw.get("extras") or {}
        if not isinstance(extras, Mapping):
            raise ValueError("target extras must be an object")
        return NavigationTarget(
            label=str(
                raw.get("label") or raw.get("action") or raw.get("component") or raw.get("data")
            ),
            action=raw.get("action"),
            component=raw.get("component"),
            data=raw.get("data"),
            extras=tuple((str(k), str(v)) for k, v in extras.items()),
        )


# =============================================================================
# Defaults
# =============================================================================

_SETTINGS_PKG = "com.android.settings"
_WIRELESS_DEBUGGING_FRAGMENT = "com.android.settings.development.WirelessDebuggingFragment"

DEVELOPER_OPTIONS = NavigationTarget(
    label="developer_options",
    action="android.settings.APPLICATION_DEVELOPMENT_SETTINGS",
)

# Several of these are vendor-specific; which ones are dead on current
# builds is unknown, so all six are kept in priority order.
DEFAULT_TARGETS: tuple[NavigationTarget, ...] = (
    NavigationTarget(
        label="wireless_debugging_action",
        action="android.settings.WIRELESS_DEBUGGING_SETTINGS",
    ),
    NavigationTarget(
        label="wireless_adb_action",
        action="android.settings.WIRELESS_ADB_SETTINGS",
    ),
    NavigationTarget(
        label="wireless_debugging_activity",
        component=f"{_SETTINGS_PKG}/{_SETTINGS_PKG}.Settings$DevelopmentSettingsWirelessDebuggingActivity",
    ),
    NavigationTarget(
        label="wireless_debugging_fragment",
        component=f"{_SETTINGS_PKG}/{_WIRELESS_DEBUGGING_FRAGMENT}",
    ),
    NavigationTarget(
        label="wireless_debugging_uri",
        action="android.intent.action.VIEW",
        data="android:settings:development:wireless_debugging",
    ),
    NavigationTarget(
        label="developer_options_show_fragment",
        action="android.settings.APPLICATION_DEVELOPMENT_SETTINGS",
        extras=((":settings:show_fragment", _WIRELESS_DEBUGGING_FRAGMENT),),
    ),
)


def load_targets(path: str | Path | None) -> tuple[NavigationTarget, ...]:
    """
    Load the candidate list from a JSON array of target objects.

    None returns DEFAULT_TARGETS.

    Raises:
        OSError if the file cannot be read.
        ValueError if the content is not a non-empty list of valid targets.
    """
    if path is None:
        return DEFAULT_TARGETS

    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, list) or not raw:
        raise ValueError("targets file must contain a non-empty JSON array")
    if not all(isinstance(item, Mapping) for item in raw):
        raise ValueError("every target must be a JSON object")
    return tuple(NavigationTarget.from_mapping(item) for item in raw)
