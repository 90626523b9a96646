# pylint: disable=missing-module-docstring,missing-function-docstring

from adapters.device.adb_device import parse_active_transport, parse_resolve_output
from orchestrator.enums.transport import Transport


DUMPSYS_WIFI = """\
NetworkProviders for:
Active default network: 104
Current Networks:
  NetworkAgentInfo{network{103}  handle{441}  ni{MOBILE[LTE] CONNECTED extra: }  nc{[ Transports: CELLULAR Capabilities: INTERNET]}}
  NetworkAgentInfo{network{104}  handle{445}  ni{WIFI CONNECTED extra: }  nc{[ Transports: WIFI Capabilities: NOT_METERED&INTERNET]}}
"""

DUMPSYS_CELL = DUMPSYS_WIFI.replace("Active default network: 104", "Active default network: 103")

DUMPSYS_OFFLINE = """\
Active default network: none
Current Networks:
"""

DUMPSYS_LEGACY = """\
Active default network: 100
Current Networks:
  NetworkAgentInfo [WIFI () - 100] ni{[type: WIFI[], state: CONNECTED/CONNECTED]}
"""


def test_active_transport_wifi():
    assert parse_active_transport(DUMPSYS_WIFI) is Transport.WIFI


def test_active_transport_cellular():
    assert parse_active_transport(DUMPSYS_CELL) is Transport.CELLULAR


def test_active_transport_offline():
    assert parse_active_transport(DUMPSYS_OFFLINE) is None
    assert parse_active_transport("") is None


def test_active_transport_legacy_format():
    assert parse_active_transport(DUMPSYS_LEGACY) is Transport.WIFI


def test_active_transport_unknown_agent_is_other():
    text = "Active default network: 555\nCurrent Networks:\n"
    assert parse_active_transport(text) is Transport.OTHER


def test_resolve_output():
    resolved = (
        "priority=0 preferredOrder=0 match=0x108000 specificIndex=-1 isDefault=false\n"
        "com.android.settings/.Settings$WirelessDebuggingActivity\n"
    )
    assert parse_resolve_output(resolved) is True
    assert parse_resolve_output("No activity found") is False
    assert parse_resolve_output("") is False
