"""
Command-line entry point: run one DevLink session and exit.

Exit codes:
    0  navigated, or fallback popup shown
    1  WiFi enable/connect timeout
    130 cancelled (Ctrl-C)
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses

from dotenv import load_dotenv

from adapters.popup.console import ConsolePopup
from config import AppConfig
from observability import logger
from session.devlink_session import DevLinkSession, SessionResult, SessionStatus


EXIT_CODES: dict[SessionStatus, int] = {
    SessionStatus.NAVIGATED: 0,
    SessionStatus.POPUP_SHOWN: 0,
    SessionStatus.FAILED: 1,
    SessionStatus.CANCELLED: 130,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devlink",
        description="Enable WiFi on an Android device, wait for a connection "
                    "and open the Wireless debugging settings.",
    )
    parser.add_argument("-s", "--serial", help="device serial (default: only attached device)")
    parser.add_argument("--targets", help="JSON file overriding the navigation candidates")
    parser.add_argument("--timeout-ms", type=int, help="per-phase wait budget")
    parser.add_argument("--text-logs", action="store_true", help="plain text logs instead of JSONL")
    return parser


async def run_session(session: DevLinkSession, popup: ConsolePopup) -> SessionResult:
    """
    Run the session, then keep any popup up until it auto-dismisses.

    Ctrl-C during the flow cancels the session. Ctrl-C while the popup is
    visible dismisses it early; the session result stands.
    """
    task = asyncio.ensure_future(session.run())
    try:
        result = await asyncio.shield(task)
    except asyncio.CancelledError:
        session.close()
        result = await task

    handle = popup.active
    if handle is not None and not handle.dismissed:
        try:
            await handle.wait()
        except asyncio.CancelledError:
            popup.dismiss()
    return result


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    config = AppConfig.load_from_env()
    overrides: dict[str, object] = {}
    if args.targets:
        overrides["targets_file"] = args.targets
    if args.timeout_ms:
        overrides["wifi_timeout_ms"] = args.timeout_ms
    if args.text_logs:
        overrides["enable_json_logs"] = False
    config = dataclasses.replace(config, **overrides)

    logger.configure(json_lines=config.enable_json_logs)

    popup = ConsolePopup()
    session = DevLinkSession.from_config(config, serial=args.serial, popup=popup)
    popup.session_id = session.session_id

    try:
        result = asyncio.run(run_session(session, popup))
    except KeyboardInterrupt:
        return EXIT_CODES[SessionStatus.CANCELLED]
    return EXIT_CODES.get(result.status, 1)


if __name__ == "__main__":
    raise SystemExit(main())
