"""
Route registration for the DevLink API.

Responsibilities:
- Define HTTP endpoints
- Pull dependencies from app.state
- Translate registry/session state into JSON
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from observability.logger import log_event, now_ms
from session.devlink_session import DevLinkSession
from session.registry import SessionRegistry


class StartSessionRequest(BaseModel):
    """Body of POST /sessions. serial=None targets the only attached device."""
    serial: str | None = None


def register_routes(app: FastAPI) -> None:
    """Register all routes on the FastAPI app."""

    @app.get("/health")
    async def health() -> dict[str, str]:  # pyright: ignore[reportUnusedFunction]
        return {"status": "ok"}

    @app.post("/sessions", status_code=202)
    async def start_session(  # pyright: ignore[reportUnusedFunction]
        body: StartSessionRequest | None = None,
        wait: bool = False,
    ) -> dict[str, Any]:
        registry: SessionRegistry = app.state.registry
        serial = body.serial if body is not None else None

        try:
            session: DevLinkSession = app.state.session_factory(serial)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            log_event({
                "ts_ms": now_ms(),
                "event_type": "SESSION_CREATE_FATAL_ERROR",
                "serial": serial,
                "exception": type(exc).__name__,
                "message": str(exc),
            })
            raise HTTPException(status_code=500, detail=str(exc)) from exc

        session_id = registry.start(session)
        if wait:
            result = await registry.wait(session_id)
            if result is not None:
                return result.to_dict()
        return _describe(session)

    @app.get("/sessions/{session_id}")
    async def get_session(session_id: str) -> dict[str, Any]:  # pyright: ignore[reportUnusedFunction]
        return _describe(_require(app, session_id))

    @app.delete("/sessions/{session_id}")
    async def close_session(session_id: str) -> dict[str, Any]:  # pyright: ignore[reportUnusedFunction]
        session = _require(app, session_id)
        session.close()
        return _describe(session)

    @app.post("/sessions/{session_id}/popup/dismiss")
    async def dismiss_popup(session_id: str) -> dict[str, Any]:  # pyright: ignore[reportUnusedFunction]
        session = _require(app, session_id)
        return {"session_id": session_id, "dismissed": session.dismiss_popup()}


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _require(app: FastAPI, session_id: str) -> DevLinkSession:
    registry: SessionRegistry = app.state.registry
    session = registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="unknown session")
    return session


def _describe(session: DevLinkSession) -> dict[str, Any]:
    if session.result is not None:
        return session.result.to_dict()
    return {
        "session_id": session.session_id,
        "status": session.status.value,
        "connection_state": session.orchestrator.state.current().value,
    }
