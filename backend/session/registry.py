"""
In-process session registry for the HTTP control surface.

Responsibilities:
- Start sessions as background tasks
- Look sessions up by id
- Close sessions individually or all at shutdown

Finished sessions stay readable for SESSION_RETENTION_S, then are evicted.
"""

from __future__ import annotations

import asyncio
from asyncio import Task, TimerHandle

from constants import SESSION_RETENTION_S
from observability.logger import log_event, now_ms
from session.devlink_session import DevLinkSession, SessionResult


class SessionRegistry:
    """Owns background tasks for running sessions."""

    def __init__(self, *, retention_s: float = SESSION_RETENTION_S) -> None:
        self._retention_s = retention_s
        self._sessions: dict[str, DevLinkSession] = {}
        self._tasks: dict[str, Task[SessionResult]] = {}
        self._evictions: dict[str, TimerHandle] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def start(self, session: DevLinkSession) -> str:
        """Schedule session.run() on the running loop; returns the session id."""
        self._sessions[session.session_id] = session
        task = asyncio.get_running_loop().create_task(session.run())
        task.add_done_callback(lambda t, sid=session.session_id: self._on_done(sid, t))
        self._tasks[session.session_id] = task
        return session.session_id

    def get(self, session_id: str) -> DevLinkSession | None:
        return self._sessions.get(session_id)

    def close(self, session_id: str) -> bool:
        session = self._sessions.get(session_id)
        if session is None:
            return False
        session.close()
        return True

    async def wait(self, session_id: str) -> SessionResult | None:
        """Result of the session; waits if it is still running. None if unknown."""
        task = self._tasks.get(session_id)
        if task is not None:
            return await task
        session = self._sessions.get(session_id)
        return session.result if session is not None else None

    async def shutdown(self) -> None:
        """Close every session and wait for their tasks to settle."""
        for session in self._sessions.values():
            session.close()
        tasks = list(self._tasks.values())
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        for handle in self._evictions.values():
            handle.cancel()
        self._evictions.clear()

    def _on_done(self, session_id: str, task: Task[SessionResult]) -> None:
        self._tasks.pop(session_id, None)
        self._evictions[session_id] = task.get_loop().call_later(
            self._retention_s, self._evict, session_id
        )

        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log_event({
                "ts_ms": now_ms(),
                "event_type": "SESSION_FATAL_ERROR",
                "session_id": session_id,
                "exception": type(exc).__name__,
                "message": str(exc),
            })

    def _evict(self, session_id: str) -> None:
        self._evictions.pop(session_id, None)
        self._sessions.pop(session_id, None)
