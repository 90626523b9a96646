"""
FastAPI app factory.

Responsibilities:
- Create and configure the FastAPI application
- Initialize shared resources (config, session registry, session factory)
- Close running sessions on shutdown
- Register routes
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI

from config import AppConfig
from observability import logger
from server.routes import register_routes
from session.devlink_session import DevLinkSession
from session.registry import SessionRegistry


SessionFactory = Callable[[str | None], DevLinkSession]


def create_app(
    config: AppConfig | None = None,
    *,
    session_factory: SessionFactory | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    session_factory builds one session for an optional device serial.
    Defaults to ADB-backed sessions from config; tests inject fakes.
    """
    config = config or AppConfig.load_from_env()
    logger.configure(json_lines=config.enable_json_logs)

    registry = SessionRegistry()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await registry.shutdown()

    app = FastAPI(title="DevLink API", lifespan=lifespan)

    app.state.config = config
    app.state.registry = registry
    app.state.session_factory = session_factory or (
        lambda serial: DevLinkSession.from_config(config, serial=serial)
    )

    register_routes(app)

    return app
