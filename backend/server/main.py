"""
Development server entry point.

Runs the DevLink API under uvicorn with settings from the environment.
"""

from __future__ import annotations

import os

import uvicorn
from dotenv import load_dotenv

from config import AppConfig


def main() -> None:
    load_dotenv()
    config = AppConfig.load_from_env()
    uvicorn.run(
        "server.asgi:app",
        host=os.environ.get("DEVLINK_HOST", "127.0.0.1"),
        port=int(os.environ.get("DEVLINK_PORT", "8000")),
        log_level=config.log_level.lower(),
        reload=config.env == "dev",
    )


if __name__ == "__main__":
    main()
