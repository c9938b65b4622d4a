"""Entry point for the Player Registry API.

Launches the FastAPI application under Uvicorn.  It is intended to be
executed from the project root, for example under Docker, where you only
specify a single Python file to run.

Configuration such as DATABASE_URL, STORAGE_BACKEND, LOG_LEVEL, API_HOST
and API_PORT is read from environment variables (see
``player_registry_api/app/core/config.py``).

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from player_registry_api.app.core.config import settings
from player_registry_api.app.main import app


async def run_api() -> None:
    """Start the API using Uvicorn.

    Host and port come from ``settings.api_host`` and ``settings.api_port``.
    """
    config = Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Interrupted")
