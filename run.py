"""Entry point for the Tag Cafe API.

Starts the FastAPI application with Uvicorn.  Intended to be executed
from the project root, e.g. inside the Docker image::

    python run.py

Host and port are read from the ``API_HOST`` and ``API_PORT``
environment variables (defaults ``0.0.0.0`` and ``8080``).  All other
configuration (database path, CORS origin, log level) is read by
``cafe_directory_api.app.core.config``.
"""
import asyncio
import os

from uvicorn import Config, Server

from cafe_directory_api.app.main import app


async def run_api() -> None:
    """Serve the API until interrupted."""
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8080"))
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass
