"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API can be started locally without any setup.  In a deployment you
should override at least ``DATABASE_URL`` and ``CORS_ORIGIN``.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Tag Cafe API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Prefix under which the versioned router is mounted.  Empty by
    # default so the web frontend can call ``/cafes/...`` directly.
    api_prefix: str = os.getenv("API_PREFIX", "")

    # Path to the SQLite database.  Relative paths are resolved against
    # the package root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "tagcafe.db")

    # The only origin allowed to call the API from a browser (the web
    # frontend).  CORS is restricted to this single origin.
    cors_origin: str = os.getenv("CORS_ORIGIN", "https://tagcafe.site")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
