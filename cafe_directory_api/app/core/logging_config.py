"""
Process-wide logging for the Tag Cafe API.

``main.create_app`` calls ``setup_logging`` with ``settings.log_level``
(``LOG_LEVEL``) and ``settings.log_file`` (``LOG_FILE``).  Records go
to stderr and, when ``LOG_FILE`` is set, are appended to that file as
well.  Services log through ``logging.getLogger(__name__)`` and never
attach handlers themselves.
"""

import logging
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Install the stderr handler and, optionally, a file handler.

    ``level`` is a level name in any case; unknown names mean ``INFO``.
    The parent directory of ``logfile`` is created if missing.  Does
    nothing when the root logger already has handlers, so building the
    app twice (or under a test runner) keeps the existing setup.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        log_path = Path(logfile).expanduser().resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
    )
    logging.getLogger(__name__).debug("Logging configured (level=%s, file=%s)", level, logfile)
