"""
Application package initializer.

Contains the main entrypoint for the API and its submodules: ``core``
(configuration, logging, database), ``schemas``, ``services`` and the
versioned ``api`` routers.
"""

from .main import app  # noqa: F401
