"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), a cursor context manager (``get_cursor``) and
``init_db``, which applies migrations on application start.  SQLite
is used as a lightweight embedded store; to switch to another DBMS
you would replace the connection logic and adapt the SQL.

Applied migration versions are stored in the ``migrations`` table and
new migrations are executed in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import settings


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the package root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # cafe_directory_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  Foreign key enforcement is switched on for the lifetime of
    the connection; SQLite keeps it off by default, and without it
    deleting a cafe would leave its images behind.
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor inside one transaction.

    Commits when the block finishes and rolls back when it raises.  On
    error the cursor is closed before the rollback: a traceback that is
    still referenced (by a logger or a test) keeps the failed statement
    alive otherwise, and the connection would go on holding the write
    lock after ``close()``.
    """
    conn = get_connection()
    cursor = conn.cursor()
    try:
        yield cursor
        conn.commit()
    except Exception:
        cursor.close()
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any newer entries of the
    ``migrations`` list.  To change the schema, append a migration
    with an incremented version number.
    """
    migrations: list[tuple[int, str]] = [
        # Migration 1: cafes and their images
        (
            1,
            """
            CREATE TABLE IF NOT EXISTS cafes (
                cafe_id INTEGER PRIMARY KEY AUTOINCREMENT,
                kakao_place_id TEXT UNIQUE,
                cafe_name TEXT NOT NULL,
                latitude REAL NOT NULL,
                longitude REAL NOT NULL,
                address TEXT,
                phone_number TEXT,
                website_url TEXT,
                update_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                average_rating REAL,
                opening_hours TEXT,
                wifi TEXT CHECK (wifi IN ('AVAILABLE', 'LIMITED', 'UNAVAILABLE')),
                outlets TEXT CHECK (outlets IN ('AVAILABLE', 'LIMITED', 'UNAVAILABLE')),
                desk TEXT CHECK (desk IN ('AVAILABLE', 'LIMITED', 'UNAVAILABLE')),
                restroom TEXT CHECK (restroom IN ('AVAILABLE', 'LIMITED', 'UNAVAILABLE')),
                parking TEXT CHECK (parking IN ('AVAILABLE', 'LIMITED', 'UNAVAILABLE'))
            );

            CREATE TABLE IF NOT EXISTS cafe_images (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                cafe_id INTEGER NOT NULL,
                image_data BLOB NOT NULL,
                FOREIGN KEY(cafe_id) REFERENCES cafes(cafe_id) ON DELETE CASCADE
            );
            """,
        ),
        # Migration 2: indices for the map area query and image lookups
        (
            2,
            """
            CREATE INDEX IF NOT EXISTS idx_cafes_lat_lng ON cafes(latitude, longitude);
            CREATE INDEX IF NOT EXISTS idx_cafe_images_cafe_id ON cafe_images(cafe_id);
            """,
        ),
    ]

    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in migrations:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
