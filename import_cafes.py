#!/usr/bin/env python3
"""
Import cafes from a JSON file into the Tag Cafe SQLite database.

The file must contain a JSON array of cafe objects with the same
fields as the ``POST /cafes`` body (``cafe_name``, ``latitude``,
``longitude``, optional contact fields, tags and base64 ``images``).
Migrations are applied first, so the database file is created if it
does not exist.  Entries that fail validation or violate a database
constraint (e.g. a ``kakao_place_id`` that is already stored) are
reported and skipped.

Usage:
    python import_cafes.py --db ./cafe_directory_api/tagcafe.db --file cafes.json
"""

import argparse
import asyncio
import json
import logging
import os
import sqlite3
import sys
from typing import List, Optional

from pydantic import ValidationError

from cafe_directory_api.app.core.config import settings
from cafe_directory_api.app.core.db import init_db
from cafe_directory_api.app.core.logging_config import setup_logging
from cafe_directory_api.app.schemas.cafe import CafeCreate
from cafe_directory_api.app.services.cafe_admin_service import CafeAdminService


logger = logging.getLogger("import_cafes")


async def import_cafes(entries: List[dict]) -> int:
    """Add each entry as a cafe and return how many were stored."""
    imported = 0
    for index, entry in enumerate(entries):
        try:
            cafe_in = CafeCreate.model_validate(entry)
        except ValidationError as e:
            logger.warning("Skipping entry %d: invalid cafe data: %s", index, e)
            continue
        try:
            await CafeAdminService.add_cafe(cafe_in)
        except sqlite3.IntegrityError as e:
            logger.warning("Skipping entry %d (%s): %s", index, cafe_in.cafe_name, e)
            continue
        imported += 1
    return imported


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Import cafes from a JSON file (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (created if missing)")
    ap.add_argument("--file", required=True, help="JSON file containing an array of cafes")
    args = ap.parse_args(argv)

    setup_logging(settings.log_level)

    if not os.path.exists(args.file):
        print(f"[!] File not found: {args.file}", file=sys.stderr)
        return 1
    with open(args.file, "r", encoding="utf-8") as f:
        entries = json.load(f)
    if not isinstance(entries, list):
        print("[!] Expected a JSON array of cafes.", file=sys.stderr)
        return 1

    settings.database_url = os.path.abspath(args.db)
    init_db()
    imported = asyncio.run(import_cafes(entries))
    print(f"[+] Imported {imported} of {len(entries)} cafe(s) into {settings.database_url}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
