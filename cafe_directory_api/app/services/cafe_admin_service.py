"""
Write-side business logic for cafes (admin only).

Cafes are added together with their images, after an administrator
has looked them up on the map.  Afterwards only the amenity tags are
edited, one field at a time: a tag left null in the update payload
keeps its stored value.  Deleting a cafe removes its images through
the ``ON DELETE CASCADE`` foreign key.

Database errors are not caught here.  They propagate to the
application exception handler, which reports a generic 500.
"""

from __future__ import annotations

import base64
import logging
from typing import Dict

from cafe_directory_api.app.core.db import get_connection, get_cursor
from cafe_directory_api.app.core.errors import CafeNotFoundError
from cafe_directory_api.app.schemas.cafe import TAG_NAMES, Cafe, CafeCreate, CafeTagsUpdate
from cafe_directory_api.app.services.cafe_service import CafeService


logger = logging.getLogger(__name__)

# Placeholder returned by ``get_cafe_tags`` for tags that were never set.
UNSET_TAG = "-"


class CafeAdminService:
    """Service class for adding cafes and editing their tags."""

    @classmethod
    async def add_cafe(cls, data: CafeCreate) -> Cafe:
        """Insert a cafe and its images, then return the stored record.

        The cafe row and all image rows are committed in a single
        transaction; if any insert fails nothing is stored.  A duplicate
        ``kakao_place_id`` raises ``sqlite3.IntegrityError``.
        """
        with get_cursor() as cursor:
            cursor.execute(
                """
                INSERT INTO cafes (
                    kakao_place_id, cafe_name, latitude, longitude, address,
                    phone_number, website_url, average_rating, opening_hours,
                    wifi, outlets, desk, restroom, parking
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    data.kakao_place_id,
                    data.cafe_name,
                    data.latitude,
                    data.longitude,
                    data.address,
                    data.phone_number,
                    data.website_url,
                    data.average_rating,
                    data.opening_hours,
                    *(cls._tag_value(getattr(data, tag)) for tag in TAG_NAMES),
                ),
            )
            cafe_id = cursor.lastrowid
            for image in data.images or []:
                cursor.execute(
                    "INSERT INTO cafe_images (cafe_id, image_data) VALUES (?, ?)",
                    (cafe_id, base64.b64decode(image)),
                )
            cafe = CafeService.load_cafe(cursor, cafe_id)
        logger.info(
            "Added cafe %s '%s' with %d image(s)",
            cafe_id,
            data.cafe_name,
            len(data.images or []),
        )
        return cafe

    @classmethod
    async def update_cafe_tags(cls, cafe_id: int, data: CafeTagsUpdate) -> Cafe:
        """Overwrite the tags that are set in ``data``.

        Null fields are left untouched, so this cannot clear a tag.
        ``update_at`` is refreshed when at least one tag is written.
        Raises ``CafeNotFoundError`` if the cafe does not exist.
        """
        changes = {
            tag: getattr(data, tag).value
            for tag in TAG_NAMES
            if getattr(data, tag) is not None
        }
        with get_cursor() as cursor:
            exists = cursor.execute("SELECT cafe_id FROM cafes WHERE cafe_id = ?", (cafe_id,)).fetchone()
            if not exists:
                raise CafeNotFoundError(cafe_id)
            if changes:
                assignments = ", ".join(f"{tag} = ?" for tag in changes)
                cursor.execute(
                    f"UPDATE cafes SET {assignments}, update_at = CURRENT_TIMESTAMP WHERE cafe_id = ?",
                    (*changes.values(), cafe_id),
                )
            cafe = CafeService.load_cafe(cursor, cafe_id, with_images=False)
        if changes:
            logger.info("Updated tags of cafe %s: %s", cafe_id, changes)
        return cafe

    @classmethod
    async def get_cafe_tags(cls, cafe_id: int) -> Dict[str, str]:
        """Return ``{tag_name: level}`` for all five tags, ``"-"`` when unset.

        Raises ``CafeNotFoundError`` if the cafe does not exist.
        """
        conn = get_connection()
        try:
            cafe = CafeService.load_cafe(conn.cursor(), cafe_id, with_images=False)
            if cafe is None:
                raise CafeNotFoundError(cafe_id)
            return {tag: cls._tag_value(getattr(cafe, tag)) or UNSET_TAG for tag in TAG_NAMES}
        finally:
            conn.close()

    @classmethod
    async def delete_cafe(cls, cafe_id: int) -> None:
        """Delete a cafe and, through the foreign key, all of its images.

        Raises ``CafeNotFoundError`` if the cafe does not exist.
        """
        with get_cursor() as cursor:
            cursor.execute("DELETE FROM cafes WHERE cafe_id = ?", (cafe_id,))
            if cursor.rowcount == 0:
                raise CafeNotFoundError(cafe_id)
        logger.info("Deleted cafe %s", cafe_id)

    @staticmethod
    def _tag_value(level):
        return level.value if level is not None else None
