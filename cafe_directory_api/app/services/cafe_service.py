"""
Read-side business logic for cafes.

``CafeService`` resolves cafes for the public endpoints: lookup by
ID, keyword search, map area (bounding box) queries and multi-tag
filtering.  Results are ``Cafe`` models carrying raw image bytes;
shaping them for the API is the job of ``cafe_assembler``.

All queries use parameterized statements.  Tag column names are only
interpolated into SQL after being checked against ``TAG_NAMES``.
Lists are returned in ascending ``cafe_id`` order.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from cafe_directory_api.app.core.db import get_connection
from cafe_directory_api.app.core.errors import CafeNotFoundError, InvalidTagFilterError
from cafe_directory_api.app.schemas.cafe import TAG_NAMES, Cafe

logger = logging.getLogger(__name__)

CAFE_COLUMNS = (
    "cafe_id, kakao_place_id, cafe_name, latitude, longitude, address, "
    "phone_number, website_url, update_at, average_rating, opening_hours, "
    "wifi, outlets, desk, restroom, parking"
)

# Maximum number of cafe IDs bound into one image query.
IMAGE_QUERY_BATCH = 500


class CafeService:
    """Service for looking up and filtering cafes."""

    @classmethod
    async def get_cafe(cls, cafe_id: int) -> Cafe:
        """Return a cafe with all of its tags and images.

        Raises ``CafeNotFoundError`` if no cafe has this ID.
        """
        conn = get_connection()
        try:
            cafe = cls.load_cafe(conn.cursor(), cafe_id)
            if cafe is None:
                raise CafeNotFoundError(cafe_id)
            return cafe
        finally:
            conn.close()

    @classmethod
    async def list_cafes(cls) -> List[Cafe]:
        """Return every cafe without image data."""
        conn = get_connection()
        try:
            rows = conn.execute(f"SELECT {CAFE_COLUMNS} FROM cafes ORDER BY cafe_id").fetchall()
            return [cls._row_to_cafe(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def search_cafes(cls, query: str) -> List[Cafe]:
        """Return cafes whose name or address contains ``query``.

        Matching is case-insensitive for ASCII text.  ``%`` and ``_`` in
        the query are matched literally.  A blank query returns an empty
        list rather than every cafe.  Images are not loaded.
        """
        if query is None or not query.strip():
            return []
        escaped = query.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        conn = get_connection()
        try:
            rows = conn.execute(
                f"""
                SELECT {CAFE_COLUMNS} FROM cafes
                WHERE cafe_name LIKE ? ESCAPE '\\' OR address LIKE ? ESCAPE '\\'
                ORDER BY cafe_id
                """,
                (pattern, pattern),
            ).fetchall()
            return [cls._row_to_cafe(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_cafes_in_area(
        cls,
        min_lat: float,
        max_lat: float,
        min_lng: float,
        max_lng: float,
    ) -> List[Cafe]:
        """Return cafes inside the closed rectangle ``[min_lat, max_lat] x [min_lng, max_lng]``.

        Points lying exactly on a boundary are included.  An inverted
        range (``min > max``) matches nothing.  Each cafe carries at most
        its first image, which is all a map pin shows.
        """
        if min_lat > max_lat or min_lng > max_lng:
            return []
        conn = get_connection()
        try:
            cursor = conn.cursor()
            rows = cursor.execute(
                f"""
                SELECT {CAFE_COLUMNS} FROM cafes
                WHERE latitude BETWEEN ? AND ? AND longitude BETWEEN ? AND ?
                ORDER BY cafe_id
                """,
                (min_lat, max_lat, min_lng, max_lng),
            ).fetchall()
            return cls._rows_with_first_image(cursor, rows)
        finally:
            conn.close()

    @classmethod
    async def get_cafes_by_tags(cls, tag_names: Sequence[str], values: Sequence[str]) -> List[Cafe]:
        """Return cafes matching every ``(tag_name, value)`` pair.

        The pairs are expected to be pre-filtered with
        ``drop_empty_tag_filters``.  With no pairs, every cafe is
        returned.  Tag names are case-sensitive; names that are not
        amenity tags are ignored.  Values are compared with the stored
        level after upper-casing, so ``available`` matches ``AVAILABLE``.
        Like the area query, only the first image of each cafe is loaded.
        """
        where_clauses: list[str] = []
        params: list = []
        for tag_name, value in zip(tag_names, values):
            if tag_name not in TAG_NAMES:
                logger.debug("Ignoring unknown tag filter %r", tag_name)
                continue
            where_clauses.append(f"{tag_name} = ?")
            params.append(value.upper())
        query = f"SELECT {CAFE_COLUMNS} FROM cafes"
        if where_clauses:
            query += " WHERE " + " AND ".join(where_clauses)
        query += " ORDER BY cafe_id"
        conn = get_connection()
        try:
            cursor = conn.cursor()
            rows = cursor.execute(query, tuple(params)).fetchall()
            return cls._rows_with_first_image(cursor, rows)
        finally:
            conn.close()

    @staticmethod
    def drop_empty_tag_filters(
        tag_names: Sequence[str],
        values: Sequence[Optional[str]],
    ) -> Tuple[List[str], List[str]]:
        """Validate a tag filter request and drop pairs without a value.

        Raises ``InvalidTagFilterError`` if the two lists differ in
        length.  Pairs whose value is ``None`` or an empty string are
        removed; the remaining pairs keep their order.
        """
        if len(tag_names) != len(values):
            raise InvalidTagFilterError(
                f"tagNames and values must have the same length ({len(tag_names)} != {len(values)})"
            )
        valid_tag_names: List[str] = []
        valid_values: List[str] = []
        for tag_name, value in zip(tag_names, values):
            if value is None or value == "":
                continue
            valid_tag_names.append(tag_name)
            valid_values.append(value)
        return valid_tag_names, valid_values

    @classmethod
    def load_cafe(cls, cursor: sqlite3.Cursor, cafe_id: int, with_images: bool = True) -> Optional[Cafe]:
        """Fetch one cafe using an open cursor, or ``None`` if it does not exist."""
        row = cursor.execute(
            f"SELECT {CAFE_COLUMNS} FROM cafes WHERE cafe_id = ?",
            (cafe_id,),
        ).fetchone()
        if not row:
            return None
        images: List[bytes] = []
        if with_images:
            images = cls._load_images(cursor, [cafe_id]).get(cafe_id, [])
        return cls._row_to_cafe(row, images)

    @classmethod
    def _rows_with_first_image(cls, cursor: sqlite3.Cursor, rows: List[sqlite3.Row]) -> List[Cafe]:
        """Convert rows for map pins, loading at most one image per cafe."""
        images = cls._load_images(cursor, [row["cafe_id"] for row in rows], first_only=True)
        return [cls._row_to_cafe(row, images.get(row["cafe_id"], [])) for row in rows]

    @staticmethod
    def _load_images(
        cursor: sqlite3.Cursor,
        cafe_ids: Iterable[int],
        first_only: bool = False,
    ) -> Dict[int, List[bytes]]:
        """Return image payloads per cafe, each list in upload order.

        With ``first_only`` only the earliest image of each cafe is
        read, so large result sets do not pull every blob into memory.
        IDs are queried in batches to stay under SQLite's host
        parameter limit.
        """
        cafe_ids = list(cafe_ids)
        result: Dict[int, List[bytes]] = {}
        for start in range(0, len(cafe_ids), IMAGE_QUERY_BATCH):
            batch = cafe_ids[start:start + IMAGE_QUERY_BATCH]
            placeholders = ", ".join("?" for _ in batch)
            if first_only:
                query = f"""
                    SELECT cafe_id, image_data FROM cafe_images
                    WHERE id IN (
                        SELECT MIN(id) FROM cafe_images
                        WHERE cafe_id IN ({placeholders}) GROUP BY cafe_id
                    )
                    ORDER BY id
                """
            else:
                query = f"SELECT cafe_id, image_data FROM cafe_images WHERE cafe_id IN ({placeholders}) ORDER BY id"
            for row in cursor.execute(query, tuple(batch)).fetchall():
                result.setdefault(row["cafe_id"], []).append(bytes(row["image_data"]))
        return result

    @staticmethod
    def _row_to_cafe(row: sqlite3.Row, images: Optional[List[bytes]] = None) -> Cafe:
        """Convert a database row to a ``Cafe`` model."""
        return Cafe(
            cafe_id=row["cafe_id"],
            kakao_place_id=row["kakao_place_id"],
            cafe_name=row["cafe_name"],
            latitude=row["latitude"],
            longitude=row["longitude"],
            address=row["address"],
            phone_number=row["phone_number"],
            website_url=row["website_url"],
            update_at=row["update_at"],
            average_rating=row["average_rating"],
            opening_hours=row["opening_hours"],
            wifi=row["wifi"],
            outlets=row["outlets"],
            desk=row["desk"],
            restroom=row["restroom"],
            parking=row["parking"],
            images=images or [],
        )
