from __future__ import annotations

import asyncio
import sqlite3

import pytest

from cafe_directory_api.app.core.db import get_connection
from cafe_directory_api.app.core.errors import CafeNotFoundError
from cafe_directory_api.app.schemas.cafe import CafeCreate, CafeTagsUpdate, TagLevel
from cafe_directory_api.app.services.cafe_admin_service import CafeAdminService
from cafe_directory_api.app.services.cafe_service import CafeService

from conftest import cafe_payload


def test_add_then_get_returns_input_fields(db_path) -> None:
    payload = cafe_payload("Bean Brothers", images=[b"a", b"b"], kakao_place_id="42", wifi="AVAILABLE")

    added = asyncio.run(CafeAdminService.add_cafe(CafeCreate(**payload)))
    fetched = asyncio.run(CafeService.get_cafe(added.cafe_id))

    assert fetched.cafe_id == added.cafe_id
    assert fetched.update_at is not None
    assert fetched.images == [b"a", b"b"]
    for field in ("kakao_place_id", "cafe_name", "latitude", "longitude", "address",
                  "phone_number", "website_url", "average_rating", "opening_hours"):
        assert getattr(fetched, field) == payload[field]
    assert fetched.wifi is TagLevel.AVAILABLE
    assert fetched.outlets is None


def test_add_with_duplicate_kakao_place_id_raises_store_error(add_cafe) -> None:
    add_cafe("Original", kakao_place_id="dup")

    with pytest.raises(sqlite3.IntegrityError):
        add_cafe("Copy", kakao_place_id="dup")


def test_writes_succeed_after_a_rejected_insert(add_cafe) -> None:
    original = add_cafe("Original", kakao_place_id="dup")
    with pytest.raises(sqlite3.IntegrityError) as excinfo:
        add_cafe("Copy", kakao_place_id="dup")

    # The traceback stays referenced through excinfo while writing again.
    assert excinfo.value is not None
    added = add_cafe("Next", kakao_place_id="other")
    updated = asyncio.run(CafeAdminService.update_cafe_tags(original.cafe_id, CafeTagsUpdate(desk=TagLevel.LIMITED)))

    assert added.cafe_name == "Next"
    assert updated.desk is TagLevel.LIMITED
    assert [cafe.cafe_name for cafe in asyncio.run(CafeService.list_cafes())] == ["Original", "Next"]


def test_update_tags_only_overwrites_non_null_fields(add_cafe) -> None:
    cafe = add_cafe(wifi="AVAILABLE", outlets="UNAVAILABLE")

    updated = asyncio.run(
        CafeAdminService.update_cafe_tags(cafe.cafe_id, CafeTagsUpdate(wifi=None, outlets="AVAILABLE"))
    )

    assert updated.wifi is TagLevel.AVAILABLE
    assert updated.outlets is TagLevel.AVAILABLE
    assert updated.desk is None


def test_update_tags_with_empty_payload_changes_nothing(add_cafe) -> None:
    cafe = add_cafe(parking="LIMITED")

    updated = asyncio.run(CafeAdminService.update_cafe_tags(cafe.cafe_id, CafeTagsUpdate()))

    assert updated.parking is TagLevel.LIMITED
    assert updated.update_at == cafe.update_at


def test_update_tags_unknown_cafe_raises(db_path) -> None:
    with pytest.raises(CafeNotFoundError):
        asyncio.run(CafeAdminService.update_cafe_tags(7, CafeTagsUpdate(wifi="AVAILABLE")))


def test_get_tags_uses_placeholder_for_unset_tags(add_cafe) -> None:
    cafe = add_cafe()

    tags = asyncio.run(CafeAdminService.get_cafe_tags(cafe.cafe_id))

    assert tags == {"wifi": "-", "outlets": "-", "desk": "-", "restroom": "-", "parking": "-"}


def test_get_tags_returns_level_names(add_cafe) -> None:
    cafe = add_cafe(wifi="AVAILABLE", restroom="LIMITED")

    tags = asyncio.run(CafeAdminService.get_cafe_tags(cafe.cafe_id))

    assert tags["wifi"] == "AVAILABLE"
    assert tags["restroom"] == "LIMITED"
    assert tags["desk"] == "-"


def test_get_tags_unknown_cafe_raises(db_path) -> None:
    with pytest.raises(CafeNotFoundError):
        asyncio.run(CafeAdminService.get_cafe_tags(3))


def test_delete_cafe_cascades_to_images(add_cafe) -> None:
    cafe = add_cafe(images=[b"one", b"two"])
    kept = add_cafe("Kept", images=[b"three"])

    asyncio.run(CafeAdminService.delete_cafe(cafe.cafe_id))

    conn = get_connection()
    try:
        rows = conn.execute("SELECT cafe_id FROM cafe_images").fetchall()
    finally:
        conn.close()
    assert [row["cafe_id"] for row in rows] == [kept.cafe_id]
    with pytest.raises(CafeNotFoundError):
        asyncio.run(CafeService.get_cafe(cafe.cafe_id))


def test_delete_unknown_cafe_raises(db_path) -> None:
    with pytest.raises(CafeNotFoundError):
        asyncio.run(CafeAdminService.delete_cafe(11))
