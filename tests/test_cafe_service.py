from __future__ import annotations

import asyncio

import pytest

from cafe_directory_api.app.core.errors import CafeNotFoundError, InvalidTagFilterError
from cafe_directory_api.app.schemas.cafe import TagLevel
from cafe_directory_api.app.services.cafe_service import CafeService


def test_get_cafe_returns_requested_cafe_with_images(add_cafe) -> None:
    add_cafe("First")
    second = add_cafe("Second", images=[b"one", b"two"])

    cafe = asyncio.run(CafeService.get_cafe(second.cafe_id))

    assert cafe.cafe_id == second.cafe_id
    assert cafe.cafe_name == "Second"
    assert cafe.images == [b"one", b"two"]


def test_get_cafe_raises_for_unknown_id(db_path) -> None:
    with pytest.raises(CafeNotFoundError):
        asyncio.run(CafeService.get_cafe(999))


def test_search_matches_name_and_address_case_insensitively(add_cafe) -> None:
    add_cafe("Bean Brothers", address="Mapo-gu")
    add_cafe("Tea House", address="Bean street 3")
    add_cafe("Fritz Coffee", address="Gangnam-gu")

    names = [cafe.cafe_name for cafe in asyncio.run(CafeService.search_cafes("bean"))]

    assert names == ["Bean Brothers", "Tea House"]


def test_search_blank_or_unmatched_query_returns_empty_list(add_cafe) -> None:
    add_cafe("Bean Brothers")

    assert asyncio.run(CafeService.search_cafes("")) == []
    assert asyncio.run(CafeService.search_cafes("   ")) == []
    assert asyncio.run(CafeService.search_cafes("nothing like this")) == []


def test_search_treats_wildcards_literally(add_cafe) -> None:
    add_cafe("100% Arabica")
    add_cafe("Arabica Corner")

    names = [cafe.cafe_name for cafe in asyncio.run(CafeService.search_cafes("100%"))]

    assert names == ["100% Arabica"]


def test_area_query_includes_boundaries(add_cafe) -> None:
    add_cafe("South West", latitude=37.0, longitude=127.0)
    add_cafe("Centre", latitude=37.5, longitude=127.5)
    add_cafe("North East", latitude=38.0, longitude=128.0)
    add_cafe("Just North", latitude=38.0001, longitude=127.5)
    add_cafe("Just East", latitude=37.5, longitude=128.0001)

    cafes = asyncio.run(CafeService.get_cafes_in_area(37.0, 38.0, 127.0, 128.0))

    assert [cafe.cafe_name for cafe in cafes] == ["South West", "Centre", "North East"]


def test_area_query_with_inverted_range_returns_empty(add_cafe) -> None:
    add_cafe("Centre", latitude=37.5, longitude=127.5)

    assert asyncio.run(CafeService.get_cafes_in_area(38.0, 37.0, 127.0, 128.0)) == []
    assert asyncio.run(CafeService.get_cafes_in_area(37.0, 38.0, 128.0, 127.0)) == []


def test_map_queries_load_only_the_first_image(add_cafe) -> None:
    cafe = add_cafe("Gallery", images=[b"first", b"second", b"third"], wifi="AVAILABLE")
    add_cafe("Bare", wifi="AVAILABLE")

    in_area = asyncio.run(CafeService.get_cafes_in_area(37.0, 38.0, 126.0, 127.0))
    by_tags = asyncio.run(CafeService.get_cafes_by_tags(["wifi"], ["AVAILABLE"]))

    for cafes in (in_area, by_tags):
        assert [(c.cafe_name, c.images) for c in cafes] == [("Gallery", [b"first"]), ("Bare", [])]
    assert asyncio.run(CafeService.get_cafe(cafe.cafe_id)).images == [b"first", b"second", b"third"]


def test_drop_empty_tag_filters_removes_pairs_without_value() -> None:
    names, values = CafeService.drop_empty_tag_filters(
        ["wifi", "desk", "parking"], ["", "available", None]
    )

    assert names == ["desk"]
    assert values == ["available"]


def test_drop_empty_tag_filters_rejects_length_mismatch() -> None:
    with pytest.raises(InvalidTagFilterError):
        CafeService.drop_empty_tag_filters(["wifi", "desk"], ["AVAILABLE"])


def test_tag_filter_is_a_conjunction(add_cafe) -> None:
    add_cafe("Both", wifi="AVAILABLE", desk="AVAILABLE")
    add_cafe("Wifi only", wifi="AVAILABLE", desk="UNAVAILABLE")
    add_cafe("Desk only", desk="AVAILABLE")

    cafes = asyncio.run(CafeService.get_cafes_by_tags(["wifi", "desk"], ["AVAILABLE", "available"]))

    assert [cafe.cafe_name for cafe in cafes] == ["Both"]
    assert cafes[0].wifi is TagLevel.AVAILABLE


def test_tag_filter_without_pairs_returns_every_cafe(add_cafe) -> None:
    add_cafe("One")
    add_cafe("Two")

    assert len(asyncio.run(CafeService.get_cafes_by_tags([], []))) == 2


def test_tag_filter_ignores_unknown_tag_names(add_cafe) -> None:
    add_cafe("Quiet", desk="AVAILABLE")
    add_cafe("Busy", desk="UNAVAILABLE")

    cafes = asyncio.run(CafeService.get_cafes_by_tags(["colour", "desk"], ["red", "AVAILABLE"]))

    assert [cafe.cafe_name for cafe in cafes] == ["Quiet"]


def test_tag_names_are_case_sensitive(add_cafe) -> None:
    add_cafe("Quiet", wifi="UNAVAILABLE")

    # "WIFI" is not a tag name, so it contributes no constraint
    cafes = asyncio.run(CafeService.get_cafes_by_tags(["WIFI"], ["AVAILABLE"]))

    assert [cafe.cafe_name for cafe in cafes] == ["Quiet"]


def test_tag_filter_with_unknown_level_matches_nothing(add_cafe) -> None:
    add_cafe("Quiet", wifi="AVAILABLE")

    assert asyncio.run(CafeService.get_cafes_by_tags(["wifi"], ["sometimes"])) == []


def test_list_cafes_skips_images(add_cafe) -> None:
    add_cafe("With photo", images=[b"photo"])

    cafes = asyncio.run(CafeService.list_cafes())

    assert [cafe.cafe_name for cafe in cafes] == ["With photo"]
    assert cafes[0].images == []
