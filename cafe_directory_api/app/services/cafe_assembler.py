"""
Response shaping for cafes.

These functions turn ``Cafe`` models from the service layer into the
shapes returned by the API.  Image bytes are never sent raw; they are
base64 encoded.  The functions are pure and list helpers preserve the
order of their input.
"""

import base64
from typing import Iterable, List

from cafe_directory_api.app.schemas.cafe import (
    Cafe,
    CafeDetail,
    CafeMapPin,
    CafeRead,
    CafeSearchResult,
)


def encode_image(data: bytes) -> str:
    """Encode raw image bytes as standard base64 text."""
    return base64.b64encode(data).decode("ascii")


def to_entity(cafe: Cafe) -> CafeRead:
    """Stored entity without image data."""
    return CafeRead.model_validate(cafe.model_dump(exclude={"images"}))


def to_detail(cafe: Cafe) -> CafeDetail:
    """Detail view with every image encoded, in upload order."""
    data = cafe.model_dump(exclude={"images"})
    return CafeDetail(**data, images=[encode_image(image) for image in cafe.images])


def to_search_result(cafe: Cafe) -> CafeSearchResult:
    return CafeSearchResult(
        cafe_id=cafe.cafe_id,
        cafe_name=cafe.cafe_name,
        address=cafe.address,
        latitude=cafe.latitude,
        longitude=cafe.longitude,
    )


def to_map_pin(cafe: Cafe) -> CafeMapPin:
    """Map pin carrying only the first image, or ``None`` without images."""
    image = encode_image(cafe.images[0]) if cafe.images else None
    return CafeMapPin(
        cafe_id=cafe.cafe_id,
        cafe_name=cafe.cafe_name,
        latitude=cafe.latitude,
        longitude=cafe.longitude,
        address=cafe.address,
        average_rating=cafe.average_rating,
        opening_hours=cafe.opening_hours,
        wifi=cafe.wifi,
        outlets=cafe.outlets,
        desk=cafe.desk,
        restroom=cafe.restroom,
        parking=cafe.parking,
        image=image,
    )


def to_search_results(cafes: Iterable[Cafe]) -> List[CafeSearchResult]:
    return [to_search_result(cafe) for cafe in cafes]


def to_map_pins(cafes: Iterable[Cafe]) -> List[CafeMapPin]:
    return [to_map_pin(cafe) for cafe in cafes]
