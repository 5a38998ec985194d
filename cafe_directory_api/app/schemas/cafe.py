"""
Pydantic models for cafe data.

``CafeBase`` holds the fields shared by requests and responses.
``CafeCreate`` is the admin payload for adding a cafe (images arrive
base64 encoded), ``CafeTagsUpdate`` is the partial tag update payload
and ``CafeRead`` is the stored entity as returned by the API.  The
``Cafe`` model extends ``CafeRead`` with raw image bytes and is used
only between the service layer and the response assembler; it is
never serialised directly.

The three list/detail projections (``CafeDetail``,
``CafeSearchResult`` and ``CafeMapPin``) are built by
``services.cafe_assembler``.
"""

import base64
import binascii
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class TagLevel(str, Enum):
    """Availability level of an amenity tag."""

    AVAILABLE = "AVAILABLE"
    LIMITED = "LIMITED"
    UNAVAILABLE = "UNAVAILABLE"


# Names of the amenity tag columns, in display order.
TAG_NAMES = ("wifi", "outlets", "desk", "restroom", "parking")


class CafeTags(BaseModel):
    wifi: Optional[TagLevel] = Field(None, example="AVAILABLE")
    outlets: Optional[TagLevel] = Field(None, example="LIMITED")
    desk: Optional[TagLevel] = Field(None, example="AVAILABLE")
    restroom: Optional[TagLevel] = Field(None, example="AVAILABLE")
    parking: Optional[TagLevel] = Field(None, example="UNAVAILABLE")


class CafeBase(CafeTags):
    kakao_place_id: Optional[str] = Field(None, example="1234567890")
    cafe_name: str = Field(..., example="Bean Brothers")
    latitude: float = Field(..., example=37.5665)
    longitude: float = Field(..., example=126.9780)
    address: Optional[str] = Field(None, example="Seoul, Jung-gu, Sejong-daero 110")
    phone_number: Optional[str] = Field(None, example="02-123-4567")
    website_url: Optional[str] = Field(None, example="https://place.map.kakao.com/1234567890")
    average_rating: Optional[float] = Field(None, example=4.5)
    opening_hours: Optional[str] = Field(None, example="Mon-Sun 09:00-22:00")


class CafeCreate(CafeBase):
    """Schema for adding a cafe (admin)."""

    images: Optional[List[str]] = Field(None, description="Base64 encoded image payloads")

    @field_validator("images")
    @classmethod
    def validate_images(cls, v):
        if v is None:
            return None
        for item in v:
            try:
                base64.b64decode(item, validate=True)
            except (binascii.Error, ValueError) as e:
                raise ValueError("Each image must be a base64 encoded string") from e
        return v


class CafeTagsUpdate(CafeTags):
    """Schema for updating cafe tags.

    All fields are optional; only provided (non-null) values are
    written.  A null field leaves the stored tag untouched.
    """


class CafeRead(CafeBase):
    """Schema for reading a stored cafe (no image payloads)."""

    cafe_id: int
    update_at: Optional[str] = None

    model_config = {
        "from_attributes": True,
    }


class Cafe(CafeRead):
    """Stored cafe together with its raw image data, in upload order."""

    images: List[bytes] = Field(default_factory=list)


class CafeDetail(CafeRead):
    """Detail view: every field plus every image as base64 text."""

    images: List[str] = Field(default_factory=list)


class CafeSearchResult(BaseModel):
    """Keyword search result: identity and location only."""

    cafe_id: int
    cafe_name: str
    address: Optional[str]
    latitude: float
    longitude: float


class CafeMapPin(BaseModel):
    """Compact view for rendering many cafes on a map.

    Fields are declared in output order: identity and location first,
    then the five tags, then at most the first image of the cafe,
    base64 encoded, or ``None`` when the cafe has no images.
    """

    cafe_id: int
    cafe_name: str
    latitude: float
    longitude: float
    address: Optional[str]
    average_rating: Optional[float]
    opening_hours: Optional[str]
    wifi: Optional[TagLevel] = None
    outlets: Optional[TagLevel] = None
    desk: Optional[TagLevel] = None
    restroom: Optional[TagLevel] = None
    parking: Optional[TagLevel] = None
    image: Optional[str] = None
