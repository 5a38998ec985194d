"""
Cafe endpoints for API v1.

Public routes return cafes in three shapes: the detail view for a
single cafe, a light search result for keyword search, and map pins
for area and tag filter queries.  The admin routes add cafes, edit
and read their amenity tags, and delete them.

Static paths (``/search``, ``/area``, ``/filter``) are declared
before ``/{cafe_id}``.
"""

from typing import Dict, List

from fastapi import APIRouter, HTTPException, Query, status

from cafe_directory_api.app.core.errors import CafeNotFoundError, InvalidTagFilterError
from cafe_directory_api.app.schemas.cafe import (
    CafeCreate,
    CafeDetail,
    CafeMapPin,
    CafeRead,
    CafeSearchResult,
    CafeTagsUpdate,
)
from cafe_directory_api.app.services import cafe_assembler
from cafe_directory_api.app.services.cafe_admin_service import CafeAdminService
from cafe_directory_api.app.services.cafe_service import CafeService

router = APIRouter()


def _split_list_param(items: List[str]) -> List[str]:
    """Accept both ``?v=a&v=b`` and ``?v=a,b`` forms of a list parameter.

    Empty entries are kept (``?v=,b`` gives ``["", "b"]``) so that the
    filter can pair them with their tag names before dropping them.
    """
    result: List[str] = []
    for item in items:
        result.extend(item.split(","))
    return result


@router.get("", response_model=List[CafeRead], summary="List all cafes")
async def list_cafes() -> List[CafeRead]:
    """Return every cafe as stored, without images."""
    cafes = await CafeService.list_cafes()
    return [cafe_assembler.to_entity(cafe) for cafe in cafes]


@router.get("/search", response_model=List[CafeSearchResult], summary="Search cafes by keyword")
async def search_cafes(query: str = Query(...)) -> List[CafeSearchResult]:
    """Search cafe names and addresses.  Returns an empty list when nothing matches."""
    cafes = await CafeService.search_cafes(query)
    return cafe_assembler.to_search_results(cafes)


@router.get("/area", response_model=List[CafeMapPin], summary="Cafes inside a map area")
async def get_cafes_in_area(
    min_lat: float = Query(..., alias="minLat"),
    max_lat: float = Query(..., alias="maxLat"),
    min_lng: float = Query(..., alias="minLng"),
    max_lng: float = Query(..., alias="maxLng"),
) -> List[CafeMapPin]:
    """Return map pins for cafes inside the given latitude/longitude box.

    Boundaries are inclusive.
    """
    cafes = await CafeService.get_cafes_in_area(min_lat, max_lat, min_lng, max_lng)
    return cafe_assembler.to_map_pins(cafes)


@router.get("/filter", response_model=List[CafeMapPin], summary="Filter cafes by several tags")
async def filter_cafes(
    tag_names: List[str] = Query([], alias="tagNames"),
    values: List[str] = Query([], alias="values"),
) -> List[CafeMapPin]:
    """Return map pins for cafes matching every given tag/value pair.

    ``tagNames`` and ``values`` are parallel lists and must have the
    same length (HTTP 400 otherwise, including when only one of them
    is given).  Pairs with an empty value are skipped; if none remain,
    every cafe is returned.
    """
    try:
        valid_tag_names, valid_values = CafeService.drop_empty_tag_filters(
            _split_list_param(tag_names),
            _split_list_param(values),
        )
    except InvalidTagFilterError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    cafes = await CafeService.get_cafes_by_tags(valid_tag_names, valid_values)
    return cafe_assembler.to_map_pins(cafes)


@router.post("", response_model=CafeRead, summary="admin - add a cafe")
async def add_cafe(cafe_in: CafeCreate) -> CafeRead:
    """Store a cafe found on the map, together with its photos."""
    cafe = await CafeAdminService.add_cafe(cafe_in)
    return cafe_assembler.to_entity(cafe)


@router.get("/{cafe_id}", response_model=CafeDetail, summary="Get a cafe by ID")
async def get_cafe(cafe_id: int) -> CafeDetail:
    """Return full cafe details with every photo.  HTTP 404 if missing."""
    try:
        cafe = await CafeService.get_cafe(cafe_id)
    except CafeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return cafe_assembler.to_detail(cafe)


@router.delete("/{cafe_id}", status_code=status.HTTP_204_NO_CONTENT, summary="admin - delete a cafe")
async def delete_cafe(cafe_id: int) -> None:
    """Delete a cafe and its photos.  HTTP 404 if missing."""
    try:
        await CafeAdminService.delete_cafe(cafe_id)
    except CafeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return None


@router.put("/{cafe_id}/tags", response_model=CafeRead, summary="admin - update cafe tags")
async def update_cafe_tags(cafe_id: int, tags_in: CafeTagsUpdate) -> CafeRead:
    """Overwrite the tags present in the body; null tags stay as they are."""
    try:
        cafe = await CafeAdminService.update_cafe_tags(cafe_id, tags_in)
    except CafeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return cafe_assembler.to_entity(cafe)


@router.get("/{cafe_id}/tags", response_model=Dict[str, str], summary="Get cafe tags")
async def get_cafe_tags(cafe_id: int) -> Dict[str, str]:
    """Return each tag's level, or ``"-"`` for tags that are not set."""
    try:
        return await CafeAdminService.get_cafe_tags(cafe_id)
    except CafeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
