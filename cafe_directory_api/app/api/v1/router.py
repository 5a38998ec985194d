"""
Top-level router for version 1 of the API.

This router aggregates domain-specific routers under a unified
prefix.  When new endpoints or domains are added, include their
routers here.
"""

from fastapi import APIRouter

from .endpoints import cafes

router = APIRouter()

router.include_router(cafes.router, prefix="/cafes", tags=["cafes"])
