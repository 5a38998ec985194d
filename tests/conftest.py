from __future__ import annotations

import asyncio
import base64
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from cafe_directory_api.app.core.config import settings
from cafe_directory_api.app.core.db import init_db
from cafe_directory_api.app.main import app
from cafe_directory_api.app.schemas.cafe import CafeCreate
from cafe_directory_api.app.services.cafe_admin_service import CafeAdminService


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def cafe_payload(name: str = "Bean Brothers", images: Optional[List[bytes]] = None, **overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "kakao_place_id": None,
        "cafe_name": name,
        "latitude": 37.5665,
        "longitude": 126.9780,
        "address": "Seoul, Jung-gu, Sejong-daero 110",
        "phone_number": "02-123-4567",
        "website_url": "https://place.map.kakao.com/1",
        "average_rating": 4.5,
        "opening_hours": "Mon-Sun 09:00-22:00",
        "wifi": None,
        "outlets": None,
        "desk": None,
        "restroom": None,
        "parking": None,
        "images": [b64(image) for image in images or []],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Point the application at a fresh SQLite file with migrations applied."""
    path = tmp_path / "tagcafe-test.db"
    monkeypatch.setattr(settings, "database_url", str(path))
    init_db()
    return path


@pytest.fixture
def client(db_path) -> TestClient:
    return TestClient(app)


@pytest.fixture
def add_cafe(db_path):
    """Store a cafe through the admin service and return it."""

    def _add(name: str = "Bean Brothers", images: Optional[List[bytes]] = None, **overrides: Any):
        return asyncio.run(CafeAdminService.add_cafe(CafeCreate(**cafe_payload(name, images, **overrides))))

    return _add
