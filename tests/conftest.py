from __future__ import annotations

import copy
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

from retail_api.config import Settings
from retail_api.inventory import InventoryStore
from retail_api.service import create_app
from retail_api.storage import InMemoryStorage, JsonFileStorage

CATALOG: List[Dict[str, Any]] = [
    {
        "id": 1,
        "name": "Desk Lamp",
        "price": 19.5,
        "stock": 10,
        "rating": 0,
        "reviews": [],
        "category": "Home",
    },
    {
        "id": 2,
        "name": "Notebook",
        "price": 3.25,
        "stock": 2,
        "rating": 4,
        "reviews": [
            {"id": 1, "user": "Ana", "rating": 4, "comment": "Nice paper", "date": "2025-05-01"},
        ],
    },
    {
        "id": 7,
        "name": "Backpack",
        "price": 49.0,
        "stock": 0,
        "rating": 3,
        "reviews": [
            {"id": 1, "user": "Ben", "rating": 2, "comment": "Zipper broke", "date": "2025-04-02"},
            {"id": 2, "user": "Cy", "rating": 4, "comment": "Roomy", "date": "2025-04-09"},
        ],
    },
]

FIXED_NOW = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def catalog() -> List[Dict[str, Any]]:
    return copy.deepcopy(CATALOG)


@pytest.fixture
def data_file(tmp_path: Path, catalog) -> Path:
    path = tmp_path / "data" / "products.json"
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps(catalog, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def memory_store(catalog) -> InventoryStore:
    return InventoryStore(InMemoryStorage(catalog), clock=lambda: FIXED_NOW)


@pytest.fixture
def settings(tmp_path: Path, data_file: Path) -> Settings:
    images = tmp_path / "data" / "images"
    images.mkdir(parents=True)
    (images / "lamp.jpg").write_bytes(b"\xff\xd8\xff\xe0fake-jpeg")
    return Settings(data_file=data_file, images_dir=images)


@pytest.fixture
def client(settings: Settings) -> TestClient:
    app = create_app(settings, JsonFileStorage(settings.data_file))
    return TestClient(app)
