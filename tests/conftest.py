from datetime import datetime
from typing import Optional, Tuple

import mongomock
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from rajaoil_admin.auth import require_admin_auth
from rajaoil_admin.dependencies import get_db, get_media_storage
from rajaoil_admin.errors import MediaNotFoundError
from rajaoil_admin.main import app
from rajaoil_admin.storage import MediaStorage

MEDIA_BASE_URL = "http://testserver/api/media"


class InMemoryMediaStorage(MediaStorage):
    """Storage fake. File names listed in `failing_uploads` / paths in `failing_deletes` raise."""

    def __init__(self):
        super().__init__(MEDIA_BASE_URL, "rajaoil")
        self.files = {}
        self.failing_uploads = set()
        self.failing_deletes = set()

    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        if any(path.endswith("_" + name) for name in self.failing_uploads):
            raise ConnectionError("storage unavailable")
        self.files[path] = (data, content_type)
        return self.url_for(path)

    def delete(self, path: str) -> None:
        if path in self.failing_deletes:
            raise ConnectionError("storage unavailable")
        if path not in self.files:
            raise MediaNotFoundError(path)
        del self.files[path]

    def open(self, path: str) -> Tuple[bytes, Optional[str]]:
        if path not in self.files:
            raise MediaNotFoundError(path)
        return self.files[path]


@pytest.fixture
def db():
    return mongomock.MongoClient()["rajaoil_test"]


@pytest.fixture
def storage():
    return InMemoryMediaStorage()


@pytest.fixture
def client(db, storage):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_media_storage] = lambda: storage
    app.dependency_overrides[require_admin_auth] = lambda: True
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(db, storage):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_media_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_order(**overrides) -> dict:
    doc = {
        "_id": ObjectId(),
        "orderId": "ORD-10001",
        "items": [
            {
                "id": "item-1",
                "productId": "Raja Groundnut Oil",
                "brand": "Raja",
                "name": "Raja Groundnut Oil 1L",
                "price": 210,
                "image": "http://testserver/api/media/rajaoil/1_a_groundnut.jpg",
                "quantity": 2,
            }
        ],
        "total": 420,
        "customerName": "Karthik Raman",
        "customerPhone": "9876543210",
        "deliveryAddress": {
            "doorNo": "12/4",
            "address": "Gandhi Street",
            "district": "Madurai",
            "state": "Tamil Nadu",
            "pincode": "625001",
        },
        "notes": "",
        "status": "pending",
        "paymentStatus": "pending",
        "createdAt": datetime(2024, 5, 1, 10, 0, 0),
        "updatedAt": datetime(2024, 5, 1, 10, 0, 0),
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def insert_order(db):
    def _insert(**overrides) -> str:
        doc = make_order(**overrides)
        db["orders"].insert_one(doc)
        return str(doc["_id"])
    return _insert
