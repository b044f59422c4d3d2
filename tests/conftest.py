"""Shared test fixtures.

Provides an in-memory MongoDB (mongomock) swapped in for the real handle,
a FastAPI TestClient with and without an admin session, and a hub that
records broadcasts instead of sending them.
"""

from typing import Any, List, Tuple

import mongomock
import pytest
from fastapi.testclient import TestClient

import database
import main
import settings
from database import create_document


class RecordingHub:
    def __init__(self) -> None:
        self.events: List[Tuple[str, Any]] = []

    async def broadcast(self, event: str, data: Any) -> int:
        self.events.append((event, data))
        return 1


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def db(monkeypatch: pytest.MonkeyPatch):
    mock_db = mongomock.MongoClient()["farm_test"]
    monkeypatch.setattr(database, "db", mock_db)
    return mock_db


@pytest.fixture(autouse=True)
def reset_rate_limits():
    main.checkout_limiter.reset()
    main.login_limiter.reset()
    yield
    main.checkout_limiter.reset()
    main.login_limiter.reset()


@pytest.fixture
def client(db, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(settings, "SEED_ON_STARTUP", False)
    with TestClient(main.app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(client: TestClient) -> TestClient:
    res = client.post("/api/admin/login", json={"password": settings.ADMIN_PASSWORD})
    assert res.status_code == 200
    return client


@pytest.fixture
def recording_hub() -> RecordingHub:
    return RecordingHub()


def add_product(database_handle, product_id: int, title: str, price: str, price_value=None) -> dict:
    """Insert a catalog row directly, bypassing price_value derivation."""
    return create_document(
        database_handle,
        "product",
        {
            "_id": product_id,
            "title": title,
            "price": price,
            "price_value": price_value,
            "image": "",
            "description": "",
        },
    )
