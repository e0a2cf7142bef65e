"""
Pytest configuration and shared test helpers for backend tests.
"""
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

backend_root = Path(__file__).resolve().parent.parent
if str(backend_root) not in sys.path:
    sys.path.insert(0, str(backend_root))

import pytest

# Shared TestClient fixture so tests can use in-process requests without a running server.
from fastapi.testclient import TestClient
from server import app
from routes.search import get_invitation_collection

STORED_INVITATION = {
    "name": "A",
    "email": "a@x.com",
    "phoneNumber": "0912345678",
    "letterURL": "http://x/y",
}


def cursor_of(docs):
    """Motor cursor stand-in: find(...).limit(n).to_list(length=n) yields docs."""
    cursor = MagicMock()
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=[dict(d) for d in docs])
    return cursor


@pytest.fixture
def collection():
    """Motor collection stand-in holding STORED_INVITATION only."""
    coll = MagicMock()

    def find(query, projection=None):
        if query.get("phoneNumber") == STORED_INVITATION["phoneNumber"]:
            return cursor_of([STORED_INVITATION])
        return cursor_of([])

    coll.find = MagicMock(side_effect=find)
    return coll


@pytest.fixture
def client(collection):
    """TestClient for server:app with the record store swapped for the collection fixture."""
    app.dependency_overrides[get_invitation_collection] = lambda: collection
    yield TestClient(app)
    app.dependency_overrides.clear()
