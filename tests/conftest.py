"""Pytest fixtures for plantshop tests."""

import json
import threading

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from plantshop.core.resource_client import ResourceClient, get_resource_client
from plantshop.database import get_session
from plantshop.models import handoff as _handoff_models  # noqa: F401


class FakeStore:
    """
    In-memory json-server lookalike, served through httpx.MockTransport.

    - collections: plants, carrello, ordini
    - failing: set of (method, path) answered with HTTP 500
    - down: every request raises a connection error
    """

    def __init__(self):
        self.collections: dict[str, dict[str, dict]] = {
            "plants": {},
            "carrello": {},
            "ordini": {},
        }
        self.failing: set[tuple[str, str]] = set()
        self.down = False
        self.requests: list[tuple[str, str]] = []
        self._next_id = 100
        self._lock = threading.Lock()

    def seed(self, collection: str, row: dict) -> dict:
        self.collections[collection][str(row["id"])] = dict(row)
        return row

    def seed_cart(self, line_id: str, product_id: str, quantity: int, price: float = 0.0) -> dict:
        return self.seed(
            "carrello",
            {
                "id": line_id,
                "prodottoId": product_id,
                "nome": "",
                "prezzo": price,
                "quantita": quantity,
            },
        )

    def rows(self, collection: str) -> list[dict]:
        return list(self.collections[collection].values())

    def handler(self, request: httpx.Request) -> httpx.Response:
        with self._lock:
            return self._handle(request)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path
        self.requests.append((method, path))

        if self.down:
            raise httpx.ConnectError("store is down", request=request)
        if (method, path) in self.failing:
            return httpx.Response(500, json={"error": "boom"})

        parts = path.strip("/").split("/")
        collection = parts[0]
        item_id = parts[1] if len(parts) > 1 else None
        if collection not in self.collections:
            return httpx.Response(404, json={})
        rows = self.collections[collection]

        if method == "GET":
            if item_id is None:
                return httpx.Response(200, json=list(rows.values()))
            if item_id not in rows:
                return httpx.Response(404, json={})
            return httpx.Response(200, json=rows[item_id])

        body = json.loads(request.content) if request.content else {}

        if method == "POST":
            self._next_id += 1
            row = {"id": str(self._next_id), **body}
            rows[row["id"]] = row
            return httpx.Response(201, json=row)

        if item_id not in rows:
            return httpx.Response(404, json={})

        if method == "PATCH":
            rows[item_id].update(body)
            return httpx.Response(200, json=rows[item_id])

        if method == "DELETE":
            rows.pop(item_id)
            return httpx.Response(200, json={})

        return httpx.Response(405, json={})


@pytest.fixture
def store():
    """Fake store seeded with two plants."""
    fake = FakeStore()
    fake.seed(
        "plants",
        {
            "id": "1",
            "name": "Monstera",
            "price": 10.0,
            "image": "img/monstera.jpg",
            "description": "Swiss cheese plant",
        },
    )
    fake.seed(
        "plants",
        {
            "id": "2",
            "name": "Ficus",
            "price": 5.5,
            "image": "img/ficus.jpg",
            "description": "Weeping fig",
        },
    )
    return fake


@pytest.fixture
def client(store):
    resource_client = ResourceClient(
        "http://store.test",
        transport=httpx.MockTransport(store.handler),
    )
    yield resource_client
    resource_client.close()


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def api(client, engine):
    """TestClient wired to the fake store and the in-memory handoff DB."""
    from plantshop.main import app

    def _session_override():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_resource_client] = lambda: client
    app.dependency_overrides[get_session] = _session_override
    yield TestClient(app)
    app.dependency_overrides.clear()

