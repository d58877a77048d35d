import asyncio
import uuid
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from parking_backend.config.llm import LLMClient
from parking_backend.dependencies import get_context_store, get_geoapify, get_llm
from parking_backend.main import app
from parking_backend.schemas.parking import AddressSearchResult, Coordinates, ParkingSpot
from parking_backend.services.context_store import ContextStore

SJSU = Coordinates(latitude=37.3352, longitude=-121.8811)


def make_spot(
    spot_id,
    hourly=2.0,
    availability=50,
    score=4.0,
    access="public",
    distance=None,
    lat=37.3352,
    lon=-121.8811,
    **features,
):
    return ParkingSpot(
        id=str(spot_id),
        name=f"Lot {spot_id}",
        address=f"{spot_id} Main St, San Jose, CA",
        coordinates={"latitude": lat, "longitude": lon},
        capacity=100,
        available_spots=int(availability),
        availability=availability,
        pricing={"hourly": hourly, "daily": hourly * 8, "monthly": hourly * 160},
        features=features,
        access=access,
        fee=hourly > 0,
        safety_rating={"score": score},
        distance=distance,
    )


class FakeLLM(LLMClient):
    """Scripted language model: returns queued replies, raising any exception queued."""

    name = "fake"

    def __init__(self, *replies, delay=0.0, timeout=5.0):
        super().__init__(timeout=timeout)
        self.replies = list(replies)
        self.delay = delay
        self.calls = []

    async def _complete(self, system_prompt, user_prompt, temperature, max_tokens, json_mode):
        self.calls.append({"system": system_prompt, "prompt": user_prompt, "json_mode": json_mode})
        if self.delay:
            await asyncio.sleep(self.delay)
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeGeoapify:
    """Stands in for GeoapifyService and records every provider call."""

    def __init__(self, spots=None, center=SJSU, error=None):
        self.spots = list(spots or [])
        self.center = center
        self.error = error
        self.address_calls = []
        self.radius_calls = []
        self.bbox_calls = []

    async def search_by_address(self, address, limit=20):
        self.address_calls.append((address, limit))
        if self.error:
            raise self.error
        return AddressSearchResult(coordinates=self.center, results=self.spots)

    async def search_parking(self, lat, lon, radius=5000, limit=20):
        self.radius_calls.append((lat, lon, radius, limit))
        if self.error:
            raise self.error
        return list(self.spots)

    async def search_parking_by_bbox(self, bbox, limit=20):
        self.bbox_calls.append((list(bbox), limit))
        return list(self.spots)

    @property
    def call_count(self):
        return len(self.address_calls) + len(self.radius_calls) + len(self.bbox_calls)


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.limit_n = None

    def select(self, *args, **kwargs):
        return self

    def insert(self, row):
        self.op, self.payload = "insert", row
        return self

    def update(self, values):
        self.op, self.payload = "update", values
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        rows = self.db.tables.setdefault(self.table, [])
        if self.op == "insert":
            if self.table in self.db.fail_inserts:
                raise RuntimeError(f"insert into {self.table} failed")
            row = {"id": str(uuid.uuid4()), **self.payload}
            rows.append(row)
            return SimpleNamespace(data=[dict(row)])
        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return SimpleNamespace(data=updated)

        data = [dict(row) for row in rows if self._matches(row)]
        if self.order_by:
            column, desc = self.order_by
            data.sort(key=lambda r: r[column], reverse=desc)
        if self.limit_n is not None:
            data = data[: self.limit_n]
        return SimpleNamespace(data=data)


class FakeAuth:
    def __init__(self, users):
        self.users = users

    def get_user(self, token):
        if token not in self.users:
            raise RuntimeError("invalid JWT")
        return SimpleNamespace(user=self.users[token])


class FakeSupabase:
    def __init__(self, users=None):
        self.tables = {}
        self.fail_inserts = set()
        self.auth = FakeAuth(users or {})

    def table(self, name):
        return FakeQuery(self, name)

    from_ = table


@pytest.fixture
def store():
    return ContextStore()


@pytest.fixture
def geoapify():
    spots = [
        make_spot("a", hourly=2.0, score=3.6, lat=37.3360, covered=True),
        make_spot("b", hourly=4.0, score=4.8, lat=37.3400),
        make_spot("c", hourly=6.5, score=4.2, lat=37.3500, covered=True, ev_charging=True),
        make_spot("d", hourly=0.0, score=4.9, lat=37.3380, access="permissive"),
        make_spot("e", hourly=3.0, score=3.9, lat=37.3600),
        make_spot("f", hourly=5.0, score=4.5, lat=37.3700),
        make_spot("g", hourly=2.5, score=4.1, lat=37.3800, access="private"),
    ]
    return FakeGeoapify(spots)


@pytest.fixture
def llm_holder():
    return {"llm": None}


@pytest.fixture
def client(store, geoapify, llm_holder):
    app.dependency_overrides[get_context_store] = lambda: store
    app.dependency_overrides[get_geoapify] = lambda: geoapify
    app.dependency_overrides[get_llm] = lambda: llm_holder["llm"]
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def fake_supabase(monkeypatch):
    fake = FakeSupabase()
    monkeypatch.setattr("parking_backend.services.bookings.get_supabase_client", lambda: fake)
    monkeypatch.setattr("parking_backend.services.auth.get_supabase_client", lambda: fake)
    return fake
