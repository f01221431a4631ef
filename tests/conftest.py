import asyncio
from datetime import datetime, timedelta
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.main import app
from app.core.database import Base, get_db
from app.core.whatsapp import GatewayResponse
from app.models import task, user  # noqa: F401
from app.schemas.reminder import PendingTask, TaskOwner
from app.utils.timezone import WIB

# Sweeps in tests run at a fixed WIB instant
NOW = datetime(2025, 6, 21, 10, 0, tzinfo=WIB)


class FakeStore:
    def __init__(self, tasks=None, error=None, mark_error=None):
        self.tasks = list(tasks or [])
        self.error = error
        self.mark_error = mark_error
        self.marked = []

    async def list_pending_tasks(self):
        if self.error:
            raise self.error
        return list(self.tasks)

    async def mark_reminded(self, task_id, category, at):
        if self.mark_error:
            raise self.mark_error
        self.marked.append((task_id, category, at))


class FakeGateway:
    def __init__(self, ok=True, error=None, errors_for=()):
        self.ok = ok
        self.error = error
        self.errors_for = set(errors_for)
        self.sent = []

    async def send_message(self, target, message):
        self.sent.append((target, message))
        if self.error and (not self.errors_for or target in self.errors_for):
            raise self.error
        return GatewayResponse(
            ok=self.ok,
            status_code=200 if self.ok else 400,
            body={"status": self.ok, "detail": "success! message in queue" if self.ok else "invalid target"},
        )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_task():
    counter = {"id": 0}

    def _make(hours_left=21.0, phone="08123456789", name="Budi", **overrides):
        counter["id"] += 1
        data = {
            "id": counter["id"],
            "user_id": 1,
            "title": f"Laporan praktikum {counter['id']}",
            "description": None,
            "deadline": NOW + timedelta(hours=hours_left),
            "owner": TaskOwner(id=1, name=name, phone_number=phone),
        }
        data.update(overrides)
        return PendingTask(**data)

    return _make


@pytest.fixture
def fake_store():
    return FakeStore


@pytest.fixture
def fake_gateway():
    return FakeGateway


@pytest.fixture
def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)

    async def create_all():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_all())
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, email="budi@example.com", phone="08123456789", name="Budi"):
    resp = client.post("/api/v1/users/register", json={
        "email": email,
        "password": "rahasia123",
        "name": name,
        "phone_number": phone,
    })
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    return register(client)


@pytest.fixture
def other_auth_headers(client):
    return register(client, email="siti@example.com", phone="08987654321", name="Siti")
