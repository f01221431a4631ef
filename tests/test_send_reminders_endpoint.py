import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.config import settings
from app.api.deps import get_reminder_context
from app.services.reminder_service import ReminderContext


@pytest.fixture
def reminder_client():
    def use(store, gateway, now):
        ctx = ReminderContext(store=store, gateway=gateway, clock=lambda: now)
        app.dependency_overrides[get_reminder_context] = lambda: ctx
        return TestClient(app)

    yield use
    app.dependency_overrides.clear()


def test_returns_report(reminder_client, make_task, fake_store, fake_gateway, now):
    tasks = [
        make_task(hours_left=21, remind_h1=True),
        make_task(hours_left=5, remind_h5h=True, phone="08100000000"),
        make_task(hours_left=40, remind_h1=True),
    ]
    gateway = fake_gateway(error=httpx.ReadTimeout("timed out"), errors_for=["08100000000"])
    client = reminder_client(fake_store(tasks), gateway, now)

    resp = client.get("/api/v1/send-reminders")

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["processed_at"] == "2025-06-21T10:00:00+07:00"
    assert body["timezone"] == "Asia/Jakarta (WIB)"
    assert body["total_processed"] == 2
    assert "error" not in body

    sent, errored = body["results"]
    assert sent == {
        "task_id": tasks[0].id,
        "user_name": "Budi",
        "phone": "08123456789",
        "reminder_type": "H-1",
        "deadline_wib": "22 Juni 2025 pukul 07.00",
        "status": "sent",
        "response": {"status": True, "detail": "success! message in queue"},
    }
    assert errored["status"] == "error"
    assert errored["reminder_type"] == "5-jam"
    assert errored["error"] == "timed out"
    assert "response" not in errored


def test_query_failure_is_a_500(reminder_client, fake_store, fake_gateway, now):
    client = reminder_client(fake_store(error=ConnectionError("could not reach database")), fake_gateway(), now)

    resp = client.get("/api/v1/send-reminders")

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "could not reach database"}


def test_nothing_due(reminder_client, fake_store, fake_gateway, now):
    client = reminder_client(fake_store([]), fake_gateway(), now)

    body = client.get("/api/v1/send-reminders").json()

    assert body["success"] is True
    assert body["results"] == []
    assert body["total_processed"] == 0


def test_cron_secret_guards_the_trigger(reminder_client, make_task, fake_store, fake_gateway, now, monkeypatch):
    monkeypatch.setattr(settings, "REMINDER_CRON_SECRET", "rahasia-cron")
    gateway = fake_gateway()
    client = reminder_client(fake_store([make_task(hours_left=21, remind_h1=True)]), gateway, now)

    assert client.get("/api/v1/send-reminders").status_code == 401
    assert client.get("/api/v1/send-reminders", headers={"X-Cron-Secret": "salah"}).status_code == 401
    assert gateway.sent == []

    resp = client.get("/api/v1/send-reminders", headers={"X-Cron-Secret": "rahasia-cron"})
    assert resp.status_code == 200
    assert resp.json()["total_processed"] == 1
