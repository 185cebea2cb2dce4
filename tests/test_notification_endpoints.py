"""Tests for configuration and digest sending endpoints."""

import asyncio
from datetime import UTC, datetime

from fastapi.testclient import TestClient

from morfi_plan.api.app import create_app
from morfi_plan.domain.models import (
    AppConfig,
    AppData,
    Assignment,
    DayOfWeek,
    MealType,
    Menu,
    SendDay,
)

CRON_HEADERS = {"Authorization": "Bearer cron-secret"}


def _seed(container, emails: list[str], with_assignment: bool = True) -> AppConfig:
    # Pick a slot that cannot match the current UTC day and hour.
    now = datetime.now(tz=UTC)
    config = AppConfig(
        emails=emails,
        send_day=list(SendDay)[(now.weekday() + 3) % 7],
        send_hour=(now.hour + 12) % 24,
        utc_migrated=True,
    )
    menu = Menu(
        id="m1",
        name="Guiso",
        ingredients=["papa", "carne"],
        image=None,
        created_at=None,
        updated_at=None,
    )
    assignments = []
    if with_assignment:
        assignments.append(
            Assignment(
                id="a1",
                menu_id="m1",
                day=DayOfWeek.MONDAY,
                meal_type=MealType.LUNCH,
                week_offset=0,
                created_at=None,
            )
        )
    document = AppData(menus=[menu], assignments=assignments, config=config)
    asyncio.run(container.store.replace_document(document))
    return config


def test_get_config_reports_utc_and_local_hour(container) -> None:
    client = TestClient(create_app(container))

    data = client.get("/api/config").json()

    assert data["sendDay"] == "sunday"
    assert data["sendHour"] == 12
    assert data["localSendHour"] == 9
    assert data["timezone"] == "America/Argentina/Buenos_Aires"
    assert data["_utcMigrated"] is True


def test_put_config_converts_local_hour(container) -> None:
    client = TestClient(create_app(container))

    response = client.put(
        "/api/config",
        json={
            "emails": ["a@example.com"],
            "sendDay": "saturday",
            "sendHour": 21,
            "hourIsLocal": True,
        },
    )

    assert response.status_code == 200
    assert response.json()["sendHour"] == 0
    assert response.json()["localSendHour"] == 21


def test_put_config_with_invalid_email_is_rejected(container) -> None:
    client = TestClient(create_app(container))

    response = client.put(
        "/api/config",
        json={"emails": ["roto"], "sendDay": "sunday", "sendHour": 12},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Emails inválidos: roto"}


def test_add_and_remove_email(container) -> None:
    client = TestClient(create_app(container))

    added = client.post("/api/config/emails", json={"email": "a@example.com"})
    duplicate = client.post("/api/config/emails", json={"email": "a@example.com"})
    removed = client.delete("/api/config/emails/a@example.com")

    assert added.json()["emails"] == ["a@example.com"]
    assert duplicate.status_code == 400
    assert removed.json()["emails"] == [""]


def test_email_status(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/api/email/status").json() == {"configured": True}


def test_ui_send_ignores_schedule(container, email_client) -> None:
    _seed(container, ["a@example.com", "invalido"])
    client = TestClient(create_app(container))

    response = client.post("/api/send-email")

    assert response.status_code == 200
    assert response.json() == {"success": True, "recipients": 1}
    message = email_client.sent[0]
    assert message.to == ["a@example.com"]
    assert "Guiso" in message.html
    assert "1. carne" in message.html


def test_scheduled_send_outside_slot_is_skipped(container, email_client) -> None:
    _seed(container, ["a@example.com"])
    client = TestClient(create_app(container))

    response = client.post("/api/send-email", headers=CRON_HEADERS, json={})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["skipped"] is True
    assert data["message"].startswith("Not time yet")
    assert email_client.sent == []


def test_manual_trigger_from_scheduler_sends(container, email_client) -> None:
    _seed(container, ["a@example.com"])
    client = TestClient(create_app(container))

    response = client.post(
        "/api/send-email", headers=CRON_HEADERS, json={"trigger": "manual"}
    )

    assert response.json() == {"success": True, "recipients": 1}
    assert len(email_client.sent) == 1


def test_wrong_secret_is_treated_as_ui_request(container, email_client) -> None:
    _seed(container, ["a@example.com"])
    client = TestClient(create_app(container))

    response = client.post(
        "/api/send-email", headers={"Authorization": "Bearer nope"}
    )

    assert response.json() == {"success": True, "recipients": 1}


def test_send_without_assignments_returns_400(container, email_client) -> None:
    _seed(container, ["a@example.com"], with_assignment=False)
    client = TestClient(create_app(container))

    response = client.post("/api/send-email")

    assert response.status_code == 400
    assert response.json() == {"error": "No hay asignaciones para enviar"}
    assert email_client.sent == []


def test_send_without_valid_emails_returns_400(container, email_client) -> None:
    _seed(container, ["", "sin-arroba"])
    client = TestClient(create_app(container))

    response = client.post("/api/send-email")

    assert response.status_code == 400
    assert response.json() == {"error": "No hay emails configurados"}
    assert email_client.sent == []


def test_provider_failure_returns_500_with_reason(container, email_client) -> None:
    _seed(container, ["a@example.com"])
    email_client.error_message = "Domain not verified"
    client = TestClient(create_app(container))

    response = client.post("/api/send-email")

    assert response.status_code == 500
    assert response.json() == {"error": "Domain not verified"}
