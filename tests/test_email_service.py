"""Tests for weekly digest formatting and dispatch."""

import asyncio
from datetime import date

from morfi_plan.adapters.resend_client import EmailMessage
from morfi_plan.services.email import (
    EmailDispatchService,
    MenuRow,
    format_week_label,
    render_digest_html,
)


class _ExplodingClient:
    async def send(self, message: EmailMessage) -> str:
        raise RuntimeError("socket closed")


def test_is_configured_reflects_client(email_client) -> None:
    assert EmailDispatchService(client=email_client).is_configured() is True
    assert EmailDispatchService(client=None).is_configured() is False


def test_digest_is_sent_with_subject_and_numbered_list(email_client) -> None:
    service = EmailDispatchService(client=email_client)

    result = asyncio.run(
        service.send_weekly_digest(
            ["a@example.com", "b@example.com"],
            date(2024, 10, 14),
            ["arroz", "tomate"],
        )
    )

    assert result.success is True
    message = email_client.sent[0]
    assert message.to == ["a@example.com", "b@example.com"]
    assert message.subject == "🍽️ Menú Semanal - Semana del 14 de octubre"
    assert message.sender == "Morfi-Plan <noreply@morfi-plan.resend.dev>"
    assert "1. arroz" in message.html
    assert "2. tomate" in message.html
    assert "Planificación" not in message.html


def test_digest_without_valid_recipients_is_rejected_before_sending(
    email_client,
) -> None:
    service = EmailDispatchService(client=email_client)

    result = asyncio.run(
        service.send_weekly_digest(["", "not-an-email", "x@y"], date(2024, 1, 1), [])
    )

    assert result.success is False
    assert email_client.sent == []


def test_digest_drops_malformed_addresses(email_client) -> None:
    service = EmailDispatchService(client=email_client)

    asyncio.run(
        service.send_weekly_digest(
            [" ok@example.com ", "bad"], date(2024, 1, 1), ["pan"]
        )
    )

    assert email_client.sent[0].to == ["ok@example.com"]


def test_unconfigured_service_reports_failure() -> None:
    service = EmailDispatchService(client=None)

    result = asyncio.run(
        service.send_weekly_digest(["a@example.com"], date(2024, 1, 1), ["pan"])
    )

    assert result.success is False
    assert result.message == "Resend no configurado"


def test_provider_rejection_is_returned_as_failure(email_client) -> None:
    email_client.error_message = "Domain not verified"
    service = EmailDispatchService(client=email_client)

    result = asyncio.run(
        service.send_weekly_digest(["a@example.com"], date(2024, 1, 1), ["pan"])
    )

    assert result.success is False
    assert result.message == "Domain not verified"


def test_unexpected_fault_is_converted_to_failure() -> None:
    service = EmailDispatchService(client=_ExplodingClient())

    result = asyncio.run(
        service.send_weekly_digest(["a@example.com"], date(2024, 1, 1), ["pan"])
    )

    assert result.success is False
    assert result.message == "socket closed"


def test_render_includes_planning_table_and_escapes_text() -> None:
    html = render_digest_html(
        "1 de enero",
        ["sal & pimienta"],
        [MenuRow(day="Lunes", meal_type="Almuerzo", menu_name="<Guiso>")],
    )

    assert "Planificación" in html
    assert "&lt;Guiso&gt;" in html
    assert "sal &amp; pimienta" in html


def test_week_label_is_spanish() -> None:
    assert format_week_label(date(2024, 3, 4)) == "4 de marzo"
