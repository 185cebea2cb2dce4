"""Weekly digest email formatting and dispatch."""

import logging
from dataclasses import dataclass
from datetime import date
from html import escape

from morfi_plan.adapters.resend_client import (
    EmailClient,
    EmailMessage,
    EmailProviderError,
)
from morfi_plan.domain.emails import valid_recipients

DEFAULT_SENDER = "Morfi-Plan <noreply@morfi-plan.resend.dev>"

_MONTHS = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)
_CELL = "padding: 10px; border: 1px solid #e5e7eb;"

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchResult:
    """Result of a send attempt; ``message`` explains failures."""

    success: bool
    message: str | None = None


@dataclass(frozen=True)
class MenuRow:
    """One line of the weekly planning table."""

    day: str
    meal_type: str
    menu_name: str


@dataclass
class EmailDispatchService:
    """Formats the weekly digest and submits it to the provider."""

    client: EmailClient | None
    sender: str = DEFAULT_SENDER

    def is_configured(self) -> bool:
        """Return True when a provider credential was supplied."""
        return self.client is not None

    async def send_weekly_digest(
        self,
        recipients: list[str],
        week_start: date,
        shopping_list: list[str],
        menu_rows: list[MenuRow] | None = None,
    ) -> DispatchResult:
        """Send the digest; failures are returned, never raised."""
        if self.client is None:
            return DispatchResult(success=False, message="Resend no configurado")
        to = valid_recipients(recipients)
        if not to:
            return DispatchResult(
                success=False, message="No hay emails válidos configurados"
            )

        week_label = format_week_label(week_start)
        message = EmailMessage(
            sender=self.sender,
            to=to,
            subject=f"🍽️ Menú Semanal - Semana del {week_label}",
            html=render_digest_html(week_label, shopping_list, menu_rows),
        )
        try:
            await self.client.send(message)
        except EmailProviderError as exc:
            _logger.warning("Email provider rejected the digest: %s", exc.message)
            return DispatchResult(success=False, message=exc.message)
        except Exception as exc:
            _logger.exception("Email dispatch failed")
            return DispatchResult(success=False, message=str(exc))
        _logger.info("Weekly digest sent to %s recipient(s)", len(to))
        return DispatchResult(success=True)


def format_week_label(week_start: date) -> str:
    """Return a Spanish day-and-month label such as ``19 de octubre``."""
    return f"{week_start.day} de {_MONTHS[week_start.month - 1]}"


def render_digest_html(
    week_label: str, shopping_list: list[str], menu_rows: list[MenuRow] | None
) -> str:
    """Build the HTML body with an optional planning table."""
    planning = ""
    if menu_rows:
        rows = "".join(
            f'<tr><td style="{_CELL}">{escape(row.day)}</td>'
            f'<td style="{_CELL}">{escape(row.meal_type)}</td>'
            f'<td style="{_CELL} font-weight: bold;">{escape(row.menu_name)}</td></tr>'
            for row in menu_rows
        )
        planning = (
            '<h2 style="color: #374151; margin-top: 30px;">Planificación</h2>'
            '<table style="width: 100%; border-collapse: collapse; '
            'margin-bottom: 30px;"><thead><tr style="background-color: #f3f4f6;">'
            f'<th style="{_CELL} text-align: left;">Día</th>'
            f'<th style="{_CELL} text-align: left;">Comida</th>'
            f'<th style="{_CELL} text-align: left;">Menú</th>'
            f"</tr></thead><tbody>{rows}</tbody></table>"
        )
    items = "".join(
        f'<li style="padding: 5px 0;">{index}. {escape(item)}</li>'
        for index, item in enumerate(shopping_list, start=1)
    )
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; '
        'margin: 0 auto; padding: 20px;">'
        f'<h1 style="color: #16a34a; margin-bottom: 20px;">'
        f"🍽️ Menú Semanal - {escape(week_label)}</h1>"
        f"{planning}"
        '<h2 style="color: #374151;">🛒 Lista de Compras</h2>'
        f'<ul style="list-style: none; padding: 0;">{items}</ul>'
        '<p style="margin-top: 40px; padding-top: 20px; '
        'border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px;">'
        "Generado automáticamente por Morfi-Plan 🍳</p>"
        "</div>"
    )
