"""Weekly digest sending flow shared by the scheduler and the UI."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from morfi_plan.domain.emails import valid_recipients
from morfi_plan.domain.errors import DeliveryFailedError, ValidationFailedError
from morfi_plan.domain.models import (
    MEAL_TYPES,
    UNKNOWN_MENU_NAME,
    WEEK_DAYS,
    AppData,
)
from morfi_plan.domain.planning import current_week_start, derive_shopping_list
from morfi_plan.domain.schedule import TriggerMode, evaluate_send
from morfi_plan.services.app_config import ConfigService
from morfi_plan.services.email import EmailDispatchService, MenuRow
from morfi_plan.services.store import DocumentStore

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendOutcome:
    """What happened to a send request that did not fail."""

    sent: bool
    recipients: int = 0
    message: str | None = None


@dataclass
class DigestService:
    """Gate, validate, build and dispatch the weekly digest."""

    store: DocumentStore
    config_service: ConfigService
    email_service: EmailDispatchService
    timezone: ZoneInfo

    async def send(
        self,
        *,
        authenticated: bool,
        trigger: TriggerMode = TriggerMode.SCHEDULED,
        now: datetime | None = None,
    ) -> SendOutcome:
        """Send the digest for the current week.

        Raises ``ValidationFailedError`` when there is nothing to send or
        nobody to send it to, and ``DeliveryFailedError`` when the provider
        rejects the message.
        """
        current = now or datetime.now(tz=UTC)
        document = await self.store.get_document()
        document = await self.config_service.ensure_migrated(document)
        config = document.config

        decision = evaluate_send(
            current, config, authenticated=authenticated, trigger=trigger
        )
        if authenticated:
            _logger.info(
                "Scheduled check: trigger=%s now=%s send_day=%s send_hour=%s",
                trigger.value,
                current.astimezone(UTC).isoformat(),
                config.send_day.value,
                config.send_hour,
            )
        if not decision.proceed:
            return SendOutcome(sent=False, message=decision.message)

        assignments = document.current_week_assignments()
        if not assignments:
            raise ValidationFailedError("No hay asignaciones para enviar")
        recipients = valid_recipients(config.emails)
        if not recipients:
            raise ValidationFailedError("No hay emails configurados")

        week_start = current_week_start(current.astimezone(self.timezone))
        result = await self.email_service.send_weekly_digest(
            recipients,
            week_start.date(),
            derive_shopping_list(document.menus, assignments),
            menu_rows=build_menu_rows(document),
        )
        if not result.success:
            raise DeliveryFailedError(result.message or "Error al enviar el email")
        return SendOutcome(sent=True, recipients=len(recipients))


def build_menu_rows(document: AppData) -> list[MenuRow]:
    """Return planning rows for the current week in board order."""
    rows = []
    assignments = document.current_week_assignments()
    for day in WEEK_DAYS:
        for meal_type in MEAL_TYPES:
            for assignment in assignments:
                if assignment.day != day or assignment.meal_type != meal_type:
                    continue
                menu = document.find_menu(assignment.menu_id)
                rows.append(
                    MenuRow(
                        day=day.full_label,
                        meal_type=meal_type.label,
                        menu_name=menu.name if menu else UNKNOWN_MENU_NAME,
                    )
                )
    return rows
