"""Notification configuration service."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from morfi_plan.domain.emails import is_valid_email
from morfi_plan.domain.errors import ValidationFailedError
from morfi_plan.domain.models import AppConfig, AppData, SendDay
from morfi_plan.domain.schedule import (
    HOURS_PER_DAY,
    local_hour_to_utc,
    migrate_legacy_send_hour,
    utc_hour_to_local,
)
from morfi_plan.services.store import DocumentStore

_logger = logging.getLogger(__name__)


@dataclass
class ConfigService:
    """Loads, validates and saves the notification configuration."""

    store: DocumentStore
    timezone: ZoneInfo

    async def load_config(self) -> AppConfig:
        """Return the config, migrating a legacy local send hour once."""
        document = await self.ensure_migrated(await self.store.get_document())
        return document.config

    async def ensure_migrated(self, document: AppData) -> AppData:
        """Apply the legacy send-hour migration to a document and persist it."""
        migrated, changed = migrate_legacy_send_hour(document.config)
        if changed:
            _logger.info(
                "Migrated legacy send hour %s to %s UTC",
                document.config.send_hour,
                migrated.send_hour,
            )
            document.config = migrated
            await self.store.replace_document(document)
        return document

    async def save_config(
        self,
        emails: list[str],
        send_day: SendDay,
        send_hour: int,
        *,
        hour_is_local: bool = False,
        now: datetime | None = None,
    ) -> AppConfig:
        """Validate and persist a full configuration."""
        cleaned = [email.strip() for email in emails if email.strip()]
        if not cleaned:
            raise ValidationFailedError("Debes configurar al menos un email")
        invalid = [email for email in cleaned if not is_valid_email(email)]
        if invalid:
            raise ValidationFailedError(f"Emails inválidos: {', '.join(invalid)}")
        duplicates = sorted({email for email in cleaned if cleaned.count(email) > 1})
        if duplicates:
            raise ValidationFailedError(
                f"Emails duplicados: {', '.join(duplicates)}"
            )
        if not 0 <= send_hour < HOURS_PER_DAY:
            raise ValidationFailedError("La hora de envío debe estar entre 0 y 23")
        utc_hour = (
            local_hour_to_utc(send_hour, self.timezone, now or datetime.now(tz=UTC))
            if hour_is_local
            else send_hour
        )
        config = AppConfig(
            emails=cleaned,
            send_day=send_day,
            send_hour=utc_hour,
            utc_migrated=True,
        )
        return await self.store.update_config(config)

    async def add_email(self, email: str) -> AppConfig:
        """Append a recipient after checking format and uniqueness."""
        candidate = email.strip()
        if not candidate:
            raise ValidationFailedError("Ingresa un email")
        if not is_valid_email(candidate):
            raise ValidationFailedError("El formato del email no es válido")
        config = await self.load_config()
        current = [item.strip() for item in config.emails if item.strip()]
        if candidate in current:
            raise ValidationFailedError("Este email ya está en la lista")
        return await self.store.update_config(
            replace(config, emails=[*current, candidate])
        )

    async def remove_email(self, email: str) -> AppConfig:
        """Remove a recipient, keeping an empty placeholder when none remain."""
        config = await self.load_config()
        remaining = [item for item in config.emails if item.strip() != email.strip()]
        return await self.store.update_config(
            replace(config, emails=remaining or [""])
        )

    def local_send_hour(self, config: AppConfig, now: datetime | None = None) -> int:
        """Return the stored UTC send hour expressed in the local time zone."""
        return utc_hour_to_local(
            config.send_hour, self.timezone, now or datetime.now(tz=UTC)
        )
