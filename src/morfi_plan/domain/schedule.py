"""Scheduling rules for the automated weekly digest."""

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from enum import StrEnum
from zoneinfo import ZoneInfo

from morfi_plan.domain.models import AppConfig, SendDay

LEGACY_UTC_OFFSET_HOURS = 3
LEGACY_HOUR_THRESHOLD = 12
HOURS_PER_DAY = 24


class TriggerMode(StrEnum):
    """How an authenticated scheduler asked for the send."""

    SCHEDULED = "scheduled"
    MANUAL = "manual"


@dataclass(frozen=True)
class SendDecision:
    """Outcome of the scheduling gate."""

    proceed: bool
    message: str | None = None


def parse_trigger(raw: object) -> TriggerMode:
    """Parse a trigger value, defaulting to a scheduled check."""
    if isinstance(raw, str) and raw == TriggerMode.MANUAL.value:
        return TriggerMode.MANUAL
    return TriggerMode.SCHEDULED


def evaluate_send(
    now: datetime,
    config: AppConfig,
    *,
    authenticated: bool,
    trigger: TriggerMode = TriggerMode.SCHEDULED,
) -> SendDecision:
    """Decide whether a send should go out at ``now``.

    Only authenticated scheduled triggers are gated on the configured UTC day
    and hour. Manual scheduler calls and UI requests always proceed.
    """
    if not authenticated or trigger is TriggerMode.MANUAL:
        return SendDecision(proceed=True)

    now_utc = now.astimezone(UTC)
    current_day = now_utc.weekday()
    current_hour = now_utc.hour
    if current_day == config.send_day.weekday and current_hour == config.send_hour:
        return SendDecision(proceed=True)
    current_name = list(SendDay)[current_day].value
    return SendDecision(
        proceed=False,
        message=(
            f"Not time yet. Current: {current_name}:{current_hour}, "
            f"Config: {config.send_day.value}:{config.send_hour}"
        ),
    )


def migrate_legacy_send_hour(config: AppConfig) -> tuple[AppConfig, bool]:
    """Convert a pre-UTC send hour (stored at UTC-3) to UTC.

    Returns the resulting config and whether anything changed. Once the
    migration flag is set the config is returned untouched.
    """
    if config.utc_migrated:
        return config, False
    if config.send_hour >= LEGACY_HOUR_THRESHOLD:
        return config, False
    migrated_hour = (config.send_hour + LEGACY_UTC_OFFSET_HOURS) % HOURS_PER_DAY
    return replace(config, send_hour=migrated_hour, utc_migrated=True), True


def utc_hour_to_local(hour: int, tz: ZoneInfo, reference: datetime) -> int:
    """Convert a UTC hour to the local hour in ``tz`` on the reference date."""
    moment = reference.astimezone(UTC).replace(
        hour=hour, minute=0, second=0, microsecond=0
    )
    return moment.astimezone(tz).hour


def local_hour_to_utc(hour: int, tz: ZoneInfo, reference: datetime) -> int:
    """Convert a local hour in ``tz`` to UTC on the reference date."""
    moment = reference.astimezone(tz).replace(
        hour=hour, minute=0, second=0, microsecond=0
    )
    return moment.astimezone(UTC).hour
