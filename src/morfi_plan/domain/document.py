"""Conversion between the application document and its JSON form."""

import logging
from datetime import UTC, datetime

from morfi_plan.domain.models import (
    DEFAULT_SEND_HOUR_UTC,
    AppConfig,
    AppData,
    Assignment,
    DayOfWeek,
    MealType,
    Menu,
    SendDay,
)

_logger = logging.getLogger(__name__)


def parse_app_data(payload: dict[str, object]) -> AppData:
    """Parse a stored JSON document into an ``AppData``."""
    menus = [_parse_menu(row) for row in _rows(payload.get("menus"))]
    assignments: list[Assignment] = []
    for row in _rows(payload.get("assignments")):
        try:
            assignments.append(_parse_assignment(row))
        except (TypeError, ValueError):
            _logger.warning("Skipping unreadable assignment: %s", row.get("id"))
    raw_config = payload.get("config")
    config = (
        parse_config(raw_config)
        if isinstance(raw_config, dict)
        else AppData().config
    )
    return AppData(menus=menus, assignments=assignments, config=config)


def dump_app_data(data: AppData) -> dict[str, object]:
    """Serialize an ``AppData`` into the stored JSON shape."""
    return {
        "menus": [dump_menu(menu) for menu in data.menus],
        "assignments": [dump_assignment(item) for item in data.assignments],
        "config": dump_config(data.config),
    }


def dump_menu(menu: Menu) -> dict[str, object]:
    return {
        "id": menu.id,
        "name": menu.name,
        "ingredients": list(menu.ingredients),
        "image": menu.image,
        "createdAt": format_timestamp(menu.created_at),
        "updatedAt": format_timestamp(menu.updated_at),
    }


def dump_assignment(assignment: Assignment) -> dict[str, object]:
    return {
        "id": assignment.id,
        "menuId": assignment.menu_id,
        "day": assignment.day.value,
        "mealType": assignment.meal_type.value,
        "weekOffset": assignment.week_offset,
        "createdAt": format_timestamp(assignment.created_at),
    }


def dump_config(config: AppConfig) -> dict[str, object]:
    return {
        "emails": list(config.emails),
        "sendDay": config.send_day.value,
        "sendHour": config.send_hour,
        "_utcMigrated": config.utc_migrated,
    }


def parse_config(row: dict[str, object]) -> AppConfig:
    """Parse the config object, accepting the legacy single ``email`` field."""
    raw_emails = row.get("emails")
    if isinstance(raw_emails, list):
        emails = [str(email) for email in raw_emails]
    elif isinstance(row.get("email"), str):
        emails = [str(row["email"])]
    else:
        emails = [""]
    try:
        send_day = SendDay(str(row.get("sendDay") or SendDay.SUNDAY.value))
    except ValueError:
        send_day = SendDay.SUNDAY
    raw_hour = row.get("sendHour")
    send_hour = (
        int(raw_hour) if isinstance(raw_hour, int | float) else DEFAULT_SEND_HOUR_UTC
    )
    return AppConfig(
        emails=emails,
        send_day=send_day,
        send_hour=send_hour,
        utc_migrated=bool(row.get("_utcMigrated", False)),
    )


def format_timestamp(value: datetime | None) -> str | None:
    """Format a timestamp the way browsers emit ``toISOString()``."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return (
        value.astimezone(UTC)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def _parse_timestamp(raw: object) -> datetime | None:
    if not isinstance(raw, str) or not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    # Offset-less values are stored in UTC.
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def _parse_menu(row: dict[str, object]) -> Menu:
    ingredients = row.get("ingredients")
    return Menu(
        id=str(row.get("id") or ""),
        name=str(row.get("name") or ""),
        ingredients=[str(item) for item in ingredients]
        if isinstance(ingredients, list)
        else [],
        image=row.get("image") or None,
        created_at=_parse_timestamp(row.get("createdAt")),
        updated_at=_parse_timestamp(row.get("updatedAt")),
    )


def _parse_assignment(row: dict[str, object]) -> Assignment:
    return Assignment(
        id=str(row.get("id") or ""),
        menu_id=str(row.get("menuId") or ""),
        day=DayOfWeek(str(row.get("day"))),
        meal_type=MealType(str(row.get("mealType"))),
        week_offset=int(row.get("weekOffset") or 0),
        created_at=_parse_timestamp(row.get("createdAt")),
    )


def _rows(raw: object) -> list[dict[str, object]]:
    if not isinstance(raw, list):
        return []
    return [row for row in raw if isinstance(row, dict)]
