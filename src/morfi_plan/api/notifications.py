"""Notification configuration and digest sending endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, Request

from morfi_plan.api.models import ConfigPayload, EmailPayload
from morfi_plan.config import is_cron_request
from morfi_plan.domain.document import dump_config
from morfi_plan.domain.schedule import TriggerMode, parse_trigger

if TYPE_CHECKING:
    from morfi_plan.containers import AppContainer
    from morfi_plan.domain.models import AppConfig

router = APIRouter(prefix="/api", tags=["notifications"])


def _get_cron_secret(request: Request) -> str | None:
    container: AppContainer = request.app.state.container
    return container.settings.cron_secret


async def scheduler_authenticated(
    authorization: str | None = Header(default=None),
    cron_secret: str | None = Depends(_get_cron_secret),
) -> bool:
    """Return True when the request comes from the external scheduler."""
    return is_cron_request(authorization, cron_secret)


@router.get("/config")
async def get_config(request: Request) -> dict[str, object]:
    """Return the configuration with the send hour in UTC and local time."""
    container: AppContainer = request.app.state.container
    config = await container.config_service.load_config()
    return _format_config(container, config)


@router.put("/config")
async def save_config(payload: ConfigPayload, request: Request) -> dict[str, object]:
    """Validate and save the whole configuration."""
    container: AppContainer = request.app.state.container
    config = await container.config_service.save_config(
        payload.emails,
        payload.send_day,
        payload.send_hour,
        hour_is_local=payload.hour_is_local,
    )
    return _format_config(container, config)


@router.post("/config/emails")
async def add_email(payload: EmailPayload, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    config = await container.config_service.add_email(payload.email)
    return _format_config(container, config)


@router.delete("/config/emails/{email}")
async def remove_email(email: str, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    config = await container.config_service.remove_email(email)
    return _format_config(container, config)


@router.get("/email/status")
async def email_status(request: Request) -> dict[str, bool]:
    container: AppContainer = request.app.state.container
    return {"configured": container.email_service.is_configured()}


@router.post("/send-email")
async def send_email(
    request: Request, authenticated: bool = Depends(scheduler_authenticated)
) -> dict[str, object]:
    """Send the weekly digest now, or when the scheduler's slot matches."""
    container: AppContainer = request.app.state.container
    trigger = TriggerMode.SCHEDULED
    if authenticated:
        payload = await _read_json(request)
        trigger = parse_trigger(payload.get("trigger"))
    outcome = await container.digest_service.send(
        authenticated=authenticated, trigger=trigger
    )
    if not outcome.sent:
        return {"success": True, "skipped": True, "message": outcome.message}
    return {"success": True, "recipients": outcome.recipients}


async def _read_json(request: Request) -> dict[str, object]:
    """Return the JSON body, or an empty dict when absent or malformed."""
    try:
        payload = await request.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def _format_config(container: AppContainer, config: AppConfig) -> dict[str, object]:
    data = dump_config(config)
    data["localSendHour"] = container.config_service.local_send_hour(config)
    data["timezone"] = container.settings.timezone
    return data
