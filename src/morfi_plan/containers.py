"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo

from morfi_plan.adapters.jsonbin_client import HttpxJsonBinClient
from morfi_plan.adapters.resend_client import ResendEmailClient
from morfi_plan.config import Settings
from morfi_plan.services.app_config import ConfigService
from morfi_plan.services.cache import InMemoryLocalCache, JsonFileLocalCache, LocalCache
from morfi_plan.services.digest import DigestService
from morfi_plan.services.email import EmailDispatchService
from morfi_plan.services.planner import PlannerService
from morfi_plan.services.store import DocumentStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    timezone: ZoneInfo
    store: DocumentStore
    email_service: EmailDispatchService
    planner_service: PlannerService
    config_service: ConfigService
    digest_service: DigestService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timezone = ZoneInfo(resolved_settings.timezone)
    cache: LocalCache = (
        JsonFileLocalCache(Path(resolved_settings.local_cache_path))
        if resolved_settings.local_cache_path
        else InMemoryLocalCache()
    )
    jsonbin_client = (
        HttpxJsonBinClient.create(
            api_key=resolved_settings.jsonbin_api_key,
            base_url=resolved_settings.jsonbin_base_url,
        )
        if resolved_settings.jsonbin_api_key
        else None
    )
    store = DocumentStore(
        cache=cache,
        client=jsonbin_client,
        bin_id=resolved_settings.jsonbin_bin_id,
        collection_id=resolved_settings.jsonbin_collection_id,
        bin_name=resolved_settings.jsonbin_bin_name,
    )
    email_client = (
        ResendEmailClient.create(resolved_settings.resend_api_key)
        if resolved_settings.resend_api_key
        else None
    )
    email_service = EmailDispatchService(
        client=email_client, sender=resolved_settings.email_sender
    )
    config_service = ConfigService(store=store, timezone=timezone)
    digest_service = DigestService(
        store=store,
        config_service=config_service,
        email_service=email_service,
        timezone=timezone,
    )

    async def close_resources() -> None:
        if jsonbin_client is not None:
            await jsonbin_client.close()

    return AppContainer(
        settings=resolved_settings,
        timezone=timezone,
        store=store,
        email_service=email_service,
        planner_service=PlannerService(store),
        config_service=config_service,
        digest_service=digest_service,
        close_resources=close_resources,
    )
