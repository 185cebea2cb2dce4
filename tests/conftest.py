"""Shared test fixtures."""

import copy
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo

import pytest

from morfi_plan.adapters.jsonbin_client import (
    BinNotFoundError,
    BinSummary,
    JsonBinClient,
)
from morfi_plan.adapters.resend_client import (
    EmailClient,
    EmailMessage,
    EmailProviderError,
)
from morfi_plan.config import Settings
from morfi_plan.containers import AppContainer
from morfi_plan.services.app_config import ConfigService
from morfi_plan.services.cache import InMemoryLocalCache
from morfi_plan.services.digest import DigestService
from morfi_plan.services.email import EmailDispatchService
from morfi_plan.services.planner import PlannerService
from morfi_plan.services.store import DocumentStore


@dataclass
class FakeJsonBinClient(JsonBinClient):
    """In-memory stand-in for the JSONBin API."""

    bins: dict[str, dict[str, object]] = field(default_factory=dict)
    names: dict[str, str] = field(default_factory=dict)
    collections: dict[str, list[str]] = field(default_factory=dict)
    error: Exception | None = None
    calls: list[tuple[str, str]] = field(default_factory=list)
    created: int = 0

    async def read_bin(self, bin_id: str) -> dict[str, object]:
        self.calls.append(("read", bin_id))
        self._maybe_fail()
        if bin_id not in self.bins:
            raise BinNotFoundError(bin_id)
        return copy.deepcopy(self.bins[bin_id])

    async def update_bin(
        self, bin_id: str, record: dict[str, object]
    ) -> dict[str, object]:
        self.calls.append(("update", bin_id))
        self._maybe_fail()
        if bin_id not in self.bins:
            raise BinNotFoundError(bin_id)
        self.bins[bin_id] = copy.deepcopy(record)
        return record

    async def create_bin(
        self, record: dict[str, object], name: str, collection_id: str | None
    ) -> str:
        self._maybe_fail()
        self.created += 1
        bin_id = f"bin-{self.created}"
        self.calls.append(("create", bin_id))
        self.bins[bin_id] = copy.deepcopy(record)
        self.names[bin_id] = name
        if collection_id:
            self.collections.setdefault(collection_id, []).append(bin_id)
        return bin_id

    async def list_collection_bins(self, collection_id: str) -> list[BinSummary]:
        self.calls.append(("list", collection_id))
        self._maybe_fail()
        return [
            BinSummary(id=bin_id, name=self.names.get(bin_id))
            for bin_id in self.collections.get(collection_id, [])
        ]

    def _maybe_fail(self) -> None:
        if self.error is not None:
            raise self.error


@dataclass
class FakeEmailClient(EmailClient):
    """Email client that records messages instead of sending them."""

    sent: list[EmailMessage] = field(default_factory=list)
    error_message: str | None = None

    async def send(self, message: EmailMessage) -> str:
        if self.error_message is not None:
            raise EmailProviderError(self.error_message)
        self.sent.append(message)
        return f"email-{len(self.sent)}"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        jsonbin_api_key="master-key",
        jsonbin_collection_id="collection-1",
        resend_api_key="resend-key",
        cron_secret="cron-secret",
    )


@pytest.fixture
def local_cache() -> InMemoryLocalCache:
    return InMemoryLocalCache()


@pytest.fixture
def jsonbin_client() -> FakeJsonBinClient:
    return FakeJsonBinClient()


@pytest.fixture
def email_client() -> FakeEmailClient:
    return FakeEmailClient()


@pytest.fixture
def store(
    local_cache: InMemoryLocalCache, jsonbin_client: FakeJsonBinClient
) -> DocumentStore:
    return DocumentStore(
        cache=local_cache, client=jsonbin_client, collection_id="collection-1"
    )


@pytest.fixture
def container(
    settings: Settings, store: DocumentStore, email_client: FakeEmailClient
) -> AppContainer:
    timezone = ZoneInfo(settings.timezone)
    email_service = EmailDispatchService(client=email_client)
    config_service = ConfigService(store=store, timezone=timezone)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        timezone=timezone,
        store=store,
        email_service=email_service,
        planner_service=PlannerService(store),
        config_service=config_service,
        digest_service=DigestService(
            store=store,
            config_service=config_service,
            email_service=email_service,
            timezone=timezone,
        ),
        close_resources=close_resources,
    )
