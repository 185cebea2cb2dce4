"""Application document store backed by JSONBin with a local mirror."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from morfi_plan.adapters.jsonbin_client import BinNotFoundError, JsonBinClient
from morfi_plan.domain.document import dump_app_data, parse_app_data
from morfi_plan.domain.models import (
    AppConfig,
    AppData,
    Assignment,
    Menu,
    default_app_data,
)
from morfi_plan.services.cache import BIN_ID_KEY, DOCUMENT_KEY, LocalCache

DEFAULT_BIN_NAME = "morfi-plan-data"

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreUnavailableError(Exception):
    """Raised internally when no remote document can be addressed."""


@dataclass
class DocumentStore:
    """Reads and replaces the whole application document.

    Every read is mirrored into the local cache and every write lands in the
    cache before the remote call. Remote failures never escape: callers get
    the cached document, or the default one when nothing is cached.
    """

    cache: LocalCache
    client: JsonBinClient | None = None
    bin_id: str | None = None
    collection_id: str | None = None
    bin_name: str = DEFAULT_BIN_NAME

    @property
    def is_remote_configured(self) -> bool:
        return self.client is not None

    async def get_document(self) -> AppData:
        """Return the current document, degrading to local data on failure."""
        if self.client is None:
            _logger.warning("JSONBin not configured, using local data")
            return self._local_document()
        client = self.client
        try:
            record = await self._with_bin(client.read_bin)
            document = parse_app_data(record) if record else default_app_data()
        except Exception:
            _logger.warning("Remote read failed, using local data", exc_info=True)
            return self._local_document()
        self._mirror(document)
        return document

    async def replace_document(self, document: AppData) -> AppData:
        """Write the document locally, then try to replace the remote copy."""
        self._mirror(document)
        if self.client is None:
            return document
        client = self.client
        payload = dump_app_data(document)
        try:
            await self._with_bin(lambda bin_id: client.update_bin(bin_id, payload))
        except Exception:
            _logger.exception("Remote write failed, keeping the local copy")
        return document

    async def ensure_bin(self) -> str | None:
        """Resolve the remote document id, discovering or creating it if needed."""
        if self.client is None:
            return None
        try:
            return await self._resolve_bin_id()
        except Exception:
            _logger.warning("Could not resolve the remote document", exc_info=True)
            return None

    async def get_menus(self) -> list[Menu]:
        return (await self.get_document()).menus

    async def add_menu(self, menu: Menu) -> list[Menu]:
        """Append a menu to the library."""
        document = await self.get_document()
        document.menus.append(menu)
        await self.replace_document(document)
        return document.menus

    async def update_menu(self, menu: Menu) -> list[Menu]:
        """Replace the menu with the same id; nothing is written if it is absent."""
        document = await self.get_document()
        for index, existing in enumerate(document.menus):
            if existing.id == menu.id:
                document.menus[index] = menu
                await self.replace_document(document)
                break
        return document.menus

    async def delete_menu(self, menu_id: str) -> list[Menu]:
        """Remove a menu and every assignment that references it."""
        document = await self.get_document()
        document.menus = [menu for menu in document.menus if menu.id != menu_id]
        document.assignments = [
            item for item in document.assignments if item.menu_id != menu_id
        ]
        await self.replace_document(document)
        return document.menus

    async def get_assignments(self) -> list[Assignment]:
        return (await self.get_document()).assignments

    async def add_assignment(self, assignment: Assignment) -> list[Assignment]:
        """Insert an assignment, evicting whatever occupied the same slot."""
        document = await self.get_document()
        document.assignments = [
            item for item in document.assignments if item.slot != assignment.slot
        ]
        document.assignments.append(assignment)
        await self.replace_document(document)
        return document.assignments

    async def remove_assignment(self, assignment_id: str) -> list[Assignment]:
        document = await self.get_document()
        document.assignments = [
            item for item in document.assignments if item.id != assignment_id
        ]
        await self.replace_document(document)
        return document.assignments

    async def get_config(self) -> AppConfig:
        return (await self.get_document()).config

    async def update_config(self, config: AppConfig) -> AppConfig:
        document = await self.get_document()
        document.config = config
        await self.replace_document(document)
        return config

    async def _with_bin(self, operation: Callable[[str], Awaitable[T]]) -> T:
        """Run a remote operation, re-discovering the bin once if it vanished."""
        bin_id = await self._resolve_bin_id()
        try:
            return await operation(bin_id)
        except BinNotFoundError:
            _logger.warning("Remote document %s not found, rediscovering", bin_id)
            self._forget_bin_id()
            bin_id = await self._resolve_bin_id(seed=self._local_document())
            return await operation(bin_id)

    async def _resolve_bin_id(self, seed: AppData | None = None) -> str:
        """Return the known bin id or discover one; a new bin starts as ``seed``."""
        if self.bin_id:
            return self.bin_id
        cached = self.cache.get(BIN_ID_KEY)
        if isinstance(cached, str) and cached:
            self.bin_id = cached
            return cached
        if self.client is None or not self.collection_id:
            message = "No remote document id or collection configured"
            raise StoreUnavailableError(message)
        self.bin_id = await self._discover_or_create(
            self.client, self.collection_id, seed or default_app_data()
        )
        self.cache.set(BIN_ID_KEY, self.bin_id)
        return self.bin_id

    async def _discover_or_create(
        self, client: JsonBinClient, collection_id: str, seed: AppData
    ) -> str:
        for summary in await client.list_collection_bins(collection_id):
            if summary.name == self.bin_name:
                _logger.info("Found remote document %s", summary.id)
                return summary.id
        payload = dump_app_data(seed)
        bin_id = await client.create_bin(payload, self.bin_name, collection_id)
        _logger.info("Created remote document %s", bin_id)
        return bin_id

    def _forget_bin_id(self) -> None:
        self.bin_id = None
        self.cache.delete(BIN_ID_KEY)

    def _mirror(self, document: AppData) -> None:
        self.cache.set(DOCUMENT_KEY, dump_app_data(document))

    def _local_document(self) -> AppData:
        cached = self.cache.get(DOCUMENT_KEY)
        if isinstance(cached, dict):
            try:
                return parse_app_data(cached)
            except Exception:
                _logger.warning("Cached document unreadable", exc_info=True)
        return default_app_data()
