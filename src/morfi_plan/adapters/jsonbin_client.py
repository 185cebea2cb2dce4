"""JSONBin document API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

NOT_FOUND = 404


class BinNotFoundError(Exception):
    """Raised when the remote API reports that a bin does not exist."""


@dataclass(frozen=True)
class BinSummary:
    """A document listed in a collection."""

    id: str
    name: str | None


class JsonBinClient(Protocol):
    """Interface for the remote document store."""

    async def read_bin(self, bin_id: str) -> dict[str, object]:
        """Return the stored record for a bin."""

    async def update_bin(
        self, bin_id: str, record: dict[str, object]
    ) -> dict[str, object]:
        """Replace a bin's record and return the stored record."""

    async def create_bin(
        self, record: dict[str, object], name: str, collection_id: str | None
    ) -> str:
        """Create a bin and return its id."""

    async def list_collection_bins(self, collection_id: str) -> list[BinSummary]:
        """Return the bins stored in a collection."""


@dataclass
class HttpxJsonBinClient(JsonBinClient):
    """HTTPX-backed JSONBin v3 client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxJsonBinClient":
        """Create a JSONBin client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def read_bin(self, bin_id: str) -> dict[str, object]:
        """Fetch the latest record of a bin."""
        response = await self.http_client.get(
            f"{self.base_url}/b/{bin_id}", headers=self._headers(), timeout=15
        )
        _raise_for_status(response, bin_id)
        return _record(response)

    async def update_bin(
        self, bin_id: str, record: dict[str, object]
    ) -> dict[str, object]:
        """Replace the record of a bin."""
        response = await self.http_client.put(
            f"{self.base_url}/b/{bin_id}",
            headers=self._headers(),
            json=record,
            timeout=15,
        )
        _raise_for_status(response, bin_id)
        return _record(response) or record

    async def create_bin(
        self, record: dict[str, object], name: str, collection_id: str | None
    ) -> str:
        """Create a private bin, optionally inside a collection."""
        headers = self._headers()
        headers["X-Bin-Name"] = name
        headers["X-Bin-Private"] = "true"
        if collection_id:
            headers["X-Collection-Id"] = collection_id
        response = await self.http_client.post(
            f"{self.base_url}/b", headers=headers, json=record, timeout=15
        )
        response.raise_for_status()
        metadata = response.json().get("metadata") or {}
        bin_id = metadata.get("id")
        if not bin_id:
            message = "JSONBin create response did not include an id"
            raise ValueError(message)
        return str(bin_id)

    async def list_collection_bins(self, collection_id: str) -> list[BinSummary]:
        """List the bins of a collection."""
        response = await self.http_client.get(
            f"{self.base_url}/c/{collection_id}/bins",
            headers=self._headers(),
            timeout=15,
        )
        _raise_for_status(response, collection_id)
        payload = response.json()
        if not isinstance(payload, list):
            return []
        return [
            summary
            for summary in (_parse_summary(item) for item in payload)
            if summary is not None
        ]

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", "X-Master-Key": self.api_key}


def _raise_for_status(response: httpx.Response, resource_id: str) -> None:
    if response.status_code == NOT_FOUND:
        raise BinNotFoundError(resource_id)
    response.raise_for_status()


def _record(response: httpx.Response) -> dict[str, object]:
    payload = response.json()
    record = payload.get("record") if isinstance(payload, dict) else None
    return record if isinstance(record, dict) else {}


def _parse_summary(item: object) -> BinSummary | None:
    """Parse a listing entry in either ``{id, name}`` or JSONBin's own shape."""
    if not isinstance(item, dict):
        return None
    bin_id = item.get("id") or item.get("record")
    if not isinstance(bin_id, str) or not bin_id:
        return None
    snippet = item.get("snippetMeta")
    name = item.get("name")
    if name is None and isinstance(snippet, dict):
        name = snippet.get("name")
    return BinSummary(id=bin_id, name=name if isinstance(name, str) else None)
