"""Tests for the on-disk local cache."""

from pathlib import Path

from morfi_plan.services.cache import DOCUMENT_KEY, JsonFileLocalCache


def test_file_cache_persists_between_instances(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "cache.json"
    JsonFileLocalCache(path).set(DOCUMENT_KEY, {"menus": []})

    reopened = JsonFileLocalCache(path)

    assert reopened.get(DOCUMENT_KEY) == {"menus": []}
    assert reopened.get("missing") is None


def test_file_cache_delete_removes_key(tmp_path: Path) -> None:
    cache = JsonFileLocalCache(tmp_path / "cache.json")
    cache.set("a", 1)
    cache.set("b", "dos")

    cache.delete("a")
    cache.delete("never-set")

    assert cache.get("a") is None
    assert cache.get("b") == "dos"


def test_file_cache_treats_corrupt_file_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    path.write_text("{not json", encoding="utf-8")
    cache = JsonFileLocalCache(path)

    assert cache.get(DOCUMENT_KEY) is None

    cache.set(DOCUMENT_KEY, {"ok": True})

    assert cache.get(DOCUMENT_KEY) == {"ok": True}
