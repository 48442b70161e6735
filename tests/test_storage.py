"""Tests for the storage backends."""

import json
import os
import stat
from pathlib import Path
from typing import Any

import pytest

import arkade_wallet.storage as storage_module
from arkade_wallet.storage import JsonFileStorage, MemoryStorage


class TestMemoryStorage:
    """Tests for MemoryStorage."""

    @pytest.mark.asyncio
    async def test_set_get_remove(self) -> None:
        storage = MemoryStorage()

        await storage.set_item("a", "1")
        assert await storage.get_item("a") == "1"
        assert await storage.has_item("a")

        await storage.remove_item("a")
        assert await storage.get_item("a") is None
        assert len(storage) == 0

    @pytest.mark.asyncio
    async def test_remove_missing_is_noop(self) -> None:
        storage = MemoryStorage()
        await storage.remove_item("missing")
        assert not await storage.has_item("missing")

    @pytest.mark.asyncio
    async def test_instances_are_isolated(self) -> None:
        first, second = MemoryStorage(), MemoryStorage()
        await first.set_item("a", "1")
        assert await second.get_item("a") is None


class TestJsonFileStorage:
    """Tests for JsonFileStorage."""

    @pytest.mark.asyncio
    async def test_missing_file_reads_empty(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / "wallet.json")
        assert await storage.get_item("a") is None

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "wallet.json"
        await JsonFileStorage(path).set_item("a", "1")

        assert await JsonFileStorage(path).get_item("a") == "1"
        assert json.loads(path.read_text()) == {"a": "1"}

    @pytest.mark.asyncio
    async def test_owner_only_permissions(self, tmp_path: Path) -> None:
        path = tmp_path / "wallet.json"
        await JsonFileStorage(path).set_item("a", "1")

        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600

    @pytest.mark.asyncio
    async def test_temp_file_private_while_written(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The temp file is already 0600 when the secret is serialized into it."""
        path = tmp_path / "wallet.json"
        tmp_file = tmp_path / "wallet.json.tmp"
        modes: list[int] = []
        original_dumps = storage_module.json.dumps

        def recording_dumps(*args: Any, **kwargs: Any) -> str:
            modes.append(stat.S_IMODE(os.stat(tmp_file).st_mode))
            return original_dumps(*args, **kwargs)

        monkeypatch.setattr(storage_module.json, "dumps", recording_dumps)
        previous_umask = os.umask(0o022)
        try:
            await JsonFileStorage(path).set_item("arkade_private_key", "aa" * 32)
        finally:
            os.umask(previous_umask)

        assert modes == [0o600]

    @pytest.mark.asyncio
    async def test_stale_temp_file_replaced(self, tmp_path: Path) -> None:
        """A leftover world-readable temp file does not keep its mode."""
        path = tmp_path / "wallet.json"
        stale = tmp_path / "wallet.json.tmp"
        stale.write_text("{}")
        os.chmod(stale, 0o644)

        await JsonFileStorage(path).set_item("a", "1")

        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600
        assert not stale.exists()

    @pytest.mark.asyncio
    async def test_no_temp_file_left(self, tmp_path: Path) -> None:
        path = tmp_path / "wallet.json"
        storage = JsonFileStorage(path)
        await storage.set_item("a", "1")
        await storage.set_item("b", "2")

        assert sorted(p.name for p in tmp_path.iterdir()) == ["wallet.json"]

    @pytest.mark.asyncio
    async def test_remove_keeps_other_slots(self, tmp_path: Path) -> None:
        path = tmp_path / "wallet.json"
        storage = JsonFileStorage(path)
        await storage.set_item("a", "1")
        await storage.set_item("b", "2")

        await storage.remove_item("a")

        assert await storage.get_item("a") is None
        assert await storage.get_item("b") == "2"

    @pytest.mark.asyncio
    async def test_file_deleted_when_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "wallet.json"
        storage = JsonFileStorage(path)
        await storage.set_item("a", "1")

        await storage.remove_item("a")
        await storage.remove_item("a")

        assert not path.exists()

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "wallet.json"
        path.write_text("{broken")

        with pytest.raises(ValueError):
            await JsonFileStorage(path).get_item("a")

    @pytest.mark.asyncio
    async def test_non_object_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "wallet.json"
        path.write_text("[1, 2]")

        with pytest.raises(ValueError):
            await JsonFileStorage(path).get_item("a")
