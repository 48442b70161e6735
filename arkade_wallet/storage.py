"""Storage backends for session restoration and the encrypted vault."""

import asyncio
import contextlib
import json
import os
from pathlib import Path

import aiofiles
import aiofiles.os
from loguru import logger

from arkade_wallet.interfaces.storage import BaseStorage

# Session-restoration slots. Presence of the private-key slot alone means
# "a wallet can be restored".
PRIVATE_KEY_SLOT = "arkade_private_key"
MNEMONIC_SLOT = "arkade_mnemonic"

VAULT_SLOT = "arkade_wallet_vault_v1"


class MemoryStorage(BaseStorage):
    """In-process storage that lives as long as the object.

    The closest analogue of a browser tab's sessionStorage: nothing
    survives the process.
    """

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    async def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __len__(self) -> int:
        return len(self._items)


class JsonFileStorage(BaseStorage):
    """Storage backed by a single JSON object on disk.

    Every mutation rewrites the whole document to a temporary file and
    atomically replaces the original, so a crash mid-write never leaves a
    truncated file. The file is created owner-readable only.

    Example:
        storage = JsonFileStorage(Path("data/wallet_vault.json"))
        await storage.set_item("key", "value")
    """

    FILE_MODE = 0o600

    def __init__(self, path: Path) -> None:
        """Initialize the file storage.

        Args:
            path: JSON file location. Parent directories are created on
                first write.
        """
        self._path = path
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        """Get the backing file path."""
        return self._path

    async def _read(self) -> dict[str, str]:
        if not await aiofiles.os.path.exists(self._path):
            return {}

        async with aiofiles.open(self._path, "r", encoding="utf-8") as f:
            raw = await f.read()

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"Storage file is not valid JSON: {self._path}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Storage file must hold a JSON object: {self._path}")
        return {str(k): str(v) for k, v in data.items()}

    def _opener(self, path: str, flags: int) -> int:
        return os.open(path, flags, self.FILE_MODE)

    async def _write(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")

        # Recreated so it is opened with FILE_MODE
        with contextlib.suppress(FileNotFoundError):
            await aiofiles.os.remove(tmp_path)
        async with aiofiles.open(tmp_path, "w", encoding="utf-8", opener=self._opener) as f:
            await f.write(json.dumps(data, indent=2, sort_keys=True))
        await aiofiles.os.replace(tmp_path, self._path)

    async def get_item(self, key: str) -> str | None:
        async with self._lock:
            data = await self._read()
        return data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        async with self._lock:
            data = await self._read()
            data[key] = value
            await self._write(data)
        logger.debug("Stored slot {} in {}", key, self._path)

    async def remove_item(self, key: str) -> None:
        async with self._lock:
            data = await self._read()
            if key not in data:
                return
            del data[key]
            if data:
                await self._write(data)
            else:
                await aiofiles.os.remove(self._path)
        logger.debug("Removed slot {} from {}", key, self._path)
