"""Abstract key/value storage backend."""

from abc import ABC, abstractmethod

__all__ = ["BaseStorage"]


class BaseStorage(ABC):
    """String slot storage, modelled on the browser Web Storage API.

    The wallet core is storage-agnostic: the caller injects a backend
    scoped however it likes (per process, per user, per tab) and the core
    only decides which slots it reads and writes.
    """

    @abstractmethod
    async def get_item(self, key: str) -> str | None:
        """Return the value stored under ``key`` or None."""
        raise NotImplementedError

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        raise NotImplementedError

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Delete ``key``. Removing a missing key is not an error."""
        raise NotImplementedError

    async def has_item(self, key: str) -> bool:
        return await self.get_item(key) is not None
