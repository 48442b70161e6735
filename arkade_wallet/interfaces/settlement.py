"""Abstract interface for the settlement-network (Arkade) wallet client."""

from abc import ABC, abstractmethod
from typing import Protocol

from arkade_wallet.models import SettlementBalance

__all__ = ["BaseSettlementClient", "SettlementClientFactory"]


class BaseSettlementClient(ABC):
    """Narrow view of an Arkade wallet handle.

    The concrete client (identity management, VTXO bookkeeping, settlement
    rounds) lives outside this package. The credential core only needs an
    address and a spendable balance from it.
    """

    @abstractmethod
    async def get_address(self) -> str:
        """Return the wallet's L2 address (ark1... on mainnet).

        Raises:
            Exception: Whatever the underlying client raises on failure.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_balance(self) -> SettlementBalance:
        """Return the wallet's L2 balance.

        Raises:
            Exception: Whatever the underlying client raises on failure.
        """
        raise NotImplementedError

    async def close(self) -> None:
        """Release any connections held by the client."""
        return None


class SettlementClientFactory(Protocol):
    """Builds a settlement client for one identity."""

    async def __call__(self, identity: str, server_url: str) -> BaseSettlementClient:
        """Create a connected client.

        Args:
            identity: Private key hex the client signs with.
            server_url: Arkade server endpoint.

        Returns:
            A ready-to-use settlement client.
        """
        ...
