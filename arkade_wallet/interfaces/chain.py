"""Abstract interface for on-chain UTXO lookups."""

from abc import ABC, abstractmethod

from arkade_wallet.exceptions import ChainClientError, ChainRateLimitError, ChainServerError
from arkade_wallet.models import Utxo

# Re-export exceptions for convenience
__all__ = [
    "BaseChainClient",
    "ChainClientError",
    "ChainRateLimitError",
    "ChainServerError",
]


class BaseChainClient(ABC):
    """Abstract base class for Bitcoin L1 data sources."""

    @abstractmethod
    async def create_address_from_hex(self, private_key: str) -> str:
        """Return the P2WPKH address for a hex private key.

        Raises:
            AddressDerivationError: If the key is malformed.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_utxos(self, address: str) -> list[Utxo]:
        """Return the unspent outputs currently paying to ``address``.

        Raises:
            ChainClientError: If the lookup fails.
        """
        raise NotImplementedError

    async def get_balance(self, address: str) -> int:
        """Sum of all unspent output values at ``address``, in sats."""
        utxos = await self.get_utxos(address)
        return sum(utxo.value for utxo in utxos)
