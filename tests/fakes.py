"""Fake external clients used across the wallet tests."""

from arkade_wallet.addresses import segwit_address
from arkade_wallet.interfaces.chain import BaseChainClient
from arkade_wallet.interfaces.settlement import BaseSettlementClient
from arkade_wallet.models import SettlementBalance, Utxo

TEST_KEY = "aa" * 32


class FakeSettlementClient(BaseSettlementClient):
    """In-memory settlement client keyed by identity."""

    def __init__(
        self,
        identity: str,
        server_url: str,
        available: int = 0,
        fail_balance: bool = False,
    ) -> None:
        self.identity = identity
        self.server_url = server_url
        self.available = available
        self.fail_balance = fail_balance
        self.closed = False

    async def get_address(self) -> str:
        return f"ark1q{self.identity[:16]}"

    async def get_balance(self) -> SettlementBalance:
        if self.fail_balance:
            raise ConnectionError("settlement server unreachable")
        return SettlementBalance(available=self.available)

    async def close(self) -> None:
        self.closed = True


class FakeSettlementFactory:
    """Records every client it builds; can be told to fail."""

    def __init__(self, available: int = 0, fail: bool = False) -> None:
        self.available = available
        self.fail = fail
        self.fail_balance = False
        self.created: list[FakeSettlementClient] = []

    async def __call__(self, identity: str, server_url: str) -> FakeSettlementClient:
        if self.fail:
            raise ConnectionError("settlement server unreachable")
        client = FakeSettlementClient(
            identity,
            server_url,
            available=self.available,
            fail_balance=self.fail_balance,
        )
        self.created.append(client)
        return client


class FakeChainClient(BaseChainClient):
    """UTXO source with fixed per-address values."""

    def __init__(self, values: dict[str, list[int]] | None = None) -> None:
        self.values = values or {}
        self.failing: set[str] = set()
        self.queried: list[str] = []

    async def create_address_from_hex(self, private_key: str) -> str:
        return segwit_address(private_key)

    async def get_utxos(self, address: str) -> list[Utxo]:
        self.queried.append(address)
        if address in self.failing:
            raise ConnectionError("esplora unreachable")
        return [
            Utxo(txid=f"{i:064x}", vout=i, value=value)
            for i, value in enumerate(self.values.get(address, []))
        ]
