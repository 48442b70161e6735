"""Shared fixtures for wallet tests."""

import pytest

from arkade_wallet.config import NetworkConfig
from arkade_wallet.session import WalletSessionManager
from arkade_wallet.storage import MemoryStorage

from tests.fakes import FakeSettlementFactory


@pytest.fixture
def network() -> NetworkConfig:
    return NetworkConfig(
        network="mainnet",
        ark_server_url="https://ark.test",
        indexer_url="https://indexer.test/",
    )


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def settlement_factory() -> FakeSettlementFactory:
    return FakeSettlementFactory()


@pytest.fixture
def manager(
    settlement_factory: FakeSettlementFactory,
    storage: MemoryStorage,
    network: NetworkConfig,
) -> WalletSessionManager:
    return WalletSessionManager(
        settlement_factory=settlement_factory,
        storage=storage,
        network=network,
    )

