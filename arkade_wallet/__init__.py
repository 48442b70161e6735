"""Wallet credential core for the Arkade token platform.

Provides key derivation, the wallet session, address derivation, balance
aggregation and the encrypted credential vault.
"""

from arkade_wallet.addresses import derive_addresses, segwit_address, taproot_address
from arkade_wallet.balances import BalanceAggregator
from arkade_wallet.keys import (
    DERIVATION_PATH,
    generate_credentials,
    mnemonic_to_private_key,
    validate_mnemonic,
)
from arkade_wallet.models import (
    AddressKind,
    BalanceSummary,
    CredentialPair,
    TokenCreationCheck,
    VaultPayload,
    WalletAddresses,
)
from arkade_wallet.session import WalletConfig, WalletSession, WalletSessionManager
from arkade_wallet.storage import JsonFileStorage, MemoryStorage
from arkade_wallet.vault import WalletVault

__all__ = [
    "DERIVATION_PATH",
    "AddressKind",
    "BalanceAggregator",
    "BalanceSummary",
    "CredentialPair",
    "JsonFileStorage",
    "MemoryStorage",
    "TokenCreationCheck",
    "VaultPayload",
    "WalletAddresses",
    "WalletConfig",
    "WalletSession",
    "WalletSessionManager",
    "WalletVault",
    "derive_addresses",
    "generate_credentials",
    "mnemonic_to_private_key",
    "segwit_address",
    "taproot_address",
    "validate_mnemonic",
]
