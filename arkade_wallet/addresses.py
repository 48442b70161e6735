"""Address derivation for the three address classes of a wallet.

All functions are pure projections of the private key; nothing is cached
since the key is already in memory and derivation is cheap.
"""

from bip_utils import (
    P2TRAddrEncoder,
    P2WPKHAddrEncoder,
    Secp256k1PrivateKey,
    Secp256k1PublicKey,
)

from arkade_wallet.exceptions import AddressDerivationError
from arkade_wallet.interfaces.settlement import BaseSettlementClient
from arkade_wallet.models import WalletAddresses

MAINNET_HRP = "bc"


def _public_key(private_key: str) -> Secp256k1PublicKey:
    try:
        raw = bytes.fromhex(private_key)
        return Secp256k1PrivateKey.FromBytes(raw).PublicKey()
    except (TypeError, ValueError) as e:
        raise AddressDerivationError("Malformed private key") from e


def x_only_public_key(private_key: str) -> bytes:
    """Return the 32-byte x-only public key (parity byte dropped)."""
    compressed = _public_key(private_key).RawCompressed().ToBytes()
    return compressed[1:]


def segwit_address(private_key: str, hrp: str = MAINNET_HRP) -> str:
    """P2WPKH (witness v0) address of the compressed public key."""
    pub_key = _public_key(private_key)
    try:
        return P2WPKHAddrEncoder.EncodeKey(pub_key, hrp=hrp)
    except (TypeError, ValueError) as e:
        raise AddressDerivationError("Failed to create SegWit address") from e


def taproot_address(private_key: str, hrp: str = MAINNET_HRP) -> str:
    """P2TR (witness v1) key-path address.

    The x-only public key is used as the internal key and tweaked with an
    empty script tree (BIP-86), matching a single-key Taproot output.
    """
    pub_key = _public_key(private_key)
    try:
        return P2TRAddrEncoder.EncodeKey(pub_key, hrp=hrp)
    except (TypeError, ValueError) as e:
        raise AddressDerivationError("Failed to create Taproot address") from e


async def arkade_address(settlement: BaseSettlementClient) -> str:
    """L2 address, delegated to the settlement client."""
    try:
        return await settlement.get_address()
    except Exception as e:
        raise AddressDerivationError("Failed to get Arkade address") from e


async def derive_addresses(
    private_key: str,
    settlement: BaseSettlementClient,
    hrp: str = MAINNET_HRP,
) -> WalletAddresses:
    """Compute all three addresses for a key.

    Args:
        private_key: 64-hex private key.
        settlement: Settlement client built from the same key.
        hrp: Bech32 human-readable part of the target network.

    Returns:
        WalletAddresses with arkade, segwit and taproot encodings.

    Raises:
        AddressDerivationError: If any address cannot be produced.
    """
    segwit = segwit_address(private_key, hrp)
    taproot = taproot_address(private_key, hrp)
    arkade = await arkade_address(settlement)
    return WalletAddresses(arkade=arkade, segwit=segwit, taproot=taproot)
