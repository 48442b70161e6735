"""Credential generation and deterministic key derivation.

Seed phrases follow BIP-39 (English wordlist, 128 bits of entropy for new
wallets). The private key is the BIP-32 child at the fixed BIP-44 path
``m/44'/0'/0'/0/0``, so a phrase always restores the same key.
"""

from bip_utils import (
    Bip32KeyError,
    Bip32PathError,
    Bip32Slip10Secp256k1,
    Secp256k1PrivateKey,
)
from mnemonic import Mnemonic

from arkade_wallet.exceptions import DerivationError, InvalidMnemonic
from arkade_wallet.models import CredentialPair

DERIVATION_PATH = "m/44'/0'/0'/0/0"
MNEMONIC_STRENGTH = 128
PRIVATE_KEY_BYTES = 32

_mnemonic = Mnemonic("english")


def normalize_mnemonic(phrase: str) -> str:
    """Collapse runs of whitespace to single spaces."""
    return " ".join(phrase.split())


def validate_mnemonic(phrase: str) -> bool:
    """Check a phrase against the BIP-39 wordlist and checksum."""
    return bool(_mnemonic.check(normalize_mnemonic(phrase)))


def _derive_key(seed: bytes) -> bytes:
    try:
        node = Bip32Slip10Secp256k1.FromSeed(seed).DerivePath(DERIVATION_PATH)
        key = node.PrivateKey().Raw().ToBytes()
    except (Bip32KeyError, Bip32PathError, ValueError) as e:
        raise DerivationError("Failed to derive private key from seed") from e

    if not key:
        raise DerivationError("Failed to derive private key from seed")
    if len(key) != PRIVATE_KEY_BYTES:
        raise DerivationError(f"Invalid private key length: {len(key)} bytes")
    return key


def mnemonic_to_private_key(phrase: str) -> str:
    """Derive the wallet private key from a seed phrase.

    Args:
        phrase: BIP-39 mnemonic. Surrounding and repeated whitespace is ignored.

    Returns:
        The private key as 64 lowercase hex characters.

    Raises:
        InvalidMnemonic: If the phrase fails wordlist/checksum validation.
        DerivationError: If derivation does not produce a 32-byte key.
    """
    normalized = normalize_mnemonic(phrase)
    if not _mnemonic.check(normalized):
        raise InvalidMnemonic("Invalid seed phrase")

    seed = Mnemonic.to_seed(normalized)
    return _derive_key(seed).hex()


def generate_credentials() -> CredentialPair:
    """Generate a fresh 12-word seed phrase and its private key.

    Returns:
        CredentialPair whose mnemonic re-derives its private key.

    Raises:
        DerivationError: If derivation does not produce a 32-byte key.
    """
    phrase = _mnemonic.generate(strength=MNEMONIC_STRENGTH)
    seed = Mnemonic.to_seed(phrase)
    private_key = _derive_key(seed).hex()
    return CredentialPair(private_key=private_key, mnemonic=phrase)


def normalize_private_key(value: str) -> str:
    """Validate a hex private key and return its canonical form.

    Accepts an optional ``0x`` prefix and either case.

    Raises:
        DerivationError: If the value is not 32 bytes of hex or is not a
            valid secp256k1 scalar.
    """
    key = value.strip().lower()
    if key.startswith("0x"):
        key = key[2:]

    if len(key) != PRIVATE_KEY_BYTES * 2:
        raise DerivationError(
            f"Invalid private key length: {len(key)} (expected {PRIVATE_KEY_BYTES * 2})"
        )
    try:
        raw = bytes.fromhex(key)
    except ValueError as e:
        raise DerivationError("Private key must be valid hexadecimal") from e

    if not Secp256k1PrivateKey.IsValidBytes(raw):
        raise DerivationError("Private key is outside the secp256k1 range")
    return key
