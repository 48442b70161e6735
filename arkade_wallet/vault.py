"""Password-protected vault for persisting wallet credentials.

The credential payload is serialized to JSON and sealed with AES-256-GCM
under a key stretched from the user's password with PBKDF2-HMAC-SHA256.
One versioned record is kept per storage backend.

Record layout (JSON):
    {"version": 1, "kdf": "PBKDF2-SHA256", "iterations": 250000,
     "salt": <b64>, "iv": <b64>, "ciphertext": <b64>, "createdAtMs": <int>}
"""

import asyncio
import base64
import binascii
import json
import os
import unicodedata

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from loguru import logger
from pydantic import ValidationError

from arkade_wallet.exceptions import (
    CorruptVaultPayload,
    EmptyPassword,
    InvalidPassword,
    NoVaultFound,
    UnsupportedVaultVersion,
)
from arkade_wallet.interfaces.storage import BaseStorage
from arkade_wallet.models import (
    MAX_VAULT_ITERATIONS,
    MIN_VAULT_ITERATIONS,
    VAULT_KDF,
    VAULT_VERSION,
    VaultPayload,
    VaultRecord,
)
from arkade_wallet.storage import VAULT_SLOT

PBKDF2_ITERATIONS = 250_000
SALT_BYTES = 16
NONCE_BYTES = 12
KEY_BYTES = 32


def normalize_password(password: str) -> str:
    """Canonical composition (NFC) so equivalent inputs derive one key."""
    return unicodedata.normalize("NFC", password)


def derive_key(password: str, salt: bytes, iterations: int) -> bytes:
    """Stretch a normalized password into a 256-bit AES key."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_BYTES,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password.encode("utf-8"))


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64decode(data: str) -> bytes:
    return base64.b64decode(data, validate=True)


def _seal(password: str, plaintext: bytes, iterations: int) -> VaultRecord:
    salt = os.urandom(SALT_BYTES)
    nonce = os.urandom(NONCE_BYTES)
    key = derive_key(password, salt, iterations)
    ciphertext = AESGCM(key).encrypt(nonce, plaintext, None)
    return VaultRecord(
        version=VAULT_VERSION,
        kdf=VAULT_KDF,
        iterations=iterations,
        salt=_b64encode(salt),
        iv=_b64encode(nonce),
        ciphertext=_b64encode(ciphertext),
    )


def _open(password: str, salt: bytes, nonce: bytes, ciphertext: bytes, iterations: int) -> bytes:
    key = derive_key(password, salt, iterations)
    try:
        return AESGCM(key).decrypt(nonce, ciphertext, None)
    except InvalidTag as e:
        raise InvalidPassword() from e


class WalletVault:
    """Encrypted credential store, independent of the wallet session.

    Example:
        vault = WalletVault(JsonFileStorage(Path("data/wallet_vault.json")))
        await vault.create("correct-horse", VaultPayload(private_key=key))
        payload = await vault.unlock("correct-horse")
    """

    def __init__(self, storage: BaseStorage, iterations: int = PBKDF2_ITERATIONS) -> None:
        """Initialize the vault.

        Args:
            storage: Backend holding the vault record.
            iterations: PBKDF2 iteration count for new records.

        Raises:
            ValueError: If iterations is outside the supported range.
        """
        if not MIN_VAULT_ITERATIONS <= iterations <= MAX_VAULT_ITERATIONS:
            raise ValueError(
                f"iterations must be between {MIN_VAULT_ITERATIONS} and {MAX_VAULT_ITERATIONS}"
            )
        self._storage = storage
        self._iterations = iterations

    @property
    def iterations(self) -> int:
        return self._iterations

    async def exists(self) -> bool:
        """Check whether a vault record is stored."""
        return await self._storage.has_item(VAULT_SLOT)

    async def create(self, password: str, payload: VaultPayload) -> VaultRecord:
        """Encrypt ``payload`` and store it, replacing any existing vault.

        Args:
            password: User password. Normalized to NFC before use.
            payload: Credentials to protect.

        Returns:
            The stored record (contains no plaintext).

        Raises:
            EmptyPassword: If the normalized password is empty.
        """
        normalized = normalize_password(password)
        if not normalized:
            raise EmptyPassword()

        plaintext = payload.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
        record = await asyncio.to_thread(_seal, normalized, plaintext, self._iterations)

        await self._storage.set_item(VAULT_SLOT, record.to_json())
        logger.info("Wallet vault created ({} PBKDF2 iterations)", record.iterations)
        return record

    async def _load_record(self) -> VaultRecord:
        raw = await self._storage.get_item(VAULT_SLOT)
        if not raw:
            raise NoVaultFound()

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptVaultPayload() from e
        if not isinstance(data, dict):
            raise CorruptVaultPayload()

        if data.get("version") != VAULT_VERSION:
            raise UnsupportedVaultVersion()
        if data.get("kdf", VAULT_KDF) != VAULT_KDF:
            raise UnsupportedVaultVersion("Unsupported vault key derivation")

        try:
            return VaultRecord.model_validate(data)
        except ValidationError as e:
            raise CorruptVaultPayload() from e

    async def unlock(self, password: str) -> VaultPayload:
        """Decrypt the stored credentials.

        Args:
            password: User password. Normalized to NFC before use.

        Returns:
            The decrypted payload.

        Raises:
            NoVaultFound: If no record is stored.
            UnsupportedVaultVersion: If the record's version or KDF is unknown.
            InvalidPassword: If authentication fails (wrong password or tampering).
            CorruptVaultPayload: If the record or decrypted payload is malformed.
        """
        record = await self._load_record()

        try:
            salt = _b64decode(record.salt)
            nonce = _b64decode(record.iv)
            ciphertext = _b64decode(record.ciphertext)
        except (binascii.Error, ValueError) as e:
            raise CorruptVaultPayload() from e
        if len(nonce) != NONCE_BYTES or not salt:
            raise CorruptVaultPayload()

        plaintext = await asyncio.to_thread(
            _open,
            normalize_password(password),
            salt,
            nonce,
            ciphertext,
            record.iterations,
        )

        try:
            return VaultPayload.model_validate_json(plaintext)
        except ValidationError as e:
            raise CorruptVaultPayload("Vault payload is invalid") from e

    async def clear(self) -> None:
        """Delete the vault record. No error if none exists."""
        await self._storage.remove_item(VAULT_SLOT)
        logger.info("Wallet vault cleared")
