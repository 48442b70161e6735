"""Domain models for the arkade-wallet credential subsystem."""

import re
from enum import Enum
from time import time
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

HEX_KEY_RE = re.compile(r"^[0-9a-f]{64}$")


class AddressKind(str, Enum):
    """Address class a balance is held under."""

    ARKADE = "arkade"
    SEGWIT = "segwit"
    TAPROOT = "taproot"


class CredentialPair(BaseModel):
    """Private key and (optional) seed phrase of one wallet.

    Immutable. Both fields are excluded from repr so the pair can be
    logged or shown in a traceback without leaking secrets.

    Invariants:
        - private_key is exactly 64 lowercase hex characters (32 bytes)
    """

    model_config = {"frozen": True}

    private_key: str = Field(..., repr=False, description="32-byte key as hex")
    mnemonic: str | None = Field(default=None, repr=False, description="BIP-39 phrase")

    @field_validator("private_key")
    @classmethod
    def _check_private_key(cls, v: str) -> str:
        if not HEX_KEY_RE.match(v):
            raise ValueError("private_key must be 64 lowercase hex characters")
        return v


class WalletAddresses(BaseModel):
    """The three address encodings derived from one private key."""

    model_config = {"frozen": True}

    arkade: str = Field(..., description="Arkade L2 address (ark1.../tark1...)")
    segwit: str = Field(..., description="P2WPKH address (bc1q...)")
    taproot: str = Field(..., description="P2TR address (bc1p...)")


class SettlementBalance(BaseModel):
    """Balance reported by the settlement-network client.

    Only ``available`` is consumed by aggregation; the other figures are
    carried through when the client reports them.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    available: int = Field(default=0, ge=0, description="Spendable sats")
    settled: int = Field(default=0, ge=0)
    preconfirmed: int = Field(default=0, ge=0)
    boarding: int = Field(default=0, ge=0)


class Utxo(BaseModel):
    """Unspent transaction output returned by Esplora."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    txid: str
    vout: int = Field(..., ge=0)
    value: int = Field(..., ge=0, description="Output value in sats")
    confirmed: bool = False


class BalanceSummary(BaseModel):
    """Per-address balances in sats and their exact total."""

    model_config = {"frozen": True}

    arkade: int = Field(..., ge=0)
    segwit: int = Field(..., ge=0)
    taproot: int = Field(..., ge=0)
    total: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_total(self) -> "BalanceSummary":
        if self.total != self.arkade + self.segwit + self.taproot:
            raise ValueError("total must equal the sum of per-address balances")
        return self

    @classmethod
    def from_parts(cls, arkade: int, segwit: int, taproot: int) -> "BalanceSummary":
        """Build a summary, computing the total."""
        return cls(
            arkade=arkade,
            segwit=segwit,
            taproot=taproot,
            total=arkade + segwit + taproot,
        )

    def by_kind(self) -> dict[AddressKind, int]:
        """Per-address amounts keyed by address class."""
        return {
            AddressKind.ARKADE: self.arkade,
            AddressKind.SEGWIT: self.segwit,
            AddressKind.TAPROOT: self.taproot,
        }


class TokenCreationCheck(BaseModel):
    """Outcome of the token-creation balance policy check."""

    model_config = {"frozen": True}

    can_create: bool
    session_active: bool = True
    segwit_balance: int = 0
    arkade_balance: int = 0
    errors: list[str] = Field(default_factory=list)


# =============================================================================
# Vault Models
# =============================================================================

VAULT_VERSION = 1
VAULT_KDF = "PBKDF2-SHA256"
MIN_VAULT_ITERATIONS = 100_000
MAX_VAULT_ITERATIONS = 10_000_000


class VaultPayload(BaseModel):
    """Plaintext stored inside the encrypted vault."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    private_key: str = Field(..., alias="privateKey", repr=False)
    mnemonic: str | None = Field(default=None, repr=False)

    @field_validator("private_key")
    @classmethod
    def _check_private_key(cls, v: str) -> str:
        if not HEX_KEY_RE.match(v.lower()):
            raise ValueError("privateKey must be 64 hex characters")
        return v.lower()

    @classmethod
    def from_credentials(cls, credentials: CredentialPair) -> "VaultPayload":
        return cls(private_key=credentials.private_key, mnemonic=credentials.mnemonic)

    def to_credentials(self) -> CredentialPair:
        return CredentialPair(private_key=self.private_key, mnemonic=self.mnemonic)


class VaultRecord(BaseModel):
    """Versioned, persisted vault record.

    Serialized with camelCase keys. Older records written by the browser
    client used ``saltB64``/``ivB64``/``ciphertextB64``; those names are
    accepted when reading.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: Literal[1] = VAULT_VERSION
    kdf: Literal["PBKDF2-SHA256"] = VAULT_KDF
    iterations: int = Field(..., ge=MIN_VAULT_ITERATIONS, le=MAX_VAULT_ITERATIONS)
    salt: str = Field(..., validation_alias=AliasChoices("salt", "saltB64"))
    iv: str = Field(..., validation_alias=AliasChoices("iv", "ivB64"))
    ciphertext: str = Field(
        ..., validation_alias=AliasChoices("ciphertext", "ciphertextB64")
    )
    created_at_ms: int = Field(
        default_factory=lambda: int(time() * 1000),
        serialization_alias="createdAtMs",
        validation_alias=AliasChoices("createdAtMs", "created_at_ms"),
    )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
