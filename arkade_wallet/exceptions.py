"""Custom exceptions for the arkade-wallet credential subsystem."""


# =============================================================================
# Credential Layer Exceptions
# =============================================================================


class CredentialError(Exception):
    """Base exception for key and address derivation errors."""

    pass


class InvalidMnemonic(CredentialError):
    """Raised when a seed phrase fails wordlist or checksum validation."""

    pass


class DerivationError(CredentialError):
    """Raised when derivation yields missing or wrong-length key material."""

    pass


class AddressDerivationError(CredentialError):
    """Raised when a payment script cannot be built from a private key."""

    pass


# =============================================================================
# Session Layer Exceptions
# =============================================================================


class SessionError(Exception):
    """Base exception for wallet session errors."""

    pass


class NoActiveSession(SessionError):
    """Raised when an operation requires an initialized wallet."""

    def __init__(self, message: str = "Wallet not initialized") -> None:
        super().__init__(message)


class WalletInitError(SessionError):
    """Raised when external client construction fails during initialize."""

    pass


class WalletStorageError(SessionError):
    """Raised when stored session credentials cannot be erased."""

    pass


class BalanceFetchError(SessionError):
    """Raised when any balance query fails.

    Attributes:
        source: Address class whose query failed (arkade/segwit/taproot).
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


# =============================================================================
# Vault Layer Exceptions
# =============================================================================


class VaultError(Exception):
    """Base exception for encrypted vault errors."""

    pass


class EmptyPassword(VaultError):
    """Raised when the normalized password is empty."""

    def __init__(self, message: str = "Password is required") -> None:
        super().__init__(message)


class NoVaultFound(VaultError):
    """Raised when unlocking with no stored vault record."""

    def __init__(self, message: str = "No vault found") -> None:
        super().__init__(message)


class UnsupportedVaultVersion(VaultError):
    """Raised when the record's version or KDF tag is not recognized."""

    def __init__(self, message: str = "Unsupported vault version") -> None:
        super().__init__(message)


class InvalidPassword(VaultError):
    """Raised when authenticated decryption fails.

    Covers both a wrong password and a tampered record; the two cannot be
    told apart and are reported identically.
    """

    def __init__(self, message: str = "Invalid password") -> None:
        super().__init__(message)


class CorruptVaultPayload(VaultError):
    """Raised when the record or the decrypted payload has an invalid shape."""

    def __init__(self, message: str = "Vault data is corrupted") -> None:
        super().__init__(message)


# =============================================================================
# Chain Client Exceptions
# =============================================================================


class ChainClientError(Exception):
    """Base exception for on-chain (Esplora) API errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ChainRateLimitError(ChainClientError):
    """Raised when the Esplora API returns 429 (rate limited).

    Attributes:
        retry_after: Seconds to wait before retrying (if provided by API).
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class ChainServerError(ChainClientError):
    """Raised when the Esplora API returns a 5xx server error."""

    def __init__(
        self,
        message: str = "Server error",
        status_code: int = 500,
    ) -> None:
        super().__init__(message, status_code=status_code)


# =============================================================================
# Amount Parsing Exceptions
# =============================================================================


class InvalidAmountError(ValueError):
    """Raised when a token amount string cannot be parsed."""

    pass
