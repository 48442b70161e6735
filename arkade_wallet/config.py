"""Configuration architecture using pydantic-settings for typed environment loading."""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

Network = Literal["mainnet", "testnet", "signet", "mutinynet", "regtest"]

PRODUCTION_INDEXER_URL = "https://arkvtxo.onrender.com"
LOCAL_INDEXER_URL = "http://localhost:3010"

_ESPLORA_URLS: dict[str, str] = {
    "mainnet": "https://mempool.space/api",
    "testnet": "https://mempool.space/testnet/api",
    "signet": "https://mempool.space/signet/api",
    "mutinynet": "https://mutinynet.com/api",
    "regtest": "http://localhost:3000",
}

_BECH32_HRPS: dict[str, str] = {
    "mainnet": "bc",
    "testnet": "tb",
    "signet": "tb",
    "mutinynet": "tb",
    "regtest": "bcrt",
}


def trim_trailing_slashes(url: str) -> str:
    """Strip any trailing '/' characters from a URL."""
    return url.rstrip("/")


class NetworkConfig(BaseSettings):
    """Bitcoin network and remote service endpoints.

    The indexer and Esplora URLs are optional - when unset they are
    chosen from the network name.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARKADE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    network: Network = "mainnet"
    ark_server_url: str = "https://arkade.computer"
    esplora_url: str = ""
    indexer_url: str = ""
    indexer_api_key: SecretStr = SecretStr("")

    @property
    def bech32_hrp(self) -> str:
        """Human-readable part for segwit/taproot addresses."""
        return _BECH32_HRPS[self.network]

    @property
    def explorer_url(self) -> str:
        """Base URL of the block explorer web UI."""
        if self.network == "mainnet":
            return "https://mempool.space"
        return "https://mutinynet.com"

    def resolved_indexer_url(self) -> str:
        """Return the token indexer base URL.

        An explicit ARKADE_INDEXER_URL wins. Otherwise mainnet uses the
        production indexer host and every other network a local one.
        """
        explicit = self.indexer_url.strip()
        if explicit:
            return trim_trailing_slashes(explicit)
        if self.network != "mainnet":
            return LOCAL_INDEXER_URL
        return PRODUCTION_INDEXER_URL

    def resolved_esplora_url(self) -> str:
        """Return the Esplora REST base URL for this network."""
        explicit = self.esplora_url.strip()
        if explicit:
            return trim_trailing_slashes(explicit)
        return _ESPLORA_URLS[self.network]


class VaultConfig(BaseSettings):
    """Encrypted vault configuration."""

    model_config = SettingsConfigDict(
        env_prefix="VAULT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    iterations: int = Field(default=250_000, ge=100_000, le=10_000_000)
    path: str = "data/wallet_vault.json"


class BalanceConfig(BaseSettings):
    """Minimum balances required before a token can be created."""

    model_config = SettingsConfigDict(
        env_prefix="BALANCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OP_RETURN anchoring on L1
    min_segwit_sats: int = Field(default=1000, ge=0)
    # ASP settlement on L2
    min_arkade_sats: int = Field(default=1000, ge=0)


class Settings:
    """Root settings aggregating all configuration sections."""

    def __init__(self) -> None:
        self.network = NetworkConfig()
        self.vault = VaultConfig()
        self.balance = BalanceConfig()


# Global settings instance - lazily loaded
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
