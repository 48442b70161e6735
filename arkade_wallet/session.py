"""Wallet session lifecycle.

A ``WalletSessionManager`` owns at most one active ``WalletSession``: the
credential pair plus the settlement and token-indexer clients built from
it. Initialize-and-replace and disconnect run under one ``asyncio.Lock``
so a session never pairs one key with another key's client.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from time import time

from loguru import logger
from pydantic import BaseModel, Field

from arkade_wallet.addresses import derive_addresses
from arkade_wallet.clients.indexer import TokenIndexerClient
from arkade_wallet.config import NetworkConfig, get_settings
from arkade_wallet.exceptions import (
    DerivationError,
    NoActiveSession,
    WalletInitError,
    WalletStorageError,
)
from arkade_wallet.interfaces.settlement import BaseSettlementClient, SettlementClientFactory
from arkade_wallet.interfaces.storage import BaseStorage
from arkade_wallet.keys import (
    generate_credentials,
    mnemonic_to_private_key,
    normalize_mnemonic,
    normalize_private_key,
)
from arkade_wallet.models import CredentialPair, WalletAddresses
from arkade_wallet.storage import MNEMONIC_SLOT, PRIVATE_KEY_SLOT, MemoryStorage

IndexerFactory = Callable[[str, str | None], TokenIndexerClient]
ChangeListener = Callable[["WalletSession | None"], None]


class WalletConfig(BaseModel):
    """Options for ``WalletSessionManager.initialize``.

    Resolution order for the key: ``private_key`` > key derived from
    ``mnemonic`` > stored credential (only when ``restore`` is set and
    ``force_new`` is not) > freshly generated.
    """

    model_config = {"frozen": True}

    private_key: str | None = Field(default=None, repr=False)
    mnemonic: str | None = Field(default=None, repr=False)
    ark_server_url: str | None = Field(
        default=None, description="Overrides the configured Arkade server"
    )
    token_indexer_url: str | None = Field(
        default=None, description="Overrides the configured indexer URL"
    )
    api_key: str | None = Field(default=None, repr=False)
    force_new: bool = False
    restore: bool = False


@dataclass(frozen=True)
class WalletSession:
    """The active credential and the client handles derived from it."""

    credentials: CredentialPair
    settlement: BaseSettlementClient = field(repr=False)
    indexer: TokenIndexerClient = field(repr=False)
    network: NetworkConfig = field(repr=False)
    source: str = "generated"
    created_at: float = field(default_factory=time)

    @property
    def private_key(self) -> str:
        return self.credentials.private_key

    @property
    def mnemonic(self) -> str | None:
        return self.credentials.mnemonic

    async def addresses(self) -> WalletAddresses:
        """Derive the arkade, segwit and taproot addresses."""
        return await derive_addresses(
            self.credentials.private_key,
            self.settlement,
            self.network.bech32_hrp,
        )


class WalletSessionManager:
    """Owns the single active wallet session.

    Usage:
        manager = WalletSessionManager(settlement_factory=create_ark_wallet)

        session = await manager.initialize(WalletConfig())
        addresses = await session.addresses()

        # Later, e.g. after a reload with the same storage backend
        session = await manager.current_or_restore()

        await manager.disconnect()
    """

    def __init__(
        self,
        settlement_factory: SettlementClientFactory,
        storage: BaseStorage | None = None,
        network: NetworkConfig | None = None,
        indexer_factory: IndexerFactory = TokenIndexerClient,
    ) -> None:
        """Initialize the session manager.

        Args:
            settlement_factory: Builds the settlement client from a key.
            storage: Session-restoration storage. Defaults to in-memory.
            network: Network and endpoint configuration. Defaults to
                the global settings.
            indexer_factory: Builds the token indexer client from a URL
                and optional API key.
        """
        self._settlement_factory = settlement_factory
        self._storage = storage if storage is not None else MemoryStorage()
        self._network = network if network is not None else get_settings().network
        self._indexer_factory = indexer_factory
        self._lock = asyncio.Lock()
        self._session: WalletSession | None = None
        self._listeners: list[ChangeListener] = []

    @property
    def network(self) -> NetworkConfig:
        return self._network

    @property
    def storage(self) -> BaseStorage:
        return self._storage

    # =========================================================================
    # Session Access
    # =========================================================================

    def current(self) -> WalletSession | None:
        """Return the in-memory session without any I/O."""
        return self._session

    def require_session(self) -> WalletSession:
        """Return the active session.

        Raises:
            NoActiveSession: If no wallet is initialized.
        """
        if self._session is None:
            raise NoActiveSession()
        return self._session

    async def has_stored_wallet(self) -> bool:
        """Check whether storage holds a restorable credential."""
        return await self._storage.has_item(PRIVATE_KEY_SLOT)

    async def addresses(self) -> WalletAddresses:
        """Addresses of the active session.

        Raises:
            NoActiveSession: If no wallet is initialized.
            AddressDerivationError: If an address cannot be produced.
        """
        return await self.require_session().addresses()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def initialize(self, config: WalletConfig | None = None) -> WalletSession:
        """Create a session and make it the active one.

        Args:
            config: Key source and endpoint overrides.

        Returns:
            The new active session.

        Raises:
            InvalidMnemonic: If a supplied seed phrase is invalid.
            DerivationError: If a supplied key is malformed or does not
                match the supplied seed phrase.
            WalletInitError: If client construction or persistence fails.
                The previous session, if any, stays active.
        """
        async with self._lock:
            session = await self._initialize_locked(config or WalletConfig())
        self._notify(session)
        return session

    async def current_or_restore(self) -> WalletSession | None:
        """Return the active session, restoring it from storage if needed.

        Failures are logged and reported as None rather than raised.
        """
        if self._session is not None:
            return self._session

        try:
            async with self._lock:
                if self._session is not None:
                    return self._session
                if not await self._storage.has_item(PRIVATE_KEY_SLOT):
                    return None
                session = await self._initialize_locked(WalletConfig(restore=True))
        except Exception as e:
            logger.error("Failed to restore wallet session: {}", e)
            return None

        self._notify(session)
        return session

    async def disconnect(self) -> None:
        """Drop the active session and erase the stored credential.

        Idempotent. The in-memory session is cleared and its clients are
        closed even when erasing storage fails.

        Raises:
            WalletStorageError: If the stored credential could not be erased.
        """
        erase_error: Exception | None = None
        async with self._lock:
            previous = self._session
            self._session = None
            try:
                await self._storage.remove_item(PRIVATE_KEY_SLOT)
                await self._storage.remove_item(MNEMONIC_SLOT)
            except (OSError, ValueError) as e:
                erase_error = e
            finally:
                if previous is not None:
                    await self._close_session(previous)

        if previous is not None:
            logger.info("Wallet disconnected")
        self._notify(None)

        if erase_error is not None:
            logger.error(
                "Failed to erase stored wallet credentials: {}",
                type(erase_error).__name__,
            )
            raise WalletStorageError("Failed to erase stored wallet credentials") from erase_error

    # =========================================================================
    # Change Notifications
    # =========================================================================

    def on_change(self, handler: ChangeListener) -> Callable[[], None]:
        """Register a listener called after initialize/restore/disconnect.

        Returns:
            A function that unregisters the listener.
        """
        self._listeners.append(handler)

        def unsubscribe() -> None:
            if handler in self._listeners:
                self._listeners.remove(handler)

        return unsubscribe

    def _notify(self, session: WalletSession | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(session)
            except Exception as e:
                # Listener errors are logged, never propagated
                logger.error("Wallet change listener failed: {}", e)

    # =========================================================================
    # Internals
    # =========================================================================

    async def _resolve_credentials(self, config: WalletConfig) -> tuple[CredentialPair, str]:
        if config.private_key:
            private_key = normalize_private_key(config.private_key)
            mnemonic = normalize_mnemonic(config.mnemonic) if config.mnemonic else None
            if mnemonic:
                derived = await asyncio.to_thread(mnemonic_to_private_key, mnemonic)
                if derived != private_key:
                    raise DerivationError("Seed phrase does not match the supplied private key")
            return CredentialPair(private_key=private_key, mnemonic=mnemonic), "explicit"

        if config.mnemonic:
            mnemonic = normalize_mnemonic(config.mnemonic)
            private_key = await asyncio.to_thread(mnemonic_to_private_key, mnemonic)
            return CredentialPair(private_key=private_key, mnemonic=mnemonic), "mnemonic"

        # Never resurrect a discarded identity when a new wallet was asked for
        if config.restore and not config.force_new:
            stored_key = await self._storage.get_item(PRIVATE_KEY_SLOT)
            if stored_key:
                stored_mnemonic = await self._storage.get_item(MNEMONIC_SLOT)
                return (
                    CredentialPair(
                        private_key=normalize_private_key(stored_key),
                        mnemonic=stored_mnemonic or None,
                    ),
                    "restored",
                )

        return await asyncio.to_thread(generate_credentials), "generated"

    async def _build_clients(
        self,
        credentials: CredentialPair,
        config: WalletConfig,
    ) -> tuple[BaseSettlementClient, TokenIndexerClient]:
        server_url = config.ark_server_url or self._network.ark_server_url
        indexer_url = config.token_indexer_url or self._network.resolved_indexer_url()
        api_key = config.api_key or self._network.indexer_api_key.get_secret_value() or None

        try:
            settlement = await self._settlement_factory(credentials.private_key, server_url)
        except Exception as e:
            logger.error(
                "Failed to create settlement client for {}: {}",
                server_url,
                type(e).__name__,
            )
            raise WalletInitError(f"Failed to connect to settlement server {server_url}") from e

        try:
            indexer = self._indexer_factory(indexer_url, api_key)
        except Exception as e:
            await settlement.close()
            raise WalletInitError(f"Failed to create token indexer client for {indexer_url}") from e

        return settlement, indexer

    async def _persist(self, credentials: CredentialPair) -> None:
        await self._storage.set_item(PRIVATE_KEY_SLOT, credentials.private_key)
        if credentials.mnemonic:
            await self._storage.set_item(MNEMONIC_SLOT, credentials.mnemonic)
        else:
            await self._storage.remove_item(MNEMONIC_SLOT)

    async def _initialize_locked(self, config: WalletConfig) -> WalletSession:
        credentials, source = await self._resolve_credentials(config)
        settlement, indexer = await self._build_clients(credentials, config)

        try:
            await self._persist(credentials)
        except (OSError, ValueError) as e:
            await settlement.close()
            await indexer.close()
            raise WalletInitError("Failed to persist wallet session") from e

        session = WalletSession(
            credentials=credentials,
            settlement=settlement,
            indexer=indexer,
            network=self._network,
            source=source,
        )

        previous = self._session
        self._session = session
        if previous is not None:
            await self._close_session(previous)

        logger.info(
            "Wallet session initialized ({} credentials, network={})",
            source,
            self._network.network,
        )
        return session

    async def _close_session(self, session: WalletSession) -> None:
        for name, handle in (("settlement", session.settlement), ("indexer", session.indexer)):
            try:
                await handle.close()
            except Exception as e:
                logger.warning("Failed to close {} client: {}", name, e)
