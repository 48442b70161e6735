"""Balance aggregation across the three address classes of a wallet."""

import asyncio
from collections.abc import Awaitable

from loguru import logger

from arkade_wallet.addresses import segwit_address, taproot_address
from arkade_wallet.config import get_settings
from arkade_wallet.exceptions import BalanceFetchError, NoActiveSession
from arkade_wallet.interfaces.chain import BaseChainClient
from arkade_wallet.models import AddressKind, BalanceSummary, TokenCreationCheck
from arkade_wallet.session import WalletSession, WalletSessionManager


class BalanceAggregator:
    """Reads spendable balances for the active wallet.

    The Arkade balance comes straight from the settlement client's
    ``available`` figure. SegWit and Taproot balances are the sum of the
    UTXO values at each address. All amounts are integer sats.

    Example:
        aggregator = BalanceAggregator(manager, EsploraClient())
        summary = await aggregator.get_all_balances()
        check = await aggregator.can_create_token()
    """

    def __init__(
        self,
        sessions: WalletSessionManager,
        chain_client: BaseChainClient,
        min_segwit_sats: int | None = None,
        min_arkade_sats: int | None = None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            sessions: Session manager providing the active wallet.
            chain_client: On-chain UTXO source.
            min_segwit_sats: SegWit balance needed to create a token.
                Defaults to the configured value.
            min_arkade_sats: Arkade balance needed to create a token.
                Defaults to the configured value.
        """
        self._sessions = sessions
        self._chain = chain_client
        if min_segwit_sats is None or min_arkade_sats is None:
            balance_config = get_settings().balance
            if min_segwit_sats is None:
                min_segwit_sats = balance_config.min_segwit_sats
            if min_arkade_sats is None:
                min_arkade_sats = balance_config.min_arkade_sats
        self._min_segwit_sats = min_segwit_sats
        self._min_arkade_sats = min_arkade_sats

    async def _arkade_balance(self, session: WalletSession) -> int:
        balance = await session.settlement.get_balance()
        return balance.available

    async def _segwit_balance(self, session: WalletSession) -> int:
        address = segwit_address(session.private_key, session.network.bech32_hrp)
        return await self._chain.get_balance(address)

    async def _taproot_balance(self, session: WalletSession) -> int:
        address = taproot_address(session.private_key, session.network.bech32_hrp)
        return await self._chain.get_balance(address)

    def _query(self, kind: AddressKind, session: WalletSession) -> Awaitable[int]:
        if kind is AddressKind.ARKADE:
            return self._arkade_balance(session)
        if kind is AddressKind.SEGWIT:
            return self._segwit_balance(session)
        return self._taproot_balance(session)

    async def get_address_balance(self, kind: AddressKind | str) -> int:
        """Balance of a single address class, in sats.

        Use this when partial data is acceptable; each call fails or
        succeeds on its own.

        Raises:
            NoActiveSession: If no wallet is initialized.
            BalanceFetchError: If the query fails.
        """
        kind = AddressKind(kind)
        session = self._sessions.require_session()
        try:
            return await self._query(kind, session)
        except Exception as e:
            logger.warning("Failed to fetch {} balance: {}", kind.value, e)
            raise BalanceFetchError(f"Failed to fetch {kind.value} balance", source=kind.value) from e

    async def get_all_balances(self) -> BalanceSummary:
        """Fetch all three balances concurrently and sum them.

        Fails as a whole if any single query fails; the outstanding
        queries are cancelled and no partial total is returned.

        Raises:
            NoActiveSession: If no wallet is initialized.
            BalanceFetchError: If any balance query fails.
        """
        session = self._sessions.require_session()
        kinds = list(AddressKind)
        tasks = {
            asyncio.ensure_future(self._query(kind, session)): kind for kind in kinds
        }

        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            raise

        results: dict[AddressKind, int] = {}
        failures: list[tuple[AddressKind, BaseException]] = []
        for task in done:
            kind = tasks[task]
            error = task.exception()
            if error is not None:
                failures.append((kind, error))
            else:
                results[kind] = task.result()

        if failures:
            kind, error = min(failures, key=lambda item: kinds.index(item[0]))
            logger.warning("Failed to fetch {} balance: {}", kind.value, error)
            raise BalanceFetchError(
                f"Failed to fetch {kind.value} balance", source=kind.value
            ) from error

        summary = BalanceSummary.from_parts(
            arkade=results[AddressKind.ARKADE],
            segwit=results[AddressKind.SEGWIT],
            taproot=results[AddressKind.TAPROOT],
        )
        logger.debug("Fetched balances, total {} sats", summary.total)
        return summary

    async def can_create_token(self) -> TokenCreationCheck:
        """Check the balances needed to create a token.

        A missing wallet is reported with ``session_active=False`` rather
        than as insufficient funds.

        Raises:
            BalanceFetchError: If any balance query fails.
        """
        try:
            balances = await self.get_all_balances()
        except NoActiveSession as e:
            return TokenCreationCheck(
                can_create=False,
                session_active=False,
                errors=[str(e)],
            )

        errors: list[str] = []

        if balances.segwit < self._min_segwit_sats:
            shortfall = self._min_segwit_sats - balances.segwit
            errors.append(
                f"Insufficient SegWit balance. Need {self._min_segwit_sats} sats, "
                f"have {balances.segwit} sats (short {shortfall} sats). "
                "Fund your SegWit address (bc1q...) to create tokens."
            )

        if balances.arkade < self._min_arkade_sats:
            shortfall = self._min_arkade_sats - balances.arkade
            errors.append(
                f"Insufficient Arkade balance. Need {self._min_arkade_sats} sats, "
                f"have {balances.arkade} sats (short {shortfall} sats)."
            )

        return TokenCreationCheck(
            can_create=not errors,
            session_active=True,
            segwit_balance=balances.segwit,
            arkade_balance=balances.arkade,
            errors=errors,
        )
