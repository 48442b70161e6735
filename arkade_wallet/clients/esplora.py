"""Esplora REST client for on-chain UTXO lookups."""

import asyncio
from typing import Any

import aiohttp
from loguru import logger

from arkade_wallet.addresses import MAINNET_HRP, segwit_address
from arkade_wallet.exceptions import ChainClientError, ChainRateLimitError, ChainServerError
from arkade_wallet.interfaces.chain import BaseChainClient
from arkade_wallet.models import Utxo


class EsploraClient(BaseChainClient):
    """Async HTTP client for an Esplora-compatible API (mempool.space, mutinynet).

    Features:
    - Lazily created aiohttp session (or async context manager)
    - Exponential backoff on 429, 5xx and connection errors
    - Typed ChainClientError hierarchy instead of raw transport errors

    Usage:
        async with EsploraClient("https://mempool.space/api") as client:
            utxos = await client.get_utxos("bc1q...")
    """

    DEFAULT_URL = "https://mempool.space/api"

    # Backoff Configuration
    INITIAL_BACKOFF: float = 1.0
    MAX_BACKOFF: float = 30.0
    BACKOFF_MULTIPLIER: float = 2.0
    MAX_RETRIES: int = 3

    # Timeouts
    DEFAULT_TIMEOUT: float = 15.0

    def __init__(
        self,
        base_url: str = DEFAULT_URL,
        hrp: str = MAINNET_HRP,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = MAX_RETRIES,
    ) -> None:
        """Initialize the Esplora client.

        Args:
            base_url: API root, e.g. https://mempool.space/api.
            hrp: Bech32 prefix used when deriving addresses from keys.
            timeout: Request timeout in seconds.
            max_retries: Maximum attempts for transient errors.
        """
        self._base_url = base_url.rstrip("/")
        self._hrp = hrp
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._max_retries = max_retries
        self._session: aiohttp.ClientSession | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> "EsploraClient":
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session exists, creating if needed."""
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    def _calculate_backoff(self, attempt: int) -> float:
        """Calculate exponential backoff delay."""
        return min(
            self.INITIAL_BACKOFF * (self.BACKOFF_MULTIPLIER**attempt),
            self.MAX_BACKOFF,
        )

    def _retry_after(self, header: str | None, attempt: int) -> float:
        """Seconds from a Retry-After header, or the backoff delay.

        HTTP-date and other non-numeric values fall back to backoff.
        """
        if header:
            try:
                seconds = float(header)
            except ValueError:
                seconds = -1.0
            if seconds >= 0:
                return min(seconds, self.MAX_BACKOFF)
        return self._calculate_backoff(attempt)

    async def _get_json(self, path: str) -> Any:
        """GET a JSON document with exponential backoff retry.

        Args:
            path: Path relative to the API root.

        Returns:
            Parsed JSON response.

        Raises:
            ChainRateLimitError: If rate limited after all retries.
            ChainServerError: If server error after all retries.
            ChainClientError: For other API errors.
        """
        session = await self._ensure_session()
        url = f"{self._base_url}{path}"
        last_exception: ChainClientError | None = None

        for attempt in range(self._max_retries):
            try:
                async with session.get(url) as response:
                    if response.status == 200:
                        return await response.json(content_type=None)

                    elif response.status == 429:
                        retry_seconds = self._retry_after(
                            response.headers.get("Retry-After"), attempt
                        )
                        logger.warning(
                            "Esplora rate limited (429), retry {} after {:.1f}s",
                            attempt + 1,
                            retry_seconds,
                        )
                        last_exception = ChainRateLimitError(retry_after=retry_seconds)
                        await asyncio.sleep(retry_seconds)

                    elif response.status >= 500:
                        backoff = self._calculate_backoff(attempt)
                        logger.warning(
                            "Esplora server error ({}), retry {} after {:.1f}s",
                            response.status,
                            attempt + 1,
                            backoff,
                        )
                        last_exception = ChainServerError(
                            message=f"Server returned {response.status}",
                            status_code=response.status,
                        )
                        await asyncio.sleep(backoff)

                    else:
                        # Client error - don't retry
                        text = await response.text()
                        raise ChainClientError(
                            f"Esplora error {response.status}: {text[:200]}",
                            status_code=response.status,
                        )

            except aiohttp.ClientError as e:
                backoff = self._calculate_backoff(attempt)
                logger.warning(
                    "Esplora connection error: {}, retry {} after {:.1f}s",
                    str(e),
                    attempt + 1,
                    backoff,
                )
                last_exception = ChainClientError(f"Connection error: {e}")
                await asyncio.sleep(backoff)

            except asyncio.TimeoutError:
                backoff = self._calculate_backoff(attempt)
                logger.warning(
                    "Esplora request timeout, retry {} after {:.1f}s",
                    attempt + 1,
                    backoff,
                )
                last_exception = ChainClientError("Request timeout")
                await asyncio.sleep(backoff)

        if last_exception is not None:
            raise last_exception
        raise ChainClientError("Unknown error after retries")

    async def create_address_from_hex(self, private_key: str) -> str:
        return segwit_address(private_key, self._hrp)

    async def get_utxos(self, address: str) -> list[Utxo]:
        """Fetch unspent outputs for an address.

        Args:
            address: Bech32 address to look up.

        Returns:
            List of Utxo (confirmed and mempool).

        Raises:
            ChainClientError: On API errors or an unexpected response shape.
        """
        data = await self._get_json(f"/address/{address}/utxo")
        if not isinstance(data, list):
            raise ChainClientError("Unexpected UTXO response shape")

        utxos: list[Utxo] = []
        for entry in data:
            try:
                utxos.append(
                    Utxo(
                        txid=entry["txid"],
                        vout=entry["vout"],
                        value=entry["value"],
                        confirmed=bool(entry.get("status", {}).get("confirmed", False)),
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                raise ChainClientError("Malformed UTXO entry") from e

        logger.debug("Fetched {} UTXOs for {}...{}", len(utxos), address[:8], address[-4:])
        return utxos

    async def get_transaction(self, txid: str) -> dict[str, Any]:
        """Fetch raw transaction details.

        Returns:
            Dict with ``txid``, ``confirmations`` (block height when
            confirmed, else 0) and ``vout`` (value, script hex and type).
        """
        tx = await self._get_json(f"/tx/{txid}")
        status = tx.get("status") or {}
        return {
            "txid": tx["txid"],
            "confirmations": status.get("block_height", 0) if status.get("confirmed") else 0,
            "vout": [
                {
                    "value": out["value"],
                    "script_pubkey": out.get("scriptpubkey", ""),
                    "type": out.get("scriptpubkey_type", ""),
                }
                for out in tx.get("vout", [])
            ],
        }
