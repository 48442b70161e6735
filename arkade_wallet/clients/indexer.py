"""Token indexer client handle."""

from typing import Any

import aiohttp
from loguru import logger

from arkade_wallet.config import trim_trailing_slashes
from arkade_wallet.exceptions import ChainClientError


class TokenIndexerClient:
    """Thin HTTP handle for the token indexer service.

    The wallet core only builds this from a base URL and hands it to
    token logic; it never queries the indexer itself.

    Usage:
        indexer = TokenIndexerClient("https://arkvtxo.onrender.com")
        tokens = await indexer.get_json("/api/tokens")
        await indexer.close()
    """

    DEFAULT_TIMEOUT: float = 30.0

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the indexer client.

        Args:
            base_url: Indexer root URL. Trailing slashes are ignored.
            api_key: Optional API key sent as ``x-api-key``.
            timeout: Request timeout in seconds.
        """
        if not base_url.strip():
            raise ValueError("Indexer base URL is required")
        self._base_url = trim_trailing_slashes(base_url.strip())
        self._api_key = api_key or None
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, path: str) -> str:
        """Join an API path onto the base URL."""
        return f"{self._base_url}/{path.lstrip('/')}"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["x-api-key"] = self._api_key
        return headers

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers=self._headers(),
            )
        return self._session

    async def get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET a JSON document from the indexer.

        Raises:
            ChainClientError: On non-200 responses or transport errors.
        """
        session = await self._ensure_session()
        url = self.url_for(path)
        try:
            async with session.get(url, params=params) as response:
                if response.status != 200:
                    text = await response.text()
                    raise ChainClientError(
                        f"Indexer error {response.status}: {text[:200]}",
                        status_code=response.status,
                    )
                return await response.json(content_type=None)
        except aiohttp.ClientError as e:
            logger.warning("Indexer request to {} failed: {}", url, e)
            raise ChainClientError(f"Connection error: {e}") from e

    async def close(self) -> None:
        """Close the HTTP session; it is re-opened on next use."""
        if self._session is not None:
            await self._session.close()
            self._session = None
