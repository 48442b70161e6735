"""HTTP clients for Esplora and the token indexer."""

from arkade_wallet.clients.esplora import EsploraClient
from arkade_wallet.clients.indexer import TokenIndexerClient

__all__ = ["EsploraClient", "TokenIndexerClient"]
