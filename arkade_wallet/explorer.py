"""Block explorer links for transactions and addresses."""

from arkade_wallet.config import NetworkConfig, get_settings


def _config(network: NetworkConfig | None) -> NetworkConfig:
    return network if network is not None else get_settings().network


def tx_url(txid: str, network: NetworkConfig | None = None) -> str:
    return f"{_config(network).explorer_url}/tx/{txid}"


def address_url(address: str, network: NetworkConfig | None = None) -> str:
    return f"{_config(network).explorer_url}/address/{address}"


def network_name(network: NetworkConfig | None = None) -> str:
    """Human-readable network label."""
    if _config(network).network == "mainnet":
        return "Bitcoin Mainnet"
    return "Bitcoin Testnet"
