"""
Filecoin Network Configuration
Centralized configuration for RPC endpoints, explorer URLs and key derivation
"""

import os
from typing import Dict, List

from filecoin_chain.exceptions import UnsupportedNetworkError

FIL_DECIMALS = 18


class NetworkConfig:
    """Network configuration for endpoints, explorers and address formats"""

    FILECOIN_MAINNET = "filecoin:mainnet"
    FILECOIN_CALIBRATION = "filecoin:calibration"

    TESTNETS = {FILECOIN_CALIBRATION}

    # Public Lotus JSON-RPC endpoints, tried in this order
    RPC_URLS: Dict[str, List[str]] = {
        "filecoin:mainnet": [
            "https://api.node.glif.io/rpc/v1",
            "https://filecoin.chainup.net/rpc/v1",
            "https://rpc.ankr.com/filecoin",
            "https://filfox.info/rpc/v1",
        ],
        "filecoin:calibration": [
            "https://api.calibration.node.glif.io/rpc/v1",
            "https://filecoin-calibration.chainup.net/rpc/v1",
            "https://rpc.ankr.com/filecoin_testnet",
        ],
    }

    # Block explorer web UI (message links)
    EXPLORER_URLS: Dict[str, str] = {
        "filecoin:mainnet": "https://filscan.io",
        "filecoin:calibration": "https://calibration.filscan.io",
    }

    # Block explorer REST API
    FILSCAN_API_URLS: Dict[str, str] = {
        "filecoin:mainnet": "https://api-v2.filscan.io/api/v1",
        "filecoin:calibration": "https://api-calibration.filscan.io/api/v1",
    }

    # BIP-44 paths: coin type 1 on test networks, 461 on mainnet
    DERIVATION_PATHS: Dict[str, str] = {
        "filecoin:mainnet": "m/44'/461'/0'/0/0",
        "filecoin:calibration": "m/44'/1'/0'/0/0",
    }

    DEFAULT_RPC_TIMEOUT = 30.0

    @classmethod
    def _check_network(cls, network: str) -> str:
        if network not in cls.RPC_URLS:
            raise UnsupportedNetworkError(f"Unsupported network: {network}")
        return network

    @classmethod
    def is_testnet(cls, network: str) -> bool:
        return cls._check_network(network) in cls.TESTNETS

    @classmethod
    def get_rpc_urls(cls, network: str) -> List[str]:
        """Get the ordered RPC endpoint pool for a network.

        ``FILECOIN_RPC_URLS`` (comma separated) replaces the built-in list.

        Args:
            network: Network identifier (e.g., "filecoin:calibration")

        Returns:
            List of endpoint URLs, in failover order

        Raises:
            UnsupportedNetworkError: If network is not supported
        """
        cls._check_network(network)
        override = os.getenv("FILECOIN_RPC_URLS")
        if override:
            return [url.strip() for url in override.split(",") if url.strip()]
        return list(cls.RPC_URLS[network])

    @classmethod
    def get_rpc_token(cls) -> str | None:
        return os.getenv("FILECOIN_RPC_TOKEN") or None

    @classmethod
    def get_rpc_timeout(cls) -> float:
        raw = os.getenv("FILECOIN_RPC_TIMEOUT")
        if not raw:
            return cls.DEFAULT_RPC_TIMEOUT
        try:
            return float(raw)
        except ValueError:
            return cls.DEFAULT_RPC_TIMEOUT

    @classmethod
    def get_explorer_url(cls, network: str) -> str:
        """Get block explorer base URL used for message links"""
        cls._check_network(network)
        return (os.getenv("FILECOIN_SCAN_URL") or cls.EXPLORER_URLS[network]).rstrip("/")

    @classmethod
    def get_filscan_api_url(cls, network: str) -> str:
        """Get explorer REST API base URL"""
        cls._check_network(network)
        return (os.getenv("FILSCAN_API_URL") or cls.FILSCAN_API_URLS[network]).rstrip("/")

    @classmethod
    def get_derivation_path(cls, network: str) -> str:
        return cls.DERIVATION_PATHS[cls._check_network(network)]

    @classmethod
    def get_address_prefix(cls, network: str) -> str:
        """Get address network prefix: "t" on test networks, "f" on mainnet"""
        return "t" if cls.is_testnet(network) else "f"
