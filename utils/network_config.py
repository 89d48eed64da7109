"""
Network Configuration
Resolves named networks to RPC endpoints and opens Web3 connections
"""

import os
import json
from typing import Dict, Optional
from web3 import Web3
from loguru import logger
from dotenv import load_dotenv

from utils.exceptions import ConfigurationError, NetworkConnectionError

load_dotenv()

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "config", "networks.json"
)


class NetworkConfig:
    """
    Named network registry

    RPC URL resolution order:
    1. RPC_URL environment variable (overrides every network)
    2. Environment variable named by the network's rpc_url_env
    3. The network's literal rpc_url
    """

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        """
        Load network configuration

        Args:
            config_path: Path to networks JSON file
        """
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Network config not found: {config_path}")

        try:
            with open(config_path, 'r') as f:
                self.config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid network config {config_path}: {e}") from e

        self.networks = self.config.get('networks', {})
        self.deployment_settings = self.config.get('deployment', {})

        if not self.networks:
            raise ConfigurationError(f"No networks defined in {config_path}")

        logger.debug(f"Loaded {len(self.networks)} networks from {config_path}")

    def resolve_network_name(self, name: Optional[str] = None) -> str:
        """Pick the network: explicit name, then DEPLOY_NETWORK, then config default"""
        network_name = name or os.getenv('DEPLOY_NETWORK') or self.config.get('default_network')

        if not network_name:
            raise ConfigurationError("No network selected and no default_network configured")

        if network_name not in self.networks:
            known = ', '.join(sorted(self.networks))
            raise ConfigurationError(f"Unknown network '{network_name}' (known: {known})")

        return network_name

    def get_network(self, name: Optional[str] = None) -> Dict:
        """
        Get resolved settings for a network

        Args:
            name: Network key (None = DEPLOY_NETWORK or default)

        Returns:
            Network dict with key, name, rpc_url, chain_id, legacy_gas
        """
        network_name = self.resolve_network_name(name)
        network = self.networks[network_name]

        rpc_url = os.getenv('RPC_URL')

        if not rpc_url and network.get('rpc_url_env'):
            rpc_url = os.getenv(network['rpc_url_env'])

        if not rpc_url:
            rpc_url = network.get('rpc_url')

        if not rpc_url:
            env_hint = network.get('rpc_url_env', 'RPC_URL')
            raise ConfigurationError(f"No RPC URL for network '{network_name}' - set {env_hint}")

        return {
            'key': network_name,
            'name': network.get('name', network_name),
            'rpc_url': rpc_url,
            'chain_id': network.get('chain_id'),
            'legacy_gas': network.get('legacy_gas', False),
            'currency': network.get('currency', 'ETH')
        }

    def get_deployment_settings(self) -> Dict:
        """Deployment defaults (gas buffer, fee caps, receipt wait)"""
        settings = {
            'gas_limit_buffer': 1.2,
            'fallback_gas_limit': 3000000,
            'max_gas_price_gwei': None,
            'priority_fee_gwei': 1,
            'receipt_timeout_seconds': 300,
            'poll_interval_seconds': 2,
            'confirmations': 1
        }
        settings.update(self.deployment_settings)
        return settings

    def connect(self, network: Dict) -> Web3:
        """
        Open a Web3 connection and verify the chain

        Args:
            network: Resolved network dict from get_network()

        Returns:
            Connected Web3 instance
        """
        w3 = Web3(Web3.HTTPProvider(network['rpc_url']))

        if not w3.is_connected():
            raise NetworkConnectionError(f"Failed to connect to {network['name']}")

        verify_chain_id(w3, network)

        logger.success(f"Connected to {network['name']} (chain {w3.eth.chain_id})")
        return w3


def verify_chain_id(w3: Web3, network: Dict):
    """Refuse to continue when the node serves a different chain than configured"""
    expected = network.get('chain_id')

    if expected is None:
        return

    actual = w3.eth.chain_id

    if actual != expected:
        raise NetworkConnectionError(
            f"Chain ID mismatch for {network['name']}: expected {expected}, node reports {actual}"
        )
