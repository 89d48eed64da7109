"""
Smart Contract Deployment Script
Deploys the RoyaltyDistribution contract and prints its address
"""

import os
import re
import sys
import json
import asyncio
import argparse
from typing import List, Optional
from loguru import logger
from dotenv import load_dotenv

from blockchain.artifact_loader import ArtifactLoader
from deployer.deployment_engine import DeploymentEngine
from deployer.models import DeploymentResult
from deployer.wallet_manager import WalletManager
from utils.exceptions import ConfigurationError, DeploymentError
from utils.logging_config import configure_logging
from utils.network_config import DEFAULT_CONFIG_PATH, NetworkConfig

load_dotenv()

DEFAULT_CONTRACT = "RoyaltyDistribution"


class DeployArgumentParser(argparse.ArgumentParser):
    """Usage errors exit 1 like any other failed deployment"""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = DeployArgumentParser(description='Deploy the Automated Royalty Distribution System')
    parser.add_argument('--network', help='Network name from the config (default: DEPLOY_NETWORK or config default)')
    parser.add_argument('--contract', default=DEFAULT_CONTRACT, help='Contract name or <source>:<name>')
    parser.add_argument('--args', dest='constructor_args', default='[]', help='Constructor arguments as a JSON array')
    parser.add_argument('--artifacts-dir', default='artifacts', help='Compiled artifacts directory')
    parser.add_argument('--config', default=DEFAULT_CONFIG_PATH, help='Network configuration file')
    parser.add_argument('--timeout', type=float, help='Seconds to wait for confirmation (0 = no limit)')
    parser.add_argument('--confirmations', type=int, help='Blocks to wait for after inclusion')
    parser.add_argument('--confirm', action='store_true', help='Ask before sending the transaction')
    parser.add_argument('--dry-run', action='store_true', help='Build and price the transaction without sending it')
    parser.add_argument('--env-file', help='Record the deployed address in this .env file')
    parser.add_argument('--log-level', default=os.getenv('DEPLOY_LOG_LEVEL', 'INFO'), help='Console log level')
    parser.add_argument('--log-file', default=os.getenv('DEPLOY_LOG_FILE'), help='Write a DEBUG log to this file')
    return parser.parse_args(argv)


def parse_constructor_args(raw: str) -> list:
    """Decode --args; constructor arguments must be a JSON array"""
    try:
        constructor_args = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"--args is not valid JSON: {e}") from e

    if not isinstance(constructor_args, list):
        raise ConfigurationError("--args must be a JSON array")

    return constructor_args


async def deploy_contract(args: argparse.Namespace) -> DeploymentResult:
    """Deploy the requested contract"""
    logger.info("Deploying Automated Royalty Distribution System...")

    constructor_args = parse_constructor_args(args.constructor_args)

    network_config = NetworkConfig(args.config)
    network = network_config.get_network(args.network)
    settings = network_config.get_deployment_settings()

    w3 = network_config.connect(network)
    wallet_manager = WalletManager(w3)

    engine = DeploymentEngine(
        w3,
        wallet_manager,
        ArtifactLoader(args.artifacts_dir),
        settings,
        network
    )

    return await engine.deploy(
        args.contract,
        constructor_args,
        confirm=args.confirm,
        dry_run=args.dry_run,
        timeout=args.timeout,
        confirmations=args.confirmations
    )


def env_key_for(contract_name: str) -> str:
    """RoyaltyDistribution -> ROYALTY_DISTRIBUTION_ADDRESS"""
    snake = re.sub(r'(?<=[a-z0-9])([A-Z])', r'_\1', contract_name)
    return f"{snake.upper()}_ADDRESS"


def update_env_file(env_path: str, key: str, contract_address: str):
    """Update .env file with contract address"""
    try:
        lines = []
        if os.path.exists(env_path):
            with open(env_path, 'r', encoding='utf-8') as f:
                lines = f.readlines()

        # Update or add the key
        found = False
        for i, line in enumerate(lines):
            if line.startswith(f'{key}='):
                lines[i] = f'{key}={contract_address}\n'
                found = True
                break

        if not found:
            if lines and not lines[-1].endswith('\n'):
                lines[-1] += '\n'
            lines.append(f'{key}={contract_address}\n')

        with open(env_path, 'w', encoding='utf-8') as f:
            f.writelines(lines)

        logger.success(f"Updated {env_path} with {key}")

    except (OSError, UnicodeError) as e:
        logger.error(f"Error updating {env_path}: {e}")


async def main(argv: Optional[List[str]] = None) -> int:
    """
    Run one deployment

    Returns:
        Process exit code (0 success, 1 any failure)
    """
    args = parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    try:
        result = await deploy_contract(args)
    except DeploymentError as e:
        logger.error(f"Deployment failed: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Deployment failed: {e}")
        return 1

    if result.status == "dry_run":
        logger.success(f"Dry run complete for {result.contract_name} on {result.network}")
        return 0

    print(f"{result.contract_name} deployed to: {result.address}")

    logger.success("Contract deployed successfully!")
    logger.success(f"Transaction hash: {result.tx_hash}")

    if args.env_file:
        update_env_file(args.env_file, env_key_for(result.contract_name), result.address)

    return 0


def run():
    """Console entry point"""
    try:
        exit_code = asyncio.run(main())
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    run()
