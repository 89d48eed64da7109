"""
Deployment Engine
Runs the deployment procedure: resolve factory, send, await, read address
"""

from typing import Callable, Dict, Optional, Sequence
from web3 import Web3
from loguru import logger

from blockchain.artifact_loader import ArtifactLoader
from blockchain.contract_factory import ContractFactory
from blockchain.transaction_builder import TransactionBuilder
from utils.exceptions import DeploymentCancelledError, InsufficientFundsError
from utils.gas_calculator import GasCalculator

from .models import DeploymentResult


class DeploymentEngine:
    """
    One-shot contract deployment

    Each call to deploy() sends at most one creation transaction. There is
    no retry: a failed or timed-out deployment raises and the caller decides.
    """

    def __init__(
        self,
        w3: Web3,
        wallet_manager,
        artifact_loader: ArtifactLoader,
        settings: Dict,
        network: Dict,
        confirm_prompt: Callable[[str], str] = input
    ):
        """
        Initialize Deployment Engine

        Args:
            w3: Connected Web3 instance
            wallet_manager: Deployer wallet
            artifact_loader: Compiled artifact source
            settings: Deployment settings from NetworkConfig
            network: Resolved network dict
            confirm_prompt: Prompt used by confirm=True deployments
        """
        self.w3 = w3
        self.wallet_manager = wallet_manager
        self.artifact_loader = artifact_loader
        self.settings = settings
        self.network = network
        self.confirm_prompt = confirm_prompt

        self.gas_calculator = GasCalculator(w3, settings, legacy_gas=network.get('legacy_gas', False))
        self.tx_builder = TransactionBuilder(w3, self.gas_calculator)

    def get_contract_factory(self, contract_name: str) -> ContractFactory:
        """
        Resolve a compiled contract into a factory

        Args:
            contract_name: Bare or fully-qualified contract name

        Returns:
            ContractFactory for the artifact
        """
        artifact = self.artifact_loader.load(contract_name)
        return ContractFactory(self.w3, artifact, self.wallet_manager, self.tx_builder)

    async def deploy(
        self,
        contract_name: str,
        constructor_args: Sequence = (),
        confirm: bool = False,
        dry_run: bool = False,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
        confirmations: Optional[int] = None
    ) -> DeploymentResult:
        """
        Deploy a contract and wait for it to exist on chain

        Args:
            contract_name: Contract to deploy
            constructor_args: Constructor arguments
            confirm: Ask the operator before sending
            dry_run: Build and price the transaction without sending it
            timeout: Receipt wait in seconds (None = settings, 0 = no limit)
            poll_interval: Seconds between receipt polls (None = settings)
            confirmations: Blocks to wait for (None = settings)

        Returns:
            DeploymentResult
        """
        if timeout is None:
            timeout = self.settings['receipt_timeout_seconds']
        if poll_interval is None:
            poll_interval = self.settings['poll_interval_seconds']
        if confirmations is None:
            confirmations = self.settings['confirmations']

        factory = self.get_contract_factory(contract_name)
        transaction = factory.build_transaction(*constructor_args)

        estimated_cost = self._check_balance(transaction)

        if dry_run:
            logger.info("Dry run - deployment transaction not sent")
            return DeploymentResult(
                contract_name=factory.contract_name,
                network=self.network['key'],
                deployer=self.wallet_manager.address,
                status="dry_run",
                estimated_cost_wei=estimated_cost
            )

        if confirm:
            answer = self.confirm_prompt("\nProceed with deployment? (yes/no): ")
            if answer.strip().lower() != 'yes':
                raise DeploymentCancelledError("Deployment cancelled")

        deployed = await factory.deploy(transaction=transaction)
        receipt = await deployed.wait_for_deployment(
            timeout=timeout,
            poll_interval=poll_interval,
            confirmations=confirmations
        )

        return DeploymentResult(
            contract_name=factory.contract_name,
            network=self.network['key'],
            deployer=self.wallet_manager.address,
            address=deployed.get_address(),
            tx_hash=deployed.deployment_transaction_hash,
            block_number=receipt.get('blockNumber'),
            gas_used=receipt.get('gasUsed'),
            effective_gas_price=receipt.get('effectiveGasPrice'),
            estimated_cost_wei=estimated_cost
        )

    def _check_balance(self, transaction: Dict) -> int:
        """Ensure the deployer can pay for the transaction; returns the estimated cost"""
        currency = self.network.get('currency', 'ETH')

        balance = self.wallet_manager.get_balance()
        estimated_cost = GasCalculator.estimate_cost_wei(transaction)

        logger.info(f"Account balance: {Web3.from_wei(balance, 'ether')} {currency}")
        logger.info(f"Estimated deployment cost: {Web3.from_wei(estimated_cost, 'ether')} {currency}")

        if balance < estimated_cost:
            raise InsufficientFundsError(
                f"Insufficient balance for deployment: have {Web3.from_wei(balance, 'ether')} {currency}, "
                f"need up to {Web3.from_wei(estimated_cost, 'ether')} {currency}"
            )

        return estimated_cost
