"""
Contract Factory
Deploys a compiled contract and tracks the creation transaction
"""

import time
import asyncio
from typing import Dict, Optional
from web3 import Web3
from web3.exceptions import TransactionNotFound
from loguru import logger

from utils.exceptions import (
    DeploymentError,
    DeploymentRejectedError,
    DeploymentTimeoutError,
)


class ContractFactory:
    """
    Creates instances of one compiled contract
    """

    def __init__(self, w3: Web3, artifact: Dict, wallet_manager, transaction_builder):
        """
        Initialize Contract Factory

        Args:
            w3: Web3 instance
            artifact: Loaded artifact (abi, bytecode, contract_name)
            wallet_manager: Signs and sends for the deployer
            transaction_builder: Builds the creation transaction
        """
        self.w3 = w3
        self.artifact = artifact
        self.contract_name = artifact['contract_name']
        self.abi = artifact['abi']
        self.wallet_manager = wallet_manager
        self.transaction_builder = transaction_builder

        self.contract_class = w3.eth.contract(abi=artifact['abi'], bytecode=artifact['bytecode'])

    def build_transaction(self, *constructor_args) -> Dict:
        """Unsigned creation transaction for the given constructor arguments"""
        return self.transaction_builder.build_deployment_tx(
            self.contract_class,
            self.wallet_manager.address,
            constructor_args
        )

    async def deploy(self, *constructor_args, transaction: Optional[Dict] = None) -> "DeployedContract":
        """
        Send the creation transaction (exactly once)

        Args:
            constructor_args: Constructor arguments
            transaction: Pre-built transaction (skips building)

        Returns:
            DeployedContract awaiting confirmation
        """
        if transaction is None:
            transaction = self.build_transaction(*constructor_args)

        tx_hash = self.wallet_manager.send_transaction(transaction)
        logger.info(f"Transaction sent: {Web3.to_hex(tx_hash)}")

        return DeployedContract(self.w3, self.contract_name, self.abi, tx_hash)


class DeployedContract:
    """
    A contract whose creation transaction has been broadcast
    """

    def __init__(self, w3: Web3, contract_name: str, abi: list, deployment_tx_hash: bytes):
        self.w3 = w3
        self.contract_name = contract_name
        self.abi = abi
        self.deployment_tx_hash = deployment_tx_hash

        self.address = None
        self.receipt = None

    @property
    def deployment_transaction_hash(self) -> str:
        return Web3.to_hex(self.deployment_tx_hash)

    async def wait_for_deployment(
        self,
        timeout: Optional[float] = 300,
        poll_interval: float = 2,
        confirmations: int = 1
    ):
        """
        Wait until the contract exists on chain

        Args:
            timeout: Seconds to wait in total (None or 0 = no limit)
            poll_interval: Seconds between receipt polls
            confirmations: Blocks that must include the creation (>= 1)

        Returns:
            Transaction receipt
        """
        start_time = time.monotonic()
        tx_hash = self.deployment_transaction_hash

        logger.info("Waiting for confirmation...")
        receipt = await self._wait_for_receipt(start_time, timeout, poll_interval)

        if receipt['status'] != 1:
            raise DeploymentRejectedError(
                f"Deployment transaction {tx_hash} reverted", tx_hash=tx_hash
            )

        contract_address = receipt.get('contractAddress')

        if not contract_address:
            raise DeploymentRejectedError(
                f"Transaction {tx_hash} did not create a contract", tx_hash=tx_hash
            )

        if confirmations > 1:
            await self._wait_for_confirmations(
                receipt['blockNumber'], confirmations, start_time, timeout, poll_interval
            )

        if not self.w3.eth.get_code(contract_address):
            raise DeploymentRejectedError(
                f"No contract code at {contract_address} after transaction {tx_hash}",
                tx_hash=tx_hash
            )

        self.address = Web3.to_checksum_address(contract_address)
        self.receipt = receipt

        logger.success(f"Gas used: {receipt['gasUsed']}")
        return receipt

    async def _wait_for_receipt(self, start_time: float, timeout: Optional[float], poll_interval: float):
        while True:
            try:
                return self.w3.eth.get_transaction_receipt(self.deployment_tx_hash)
            except TransactionNotFound:
                pass

            self._check_timeout(start_time, timeout)
            await asyncio.sleep(poll_interval)

    async def _wait_for_confirmations(
        self,
        receipt_block: int,
        confirmations: int,
        start_time: float,
        timeout: Optional[float],
        poll_interval: float
    ):
        while self.w3.eth.block_number - receipt_block + 1 < confirmations:
            self._check_timeout(start_time, timeout)
            await asyncio.sleep(poll_interval)

        logger.debug(f"{confirmations} confirmations reached")

    def _check_timeout(self, start_time: float, timeout: Optional[float]):
        if timeout and time.monotonic() - start_time >= timeout:
            tx_hash = self.deployment_transaction_hash
            raise DeploymentTimeoutError(
                f"Deployment transaction {tx_hash} not confirmed after {timeout}s "
                f"(it may still be mined)",
                tx_hash=tx_hash
            )

    def get_address(self) -> str:
        """Checksummed address of the deployed contract"""
        if self.address is None:
            raise DeploymentError(f"{self.contract_name} has not been deployed yet")
        return self.address

    def get_contract(self):
        """Web3 contract instance bound to the deployed address"""
        return self.w3.eth.contract(address=self.get_address(), abi=self.abi)
