"""
Transaction Builder
Constructs contract-creation transactions
"""

from typing import Dict, Sequence
from web3 import Web3
from loguru import logger

from utils.gas_calculator import GasCalculator


class TransactionBuilder:
    """
    Builds unsigned deployment transactions
    """

    def __init__(self, w3: Web3, gas_calculator: GasCalculator):
        """
        Initialize Transaction Builder

        Args:
            w3: Web3 instance
            gas_calculator: Gas limit and fee source
        """
        self.w3 = w3
        self.gas_calculator = gas_calculator

    def build_deployment_tx(
        self,
        contract_class,
        sender: str,
        constructor_args: Sequence = ()
    ) -> Dict:
        """
        Build a creation transaction for a contract class

        Args:
            contract_class: Web3 contract class (abi + bytecode, no address)
            sender: Deployer address
            constructor_args: Constructor arguments

        Returns:
            Transaction dict ready for signing
        """
        logger.info("Building deployment transaction...")

        constructor = contract_class.constructor(*constructor_args)

        nonce = self.w3.eth.get_transaction_count(sender, 'pending')
        gas_limit = self.gas_calculator.estimate_gas_limit(constructor, sender)
        fee_params = self.gas_calculator.get_fee_params()

        tx_params = {
            'from': sender,
            'nonce': nonce,
            'gas': gas_limit,
            'chainId': self.w3.eth.chain_id
        }
        tx_params.update(fee_params)

        transaction = constructor.build_transaction(tx_params)

        logger.debug(f"Deployment transaction: nonce={nonce}, gas={gas_limit}")
        return transaction
