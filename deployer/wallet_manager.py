"""
Wallet Manager
Deployer account: local private key or an account unlocked on the node
"""

import os
from typing import Dict, Optional
from web3 import Web3
from eth_account import Account
from loguru import logger
from dotenv import load_dotenv

from utils.exceptions import ConfigurationError

load_dotenv()


class WalletManager:
    """
    Signs and sends transactions for the deployer account

    - DEPLOYER_PRIVATE_KEY set: sign locally, send raw transaction
    - Otherwise: use the node's first unlocked account (local Hardhat/Anvil node)
    """

    def __init__(self, w3: Web3, private_key: Optional[str] = None):
        """
        Initialize wallet manager

        Args:
            w3: Web3 instance
            private_key: Deployer key (None = DEPLOYER_PRIVATE_KEY, then node account)
        """
        self.w3 = w3

        private_key = private_key or os.getenv('DEPLOYER_PRIVATE_KEY')

        if private_key:
            try:
                self.account = Account.from_key(private_key)
            except (ValueError, TypeError) as e:
                raise ConfigurationError(f"Invalid DEPLOYER_PRIVATE_KEY: {e}") from e
            self.address = self.account.address
            self.local_signing = True
        else:
            accounts = w3.eth.accounts
            if not accounts:
                raise ConfigurationError(
                    "DEPLOYER_PRIVATE_KEY not set and the node exposes no unlocked accounts"
                )
            self.account = None
            self.address = Web3.to_checksum_address(accounts[0])
            self.local_signing = False

        signer = "local key" if self.local_signing else "node account"
        logger.info(f"Deploying from: {self.address} ({signer})")

    def get_balance(self) -> int:
        """Deployer balance in wei"""
        return self.w3.eth.get_balance(self.address)

    def send_transaction(self, transaction: Dict) -> bytes:
        """
        Sign (if needed) and broadcast a transaction

        Args:
            transaction: Built transaction dict

        Returns:
            Transaction hash
        """
        if self.local_signing:
            logger.info("Signing transaction...")
            signed_tx = self.account.sign_transaction(transaction)
            logger.info("Sending deployment transaction...")
            return self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)

        logger.info("Sending deployment transaction...")
        return self.w3.eth.send_transaction(transaction)
