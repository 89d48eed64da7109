"""
Gas Calculator
Gas limit and fee parameters for contract-creation transactions
"""

from typing import Dict, Optional
from web3 import Web3
from web3.exceptions import ContractLogicError
from loguru import logger

from utils.exceptions import DeploymentRejectedError


def apply_buffer(gas_estimate: int, buffer: float) -> int:
    """
    Pad a gas estimate

    Args:
        gas_estimate: Node gas estimate
        buffer: Multiplier (1.2 = 20% headroom)

    Returns:
        Padded gas limit, never below the estimate
    """
    return max(int(gas_estimate * buffer), gas_estimate)


def cap_fee_params(fee_params: Dict[str, int], max_fee_wei: Optional[int]) -> Dict[str, int]:
    """Clamp fee parameters to a ceiling; the tip never exceeds the max fee"""
    capped = dict(fee_params)

    if max_fee_wei is not None:
        if 'gasPrice' in capped:
            capped['gasPrice'] = min(capped['gasPrice'], max_fee_wei)
        if 'maxFeePerGas' in capped:
            capped['maxFeePerGas'] = min(capped['maxFeePerGas'], max_fee_wei)

    if 'maxFeePerGas' in capped and 'maxPriorityFeePerGas' in capped:
        capped['maxPriorityFeePerGas'] = min(capped['maxPriorityFeePerGas'], capped['maxFeePerGas'])

    return capped


class GasCalculator:
    """
    Prices deployment transactions

    EIP-1559 networks: maxFeePerGas = 2 * baseFee + tip
    Legacy networks: gasPrice from the node
    """

    def __init__(self, w3: Web3, settings: Dict, legacy_gas: bool = False):
        """
        Initialize Gas Calculator

        Args:
            w3: Web3 instance
            settings: Deployment settings (gas_limit_buffer, fallback_gas_limit,
                max_gas_price_gwei, priority_fee_gwei)
            legacy_gas: Force legacy gasPrice transactions
        """
        self.w3 = w3
        self.legacy_gas = legacy_gas

        self.gas_limit_buffer = settings.get('gas_limit_buffer', 1.2)
        self.fallback_gas_limit = settings.get('fallback_gas_limit', 3000000)
        self.priority_fee_gwei = settings.get('priority_fee_gwei', 1)

        max_gas_price_gwei = settings.get('max_gas_price_gwei')
        self.max_fee_wei = (
            int(Web3.to_wei(max_gas_price_gwei, 'gwei')) if max_gas_price_gwei else None
        )

    def estimate_gas_limit(self, constructor, sender: str) -> int:
        """
        Estimate gas for a constructor call with buffer

        Args:
            constructor: Web3 ContractConstructor
            sender: Deployer address

        Returns:
            Gas limit
        """
        try:
            gas_estimate = constructor.estimate_gas({'from': sender})
            gas_limit = apply_buffer(gas_estimate, self.gas_limit_buffer)
        except ContractLogicError as e:
            # Constructor reverts; sending would only burn gas
            raise DeploymentRejectedError(f"Constructor reverts, deployment not sent: {e}") from e
        except Exception as e:
            logger.warning(f"Gas estimation failed: {e}, using default")
            gas_limit = self.fallback_gas_limit

        logger.info(f"Gas limit: {gas_limit}")
        return gas_limit

    def get_fee_params(self) -> Dict[str, int]:
        """
        Get fee fields for the transaction

        Returns:
            {'maxFeePerGas', 'maxPriorityFeePerGas'} or {'gasPrice'} in wei
        """
        base_fee = None

        if not self.legacy_gas:
            latest_block = self.w3.eth.get_block('latest')
            base_fee = latest_block.get('baseFeePerGas')

        if base_fee is None:
            gas_price = self.w3.eth.gas_price
            fee_params = cap_fee_params({'gasPrice': int(gas_price)}, self.max_fee_wei)
            logger.info(f"Gas price: {Web3.from_wei(fee_params['gasPrice'], 'gwei')} gwei")
            return fee_params

        priority_fee = self._get_priority_fee()
        fee_params = cap_fee_params(
            {
                'maxFeePerGas': int(base_fee * 2 + priority_fee),
                'maxPriorityFeePerGas': int(priority_fee)
            },
            self.max_fee_wei
        )

        logger.info(
            f"Max fee: {Web3.from_wei(fee_params['maxFeePerGas'], 'gwei')} gwei, "
            f"tip: {Web3.from_wei(fee_params['maxPriorityFeePerGas'], 'gwei')} gwei"
        )
        return fee_params

    def _get_priority_fee(self) -> int:
        """Node-suggested tip, or the configured default when unavailable"""
        try:
            return int(self.w3.eth.max_priority_fee)
        except Exception as e:
            logger.warning(f"Priority fee lookup failed: {e}, using {self.priority_fee_gwei} gwei")
            return int(Web3.to_wei(self.priority_fee_gwei, 'gwei'))

    @staticmethod
    def estimate_cost_wei(transaction: Dict) -> int:
        """Upper bound of the transaction fee in wei"""
        fee_per_gas = transaction.get('maxFeePerGas', transaction.get('gasPrice', 0))
        return int(transaction['gas']) * int(fee_per_gas)
