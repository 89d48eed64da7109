"""
Unit Tests for the Deployment Engine
"""

import pytest
from unittest.mock import Mock
from web3.exceptions import ContractLogicError

from blockchain.artifact_loader import ArtifactLoader
from deployer.deployment_engine import DeploymentEngine
from deployer.models import DeploymentResult
from deployer.wallet_manager import WalletManager
from utils.exceptions import (
    ArtifactNotFoundError,
    DeploymentCancelledError,
    DeploymentRejectedError,
    InsufficientFundsError,
)

from conftest import CHECKSUM_CONTRACT_ADDRESS, DEPLOYER


@pytest.fixture
def engine(w3, artifacts_dir, settings, network):
    return DeploymentEngine(
        w3,
        WalletManager(w3),
        ArtifactLoader(str(artifacts_dir)),
        settings,
        network,
        confirm_prompt=Mock(return_value='yes')
    )


class TestDeploymentEngine:
    """Full procedure against a Web3 double"""

    @pytest.mark.asyncio
    async def test_successful_deployment(self, engine, w3):
        result = await engine.deploy("RoyaltyDistribution")

        assert isinstance(result, DeploymentResult)
        assert result.status == "success"
        assert result.address == CHECKSUM_CONTRACT_ADDRESS
        assert result.tx_hash == '0x' + 'ab' * 32
        assert result.deployer == DEPLOYER
        assert result.network == 'localhost'
        assert result.block_number == 11
        assert result.gas_used == 123456
        assert result.estimated_cost_wei == 120000 * 3_500_000_000

    @pytest.mark.asyncio
    async def test_exactly_one_transaction(self, engine, w3):
        await engine.deploy("RoyaltyDistribution")

        assert w3.eth.send_transaction.call_count == 1
        w3.eth.send_raw_transaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_retry_after_failure(self, engine, w3):
        w3.eth.send_transaction.side_effect = ValueError("nonce too low")

        with pytest.raises(ValueError):
            await engine.deploy("RoyaltyDistribution")

        assert w3.eth.send_transaction.call_count == 1

    @pytest.mark.asyncio
    async def test_reverted_receipt_not_retried(self, engine, w3):
        w3.eth.get_transaction_receipt.return_value = {'status': 0, 'contractAddress': None}

        with pytest.raises(DeploymentRejectedError):
            await engine.deploy("RoyaltyDistribution")

        assert w3.eth.send_transaction.call_count == 1

    @pytest.mark.asyncio
    async def test_reverting_constructor_sends_nothing(self, engine, w3, constructor):
        constructor.estimate_gas.side_effect = ContractLogicError("execution reverted: payee is zero address")

        with pytest.raises(DeploymentRejectedError):
            await engine.deploy("RoyaltyDistribution")

        w3.eth.send_transaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_artifact_sends_nothing(self, engine, w3):
        with pytest.raises(ArtifactNotFoundError):
            await engine.deploy("PaymentSplitter")

        w3.eth.send_transaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_insufficient_funds(self, engine, w3):
        w3.eth.get_balance.return_value = 1

        with pytest.raises(InsufficientFundsError, match="Insufficient balance"):
            await engine.deploy("RoyaltyDistribution")

        w3.eth.send_transaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_dry_run_sends_nothing(self, engine, w3):
        result = await engine.deploy("RoyaltyDistribution", dry_run=True)

        assert result.status == "dry_run"
        assert result.address is None
        assert result.estimated_cost_wei > 0
        w3.eth.send_transaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_confirm_accepted(self, engine, w3):
        await engine.deploy("RoyaltyDistribution", confirm=True)

        engine.confirm_prompt.assert_called_once()
        assert w3.eth.send_transaction.call_count == 1

    @pytest.mark.asyncio
    async def test_confirm_declined(self, engine, w3):
        engine.confirm_prompt.return_value = 'no'

        with pytest.raises(DeploymentCancelledError):
            await engine.deploy("RoyaltyDistribution", confirm=True)

        w3.eth.send_transaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_constructor_args(self, engine, w3):
        payee = '0x70997970C51812dc3A010C7d01b50e0d17dc79C8'

        await engine.deploy("RoyaltyDistribution", [payee, 250])

        w3.eth.contract.return_value.constructor.assert_called_with(payee, 250)

    def test_get_contract_factory(self, engine):
        factory = engine.get_contract_factory("RoyaltyDistribution")

        assert factory.contract_name == "RoyaltyDistribution"
        assert factory.wallet_manager.address == DEPLOYER

    def test_result_to_dict(self):
        result = DeploymentResult(contract_name="RoyaltyDistribution", network="localhost", deployer=DEPLOYER)

        assert result.to_dict()['status'] == "success"
