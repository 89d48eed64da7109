"""
Shared fixtures: a Web3 double, compiled artifacts on disk, network config
"""

import json
import pytest
from unittest.mock import MagicMock
from hexbytes import HexBytes

DEPLOYER = '0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266'
CONTRACT_ADDRESS = '0x5fbdb2315678afecb367f032d93f642f64180aa3'
CHECKSUM_CONTRACT_ADDRESS = '0x5FbDB2315678afecb367f032d93F642f64180aa3'
TX_HASH = HexBytes('0x' + 'ab' * 32)

# Init code returning a one-byte runtime
BYTECODE = '0x600060005360016000f3'

ROYALTY_ABI = [
    {"inputs": [], "stateMutability": "nonpayable", "type": "constructor"},
    {
        "inputs": [{"internalType": "address", "name": "payee", "type": "address"}],
        "name": "releasable",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    }
]


def write_artifact(artifacts_dir, source_name, contract_name, bytecode=BYTECODE, **extra):
    """Write a Hardhat-style artifact and return its path"""
    artifact_dir = artifacts_dir / source_name
    artifact_dir.mkdir(parents=True, exist_ok=True)

    artifact = {
        "_format": "hh-sol-artifact-1",
        "contractName": contract_name,
        "sourceName": source_name,
        "abi": ROYALTY_ABI,
        "bytecode": bytecode,
        "deployedBytecode": "0x00",
        "linkReferences": {},
        "deployedLinkReferences": {}
    }
    artifact.update(extra)

    path = artifact_dir / f"{contract_name}.json"
    path.write_text(json.dumps(artifact))

    # Hardhat writes a debug file next to every artifact
    (artifact_dir / f"{contract_name}.dbg.json").write_text(
        json.dumps({"_format": "hh-sol-dbg-1", "buildInfo": "../../build-info/x.json"})
    )
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer .env values out of the tests"""
    for var in ('DEPLOYER_PRIVATE_KEY', 'RPC_URL', 'DEPLOY_NETWORK', 'POLYGON_RPC_URL', 'AMOY_RPC_URL'):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def artifacts_dir(tmp_path):
    """Artifacts tree containing a compiled RoyaltyDistribution"""
    root = tmp_path / "artifacts"
    write_artifact(root, "contracts/RoyaltyDistribution.sol", "RoyaltyDistribution")
    (root / "build-info").mkdir()
    (root / "build-info" / "x.json").write_text("{}")
    return root


@pytest.fixture
def settings():
    """Deployment settings"""
    return {
        'gas_limit_buffer': 1.2,
        'fallback_gas_limit': 3000000,
        'max_gas_price_gwei': 500,
        'priority_fee_gwei': 30,
        'receipt_timeout_seconds': 5,
        'poll_interval_seconds': 0,
        'confirmations': 1
    }


@pytest.fixture
def network():
    """Resolved local network"""
    return {
        'key': 'localhost',
        'name': 'Local Hardhat node',
        'rpc_url': 'http://127.0.0.1:8545',
        'chain_id': 31337,
        'legacy_gas': False,
        'currency': 'ETH'
    }


@pytest.fixture
def constructor():
    """Contract constructor double"""
    constructor = MagicMock()
    constructor.estimate_gas.return_value = 100000
    constructor.build_transaction.side_effect = lambda params: dict(params, data=BYTECODE)
    return constructor


@pytest.fixture
def w3(constructor):
    """Web3 double for a healthy local node"""
    w3 = MagicMock()

    w3.is_connected.return_value = True
    w3.eth.chain_id = 31337
    w3.eth.accounts = [DEPLOYER]
    w3.eth.block_number = 11
    w3.eth.gas_price = 2_000_000_000
    w3.eth.max_priority_fee = 1_500_000_000

    w3.eth.get_transaction_count.return_value = 0
    w3.eth.get_block.return_value = {'number': 10, 'baseFeePerGas': 1_000_000_000}
    w3.eth.get_balance.return_value = 10 ** 22
    w3.eth.send_transaction.return_value = TX_HASH
    w3.eth.send_raw_transaction.return_value = TX_HASH
    w3.eth.get_transaction_receipt.return_value = {
        'status': 1,
        'contractAddress': CONTRACT_ADDRESS,
        'blockNumber': 11,
        'gasUsed': 123456,
        'effectiveGasPrice': 2_500_000_000
    }
    w3.eth.get_code.return_value = HexBytes('0x00')

    w3.eth.contract.return_value.constructor.return_value = constructor
    return w3


@pytest.fixture
def config_file(tmp_path):
    """Network configuration file"""
    config = {
        "default_network": "localhost",
        "networks": {
            "localhost": {
                "name": "Local Hardhat node",
                "rpc_url": "http://127.0.0.1:8545",
                "chain_id": 31337
            },
            "polygon": {
                "name": "Polygon PoS",
                "rpc_url_env": "POLYGON_RPC_URL",
                "chain_id": 137,
                "currency": "POL"
            }
        },
        "deployment": {
            "receipt_timeout_seconds": 5,
            "poll_interval_seconds": 0
        }
    }
    path = tmp_path / "networks.json"
    path.write_text(json.dumps(config))
    return path
