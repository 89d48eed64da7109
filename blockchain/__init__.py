"""
Blockchain Interaction Package
Handles artifact resolution, transaction building, and contract creation
"""

from .artifact_loader import ArtifactLoader
from .contract_factory import ContractFactory, DeployedContract
from .transaction_builder import TransactionBuilder

__all__ = ['ArtifactLoader', 'ContractFactory', 'DeployedContract', 'TransactionBuilder']
