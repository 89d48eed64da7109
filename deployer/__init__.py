"""
Deployer Core Package
Handles the deployment procedure and the deployer wallet
"""

from .deployment_engine import DeploymentEngine
from .models import DeploymentResult
from .wallet_manager import WalletManager

__all__ = ['DeploymentEngine', 'DeploymentResult', 'WalletManager']
