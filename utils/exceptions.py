"""
Deployment Errors
Every failure of the deployment procedure is a DeploymentError
"""

from typing import Optional


class DeploymentError(Exception):
    """Deployment failed"""


class ConfigurationError(DeploymentError):
    """Network, account or CLI configuration is missing or invalid"""


class NetworkConnectionError(DeploymentError):
    """RPC endpoint unreachable or connected to an unexpected chain"""


class ArtifactNotFoundError(DeploymentError):
    """No compiled artifact matches the requested contract name"""


class InvalidArtifactError(DeploymentError):
    """Artifact exists but cannot be deployed as-is"""


class InsufficientFundsError(DeploymentError):
    """Deployer balance does not cover the estimated deployment cost"""


class DeploymentCancelledError(DeploymentError):
    """Operator declined the deployment at the confirmation prompt"""


class DeploymentRejectedError(DeploymentError):
    """Creation transaction was mined but no contract was created"""

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        super().__init__(message)
        self.tx_hash = tx_hash


class DeploymentTimeoutError(DeploymentError):
    """Creation transaction was not confirmed in time (it may still be mined)"""

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        super().__init__(message)
        self.tx_hash = tx_hash
