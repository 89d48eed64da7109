"""
Utilities Package
Configuration, logging, gas pricing, and error types
"""

from .exceptions import DeploymentError
from .gas_calculator import GasCalculator
from .logging_config import configure_logging
from .network_config import NetworkConfig

__all__ = [
    'DeploymentError',
    'GasCalculator',
    'configure_logging',
    'NetworkConfig'
]
