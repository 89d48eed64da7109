"""
Deployment result model
"""

from dataclasses import dataclass, asdict
from typing import Optional


@dataclass
class DeploymentResult:
    """Outcome of one deployment run"""
    contract_name: str
    network: str
    deployer: str
    status: str = "success"  # success, dry_run
    address: Optional[str] = None
    tx_hash: Optional[str] = None
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    effective_gas_price: Optional[int] = None
    estimated_cost_wei: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)
