"""
Artifact Loader
Locates compiled contract artifacts (Hardhat layout) by contract name
"""

import os
import glob
import json
from typing import Dict, List
from loguru import logger

from utils.exceptions import ArtifactNotFoundError, InvalidArtifactError


class ArtifactLoader:
    """
    Reads ABI and creation bytecode from build output

    Layout: <artifacts_dir>/contracts/<Source>.sol/<ContractName>.json
    """

    def __init__(self, artifacts_dir: str = "artifacts"):
        """
        Initialize Artifact Loader

        Args:
            artifacts_dir: Root of the compiled artifacts tree
        """
        self.artifacts_dir = artifacts_dir

    def find_artifact_path(self, contract_name: str) -> str:
        """
        Resolve a contract name to its artifact file

        Args:
            contract_name: Bare name ("RoyaltyDistribution") or fully-qualified
                name ("contracts/RoyaltyDistribution.sol:RoyaltyDistribution")

        Returns:
            Path to the artifact JSON
        """
        if ':' in contract_name:
            source_name, name = contract_name.rsplit(':', 1)
            path = os.path.join(self.artifacts_dir, source_name, f"{name}.json")

            root = os.path.realpath(self.artifacts_dir)
            if os.path.commonpath([root, os.path.realpath(path)]) != root:
                raise InvalidArtifactError(f"Contract name '{contract_name}' points outside {self.artifacts_dir}")

            if not os.path.isfile(path):
                raise ArtifactNotFoundError(
                    f"Contract artifact not found: {path} - run 'npx hardhat compile' first"
                )
            return path

        candidates = self._find_candidates(contract_name)

        if not candidates:
            raise ArtifactNotFoundError(
                f"No artifact for contract '{contract_name}' under {self.artifacts_dir} - "
                f"run 'npx hardhat compile' first"
            )

        if len(candidates) > 1:
            qualified = ', '.join(self._qualified_name(path) for path in candidates)
            raise InvalidArtifactError(
                f"Multiple artifacts named '{contract_name}', use a fully-qualified name: {qualified}"
            )

        return candidates[0]

    def _find_candidates(self, contract_name: str) -> List[str]:
        pattern = os.path.join(self.artifacts_dir, '**', f"{contract_name}.json")
        build_info_dir = os.path.join(self.artifacts_dir, 'build-info')

        return sorted(
            path for path in glob.glob(pattern, recursive=True)
            if not path.startswith(build_info_dir)
        )

    def _qualified_name(self, path: str) -> str:
        relative = os.path.relpath(path, self.artifacts_dir)
        source_name, file_name = os.path.split(relative)
        return f"{source_name.replace(os.sep, '/')}:{file_name[:-len('.json')]}"

    def load(self, contract_name: str) -> Dict:
        """
        Load and validate a contract artifact

        Args:
            contract_name: Bare or fully-qualified contract name

        Returns:
            Dict with contract_name, source_name, abi, bytecode, path
        """
        path = self.find_artifact_path(contract_name)

        try:
            with open(path, 'r') as f:
                contract_json = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise InvalidArtifactError(f"Cannot read artifact {path}: {e}") from e

        artifact = validate_artifact(contract_json, path)
        logger.debug(f"Loaded artifact {artifact['source_name']}:{artifact['contract_name']} from {path}")
        return artifact


def validate_artifact(contract_json: Dict, path: str) -> Dict:
    """Check an artifact can be deployed and normalise its fields"""
    if not isinstance(contract_json, dict):
        raise InvalidArtifactError(f"Artifact {path} is not a JSON object")

    name = contract_json.get('contractName') or os.path.splitext(os.path.basename(path))[0]
    abi = contract_json.get('abi')
    bytecode = contract_json.get('bytecode')

    if not isinstance(abi, list):
        raise InvalidArtifactError(f"Artifact {path} has no ABI")

    if isinstance(bytecode, dict):
        # solc standard-json shape: {"object": "..."}
        bytecode = bytecode.get('object')

    if not isinstance(bytecode, str):
        raise InvalidArtifactError(f"Artifact {path} has no bytecode")

    if not bytecode.startswith('0x'):
        bytecode = '0x' + bytecode

    if bytecode == '0x':
        raise InvalidArtifactError(
            f"Contract {name} is abstract or an interface and can't be deployed"
        )

    if contract_json.get('linkReferences') or '__$' in bytecode:
        raise InvalidArtifactError(
            f"Contract {name} needs library linking before it can be deployed"
        )

    return {
        'contract_name': name,
        'source_name': contract_json.get('sourceName', ''),
        'abi': abi,
        'bytecode': bytecode,
        'path': path
    }
