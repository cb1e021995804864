"""
Blockchain Interaction Package
Handles contract artifact lookup, deployment submission and confirmation
"""

from .errors import (
    DeployError,
    BlueprintResolutionError,
    SubmissionError,
    ConfirmationError,
    AddressRetrievalError,
)
from .signer import LocalSigner, NodeSigner
from .contract_factory import Web3ContractProvider, ContractBlueprint, DeploymentHandle
from .deployer import ContractDeployer, DeployResult, DEFAULT_CONTRACT

__all__ = [
    'DeployError',
    'BlueprintResolutionError',
    'SubmissionError',
    'ConfirmationError',
    'AddressRetrievalError',
    'LocalSigner',
    'NodeSigner',
    'Web3ContractProvider',
    'ContractBlueprint',
    'DeploymentHandle',
    'ContractDeployer',
    'DeployResult',
    'DEFAULT_CONTRACT',
]
