"""
Deployment Errors
Terminal failures of the deployment pipeline, one class per step
"""

from typing import Optional


class DeployError(Exception):
    """Base class for every deployment failure"""

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        super().__init__(message)
        self.tx_hash = tx_hash

    def __str__(self) -> str:
        message = super().__str__()
        if self.tx_hash:
            return f"{message} (tx: {self.tx_hash})"
        return message


class BlueprintResolutionError(DeployError):
    """Contract artifact unknown, ambiguous or not deployable"""


class SubmissionError(DeployError):
    """Deployment transaction could not be built, signed or broadcast"""


class ConfirmationError(DeployError):
    """Deployment transaction was not confirmed"""


class AddressRetrievalError(DeployError):
    """Deployed address could not be read from the handle"""
