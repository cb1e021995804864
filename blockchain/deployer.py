"""
Contract Deployer
Resolve -> submit -> confirm -> read address, for a single contract instance
"""

from dataclasses import dataclass
from typing import Optional, Protocol
from loguru import logger

from .errors import (
    DeployError,
    BlueprintResolutionError,
    SubmissionError,
    ConfirmationError,
    AddressRetrievalError,
)

DEFAULT_CONTRACT = 'ExceptionExample'


class ContractProvider(Protocol):
    """Anything exposing a factory lookup by contract name"""

    def get_factory(self, name: str): ...


@dataclass
class DeployResult:
    """Outcome of one deployment run"""

    contract_name: str
    address: Optional[str] = None
    error: Optional[DeployError] = None
    tx_hash: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.address is not None


class ContractDeployer:
    """
    Deploys one instance of a named contract with no constructor arguments.

    Every step fails fast: nothing is retried, and the first error ends the
    run. Once the creation transaction is broadcast it cannot be recalled,
    so a run interrupted during confirmation may still leave a deployed
    contract behind.
    """

    def __init__(self, provider: ContractProvider, contract_name: str = DEFAULT_CONTRACT):
        """
        Initialize deployer

        Args:
            provider: Contract-deployment provider
            contract_name: Contract to deploy
        """
        self.provider = provider
        self.contract_name = contract_name

    async def run(self) -> DeployResult:
        """
        Deploy the contract and wait for confirmation

        Returns:
            DeployResult with either the address or the error
        """
        logger.info(f"Starting {self.contract_name} deployment...")

        handle = None
        try:
            handle = self._submit(self._resolve())
            await self._confirm(handle)
            address = self._read_address(handle)
        except DeployError as e:
            tx_hash = e.tx_hash or getattr(handle, 'tx_hash', None)
            logger.debug(f"Deployment aborted: {type(e).__name__}")
            return DeployResult(self.contract_name, error=e, tx_hash=tx_hash)

        logger.success(f"✅ {self.contract_name} deployed successfully!")
        return DeployResult(
            self.contract_name,
            address=address,
            tx_hash=getattr(handle, 'tx_hash', None)
        )

    def _resolve(self):
        try:
            return self.provider.get_factory(self.contract_name)
        except DeployError:
            raise
        except Exception as e:
            raise BlueprintResolutionError(
                f"Cannot resolve contract {self.contract_name}: {e}"
            ) from e

    def _submit(self, blueprint):
        try:
            # no constructor arguments
            return blueprint.deploy()
        except DeployError:
            raise
        except Exception as e:
            raise SubmissionError(f"Deployment submission failed: {e}") from e

    async def _confirm(self, handle):
        try:
            await handle.wait_for_deployment()
        except DeployError:
            raise
        except Exception as e:
            raise ConfirmationError(
                f"Deployment confirmation failed: {e}",
                tx_hash=getattr(handle, 'tx_hash', None)
            ) from e

    def _read_address(self, handle) -> str:
        try:
            return handle.get_address()
        except DeployError:
            raise
        except Exception as e:
            raise AddressRetrievalError(f"Cannot read deployed address: {e}") from e
