"""
Contract Factory
Resolves compiled Hardhat artifacts and deploys them through web3
"""

import asyncio
import json
from pathlib import Path
from typing import Dict, List, Optional
from web3 import Web3
from web3.exceptions import TransactionNotFound
from loguru import logger

from utils.config import redact_url
from .errors import (
    DeployError,
    BlueprintResolutionError,
    SubmissionError,
    ConfirmationError,
    AddressRetrievalError,
)
from .signer import LocalSigner, NodeSigner


class DeploymentHandle:
    """
    In-flight deployment of a single contract instance

    Created once the creation transaction is broadcast. The receipt is
    filled in by wait_for_deployment().
    """

    def __init__(
        self,
        w3: Web3,
        contract_name: str,
        tx_hash: str,
        timeout: Optional[float] = 300.0,
        poll_interval: float = 2.0,
        confirmations: int = 1
    ):
        self.w3 = w3
        self.contract_name = contract_name
        self.tx_hash = tx_hash
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.confirmations = confirmations
        self.receipt = None

    @property
    def deployment_transaction(self) -> str:
        """Hash of the contract-creation transaction"""
        return self.tx_hash

    async def wait_for_deployment(self) -> 'DeploymentHandle':
        """
        Suspend until the creation transaction is mined with enough confirmations

        Returns:
            self, with the receipt populated

        Raises:
            ConfirmationError: timeout, polling failure, revert or missing code
        """
        logger.info("Waiting for confirmation...")

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout if self.timeout else None

        while True:
            receipt = self._fetch_receipt()

            if receipt is not None and self._has_confirmations(receipt):
                break

            if deadline is not None and loop.time() >= deadline:
                raise ConfirmationError(
                    f"Timed out after {self.timeout}s waiting for {self.contract_name} deployment",
                    tx_hash=self.tx_hash
                )

            await asyncio.sleep(self.poll_interval)

        if receipt['status'] != 1:
            raise ConfirmationError(
                f"{self.contract_name} deployment reverted in block {receipt['blockNumber']}",
                tx_hash=self.tx_hash
            )

        contract_address = receipt.get('contractAddress')
        if not contract_address:
            raise ConfirmationError(
                "Receipt has no contract address (not a contract-creation transaction?)",
                tx_hash=self.tx_hash
            )

        code = self._call(self.w3.eth.get_code, contract_address)
        if not code:
            raise ConfirmationError(
                f"No code found at {contract_address} after deployment",
                tx_hash=self.tx_hash
            )

        self.receipt = receipt

        logger.success(f"{self.contract_name} confirmed in block {receipt['blockNumber']}")
        logger.info(f"Gas used: {receipt['gasUsed']}")

        return self

    def get_address(self) -> str:
        """
        Get the deployed contract address

        Raises:
            AddressRetrievalError: deployment not confirmed yet
        """
        if self.receipt is None:
            raise AddressRetrievalError(
                f"{self.contract_name} deployment has not been confirmed",
                tx_hash=self.tx_hash
            )

        address = self.receipt.get('contractAddress')
        if not address:
            raise AddressRetrievalError("Receipt carries no contract address", tx_hash=self.tx_hash)

        return Web3.to_checksum_address(address)

    def _fetch_receipt(self):
        """Receipt of the creation transaction, None while still pending"""
        try:
            return self.w3.eth.get_transaction_receipt(self.tx_hash)
        except TransactionNotFound:
            return None
        except Exception as e:
            raise ConfirmationError(f"Error polling receipt: {e}", tx_hash=self.tx_hash) from e

    def _has_confirmations(self, receipt) -> bool:
        if self.confirmations <= 1:
            return True

        block_number = self._call(lambda: self.w3.eth.block_number)
        depth = block_number - receipt['blockNumber'] + 1

        logger.debug(f"Confirmations: {depth}/{self.confirmations}")
        return depth >= self.confirmations

    def _call(self, fn, *args):
        try:
            return fn(*args)
        except Exception as e:
            raise ConfirmationError(f"Error checking deployment: {e}", tx_hash=self.tx_hash) from e


class ContractBlueprint:
    """
    Deployable contract type (ABI + creation bytecode)
    """

    def __init__(
        self,
        provider: 'Web3ContractProvider',
        name: str,
        abi: List[Dict],
        bytecode: str
    ):
        self.provider = provider
        self.name = name
        self.abi = abi
        self.bytecode = bytecode

    @property
    def constructor_inputs(self) -> List[Dict]:
        """Constructor parameters declared in the ABI"""
        for entry in self.abi:
            if entry.get('type') == 'constructor':
                return entry.get('inputs', [])
        return []

    def deploy(self, *args) -> DeploymentHandle:
        """
        Broadcast the contract-creation transaction

        Args:
            *args: Constructor arguments

        Returns:
            Handle for the pending deployment

        Raises:
            SubmissionError: argument mismatch, signing or network failure
        """
        expected = len(self.constructor_inputs)
        if len(args) != expected:
            raise SubmissionError(
                f"{self.name} constructor expects {expected} arguments, got {len(args)}"
            )

        w3 = self.provider.w3
        logger.info(f"Deploying {self.name}...")

        try:
            contract = w3.eth.contract(abi=self.abi, bytecode=self.bytecode)
            tx_hash = self.provider.signer.send_deployment(w3, contract.constructor(*args))
        except DeployError:
            raise
        except Exception as e:
            raise SubmissionError(f"Failed to submit {self.name} deployment: {e}") from e

        tx_hash = Web3.to_hex(tx_hash)
        logger.info(f"Transaction sent: {tx_hash}")

        return DeploymentHandle(
            w3,
            self.name,
            tx_hash,
            timeout=self.provider.timeout,
            poll_interval=self.provider.poll_interval,
            confirmations=self.provider.confirmations
        )


class Web3ContractProvider:
    """
    Contract-deployment provider backed by a JSON-RPC node and
    Hardhat compile artifacts
    """

    def __init__(
        self,
        w3: Web3,
        signer,
        artifacts_dir: str = 'artifacts',
        timeout: Optional[float] = 300.0,
        poll_interval: float = 2.0,
        confirmations: int = 1
    ):
        """
        Initialize provider

        Args:
            w3: Web3 instance
            signer: LocalSigner or NodeSigner
            artifacts_dir: Hardhat artifacts directory
            timeout: Confirmation timeout in seconds (None = unbounded)
            poll_interval: Seconds between receipt polls
            confirmations: Blocks required on top of (and including) the deployment
        """
        self.w3 = w3
        self.signer = signer
        self.artifacts_dir = Path(artifacts_dir)
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.confirmations = confirmations

    @classmethod
    def from_config(cls, config) -> 'Web3ContractProvider':
        """Build provider from a DeployConfig"""
        w3 = Web3(Web3.HTTPProvider(config.rpc_url))

        if config.private_key:
            signer = LocalSigner(config.private_key, gas_buffer=config.gas_buffer)
        else:
            logger.info("DEPLOYER_PRIVATE_KEY not set - using node-managed account")
            signer = NodeSigner(config.deployer_address)

        logger.info(f"Network endpoint: {redact_url(config.rpc_url)}")

        return cls(
            w3,
            signer,
            artifacts_dir=config.artifacts_dir,
            timeout=config.timeout,
            poll_interval=config.poll_interval,
            confirmations=config.confirmations
        )

    def get_factory(self, name: str) -> ContractBlueprint:
        """
        Resolve a contract blueprint by contract name

        Raises:
            BlueprintResolutionError: artifact missing, ambiguous or not deployable
        """
        artifact_path = self._find_artifact(name)

        try:
            with open(artifact_path, 'r') as f:
                artifact = json.load(f)
        except (OSError, ValueError) as e:
            raise BlueprintResolutionError(f"Cannot read artifact {artifact_path}: {e}") from e

        abi = artifact.get('abi')
        bytecode = artifact.get('bytecode')

        if abi is None or bytecode is None:
            raise BlueprintResolutionError(f"Artifact {artifact_path} has no abi/bytecode")

        if bytecode in ('', '0x'):
            raise BlueprintResolutionError(
                f"{name} has no bytecode (abstract contract or interface?)"
            )

        logger.info(f"Loaded {name} artifact from {artifact_path}")
        return ContractBlueprint(self, name, abi, bytecode)

    def _find_artifact(self, name: str) -> Path:
        """Locate <name>.json under the artifacts directory"""
        if not self.artifacts_dir.is_dir():
            raise BlueprintResolutionError(
                f"Artifacts directory not found: {self.artifacts_dir} "
                "(run 'npx hardhat compile' first)"
            )

        matches = sorted(self.artifacts_dir.rglob(f"{name}.json"))

        if not matches:
            raise BlueprintResolutionError(
                f"Artifact for contract {name} not found in {self.artifacts_dir} "
                "(run 'npx hardhat compile' first)"
            )

        if len(matches) > 1:
            found = ', '.join(str(p) for p in matches)
            raise BlueprintResolutionError(f"Multiple artifacts for {name}: {found}")

        return matches[0]
