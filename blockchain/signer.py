"""
Deployment Signer
Sends the contract-creation transaction from the deployer account
"""

from typing import Optional
from hexbytes import HexBytes
from web3 import Web3
from eth_account import Account
from loguru import logger

from .errors import SubmissionError


class LocalSigner:
    """
    Signs deployment transactions locally with a private key
    and broadcasts them raw (remote networks)
    """

    def __init__(self, private_key: str, gas_buffer: float = 1.2):
        """
        Initialize local signer

        Args:
            private_key: Hex private key of the deployer account
            gas_buffer: Multiplier applied to the gas estimate
        """
        try:
            self.account = Account.from_key(private_key)
        except Exception as e:
            # never echo the key itself
            raise ValueError(f"Invalid deployer private key: {type(e).__name__}") from e

        self.address = self.account.address
        self.gas_buffer = gas_buffer

        logger.info(f"Deployer wallet: {self.address}")

    def send_deployment(self, w3: Web3, constructor) -> HexBytes:
        """
        Build, sign and broadcast a contract-creation transaction

        Args:
            w3: Web3 instance
            constructor: Bound contract constructor

        Returns:
            Transaction hash
        """
        nonce = w3.eth.get_transaction_count(self.address, 'pending')
        gas_price = w3.eth.gas_price

        gas_estimate = constructor.estimate_gas({'from': self.address})
        gas_limit = int(gas_estimate * self.gas_buffer)

        logger.info(f"Gas limit: {gas_limit}")
        logger.info(f"Gas price: {w3.from_wei(gas_price, 'gwei')} gwei")

        transaction = constructor.build_transaction({
            'from': self.address,
            'nonce': nonce,
            'gas': gas_limit,
            'gasPrice': gas_price,
            'chainId': w3.eth.chain_id
        })

        deployment_cost = w3.from_wei(gas_limit * gas_price, 'ether')
        logger.info(f"Estimated deployment cost: {deployment_cost} ETH")

        logger.info("Signing transaction...")
        signed_tx = self.account.sign_transaction(transaction)

        logger.info("Sending deployment transaction...")
        return w3.eth.send_raw_transaction(signed_tx.raw_transaction)


class NodeSigner:
    """
    Sends deployment transactions through an account unlocked on the node
    (Hardhat / Anvil local networks)
    """

    def __init__(self, address: Optional[str] = None):
        try:
            self.address = Web3.to_checksum_address(address) if address else None
        except ValueError as e:
            raise ValueError(f"Invalid deployer address {address!r}: {e}") from e

    def send_deployment(self, w3: Web3, constructor) -> HexBytes:
        """Send a contract-creation transaction from the node account"""
        address = self.address

        if address is None:
            accounts = w3.eth.accounts
            if not accounts:
                raise SubmissionError("Node exposes no accounts and no private key is configured")
            # Hardhat signs with the first account by default
            address = accounts[0]

        logger.info(f"Deploying from node account: {address}")
        return constructor.transact({'from': address})
