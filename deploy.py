"""
ExceptionExample Deployment
Deploys one ExceptionExample instance and prints its address
"""

import asyncio
import sys
from typing import Optional
from loguru import logger

from blockchain import ContractDeployer, DeployResult, Web3ContractProvider, DEFAULT_CONTRACT
from utils import DeployConfig


def configure_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Send logs to stderr (stdout carries only the deployed address)"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=level,
        diagnose=False
    )

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
            level="DEBUG",
            diagnose=False
        )


async def deploy(provider, contract_name: str = DEFAULT_CONTRACT) -> DeployResult:
    """Run a single deployment against the given provider"""
    deployer = ContractDeployer(provider, contract_name)
    return await deployer.run()


def main(provider=None) -> int:
    """
    Deploy the contract and map the outcome to a process exit code

    Args:
        provider: Contract-deployment provider (None = web3 provider from config)

    Returns:
        0 on success, 1 on any failure
    """
    try:
        config = DeployConfig.from_env()
    except ValueError as e:
        configure_logging()
        logger.error(f"Invalid configuration: {e}")
        return 1

    try:
        configure_logging(config.log_level, config.log_file)
    except (ValueError, OSError) as e:
        configure_logging()
        logger.error(f"Cannot set up logging: {e}")
        return 1

    if provider is None:
        try:
            provider = Web3ContractProvider.from_config(config)
        except ValueError as e:
            logger.error(f"Invalid configuration: {e}")
            return 1

    result = asyncio.run(deploy(provider))

    if not result.ok:
        logger.opt(exception=result.error).error(
            f"❌ {result.contract_name} deployment failed: {result.error}"
        )
        if result.tx_hash:
            logger.warning(f"Transaction {result.tx_hash} was broadcast and may still be mined")
        return 1

    print(f"{result.contract_name} deployed to: {result.address}")
    return 0


def cli() -> int:
    """Console entry point: main() plus the Ctrl-C exit path"""
    try:
        return main()
    except KeyboardInterrupt:
        logger.warning("Interrupted - a broadcast deployment transaction cannot be recalled")
        return 1


if __name__ == "__main__":
    sys.exit(cli())
