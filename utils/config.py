"""
Deployment Configuration
Network endpoint, signer credential and artifact location, loaded from .env
"""

import math
import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit
from dotenv import load_dotenv, find_dotenv
from loguru import logger


@dataclass
class DeployConfig:
    """Everything the deployment needs from its environment"""

    rpc_url: str = 'http://127.0.0.1:8545'
    private_key: Optional[str] = None
    deployer_address: Optional[str] = None
    artifacts_dir: str = 'artifacts'
    confirmations: int = 1
    timeout: Optional[float] = 300.0
    poll_interval: float = 2.0
    gas_buffer: float = 1.2
    log_level: str = 'INFO'
    log_file: Optional[str] = None

    def __post_init__(self):
        if not self.rpc_url:
            raise ValueError("rpc_url must not be empty")

        for name in ('timeout', 'poll_interval', 'gas_buffer'):
            value = getattr(self, name)
            if value is not None and not math.isfinite(value):
                raise ValueError(f"{name} must be a finite number, got {value}")

        if self.confirmations < 1:
            raise ValueError(f"confirmations must be >= 1, got {self.confirmations}")
        if self.timeout is not None and self.timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {self.timeout}")
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be > 0, got {self.poll_interval}")
        if self.gas_buffer < 1:
            raise ValueError(f"gas_buffer must be >= 1, got {self.gas_buffer}")

        try:
            logger.level(self.log_level)
        except ValueError:
            raise ValueError(f"log_level must be a logging level name, got {self.log_level!r}") from None

        # 0 disables the confirmation timeout
        if self.timeout == 0:
            self.timeout = None

    def __repr__(self) -> str:
        key = '***' if self.private_key else None
        return (
            f"DeployConfig(rpc_url={redact_url(self.rpc_url)!r}, private_key={key!r}, "
            f"artifacts_dir={self.artifacts_dir!r}, confirmations={self.confirmations}, "
            f"timeout={self.timeout})"
        )

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> 'DeployConfig':
        """
        Load configuration from environment variables (and .env)

        Raises:
            ValueError: a variable holds an invalid value
        """
        load_dotenv(dotenv_path or find_dotenv(usecwd=True))

        defaults = cls()

        return cls(
            rpc_url=os.getenv('DEPLOY_RPC_URL', defaults.rpc_url),
            private_key=os.getenv('DEPLOYER_PRIVATE_KEY') or None,
            deployer_address=os.getenv('DEPLOYER_ADDRESS') or None,
            artifacts_dir=os.getenv('ARTIFACTS_DIR', defaults.artifacts_dir),
            confirmations=_env_number('DEPLOY_CONFIRMATIONS', defaults.confirmations, int),
            timeout=_env_number('DEPLOY_TIMEOUT', defaults.timeout, float),
            poll_interval=_env_number('DEPLOY_POLL_INTERVAL', defaults.poll_interval, float),
            gas_buffer=_env_number('DEPLOY_GAS_BUFFER', defaults.gas_buffer, float),
            log_level=os.getenv('LOG_LEVEL', defaults.log_level).upper(),
            log_file=os.getenv('LOG_FILE') or None
        )


def redact_url(url: str) -> str:
    """
    Strip path, query and credentials from an RPC URL

    Hosted endpoints (Alchemy, Infura) carry the API key in the path.
    """
    parts = urlsplit(url)

    if not parts.scheme or not parts.hostname:
        return '***'

    host = parts.hostname
    try:
        port = parts.port
    except ValueError:
        port = None
    if port:
        host = f"{host}:{port}"

    return f"{parts.scheme}://{host}"


def _env_number(name: str, default, cast):
    value = os.getenv(name)

    if value is None or value.strip() == '':
        return default

    try:
        return cast(value)
    except ValueError:
        raise ValueError(f"{name} must be a {cast.__name__}, got {value!r}") from None
