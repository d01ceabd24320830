"""
Deployment Settings
Run configuration read from the environment (.env supported)
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

from blockchain.artifacts import DEFAULT_ARTIFACT_DIR, DEFAULT_CONTRACT_NAME
from blockchain.contract_manager import DEFAULT_CALL_GAS_LIMIT
from blockchain.transaction_builder import DEFAULT_RECEIPT_TIMEOUT
from utils.exceptions import ConfigurationError
from .deployer import DEFAULT_DEPLOY_GAS_LIMIT
from .recorder import DEFAULT_RECORD_PATH

load_dotenv()


DEFAULT_NETWORK = "polkadot-hub"
DEFAULT_LOG_FILE = "logs/deployments.log"

TRUE_VALUES = {"1", "true", "yes", "y", "on"}
FALSE_VALUES = {"0", "false", "no", "n", "off"}


def parse_bool(value: str, name: str = "value") -> bool:
    """Parse a boolean setting; raises ConfigurationError on anything else"""
    lowered = value.strip().lower()

    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False

    raise ConfigurationError(f"{name} must be true or false, got {value!r}")


def _env_str(name: str, default: str) -> str:
    """Environment value, falling back to the default when unset or blank"""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return parse_bool(value, name)


def _env_number(name: str, default, cast=int):
    value = os.getenv(name)
    if value is None or not value.strip():
        return default

    try:
        number = cast(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None

    if number <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value!r}")

    return number


@dataclass
class DeploySettings:
    """Everything a run needs apart from interactive answers."""

    network: str = DEFAULT_NETWORK
    private_key: Optional[str] = field(default=None, repr=False)
    artifact_dir: str = DEFAULT_ARTIFACT_DIR
    contract_name: str = DEFAULT_CONTRACT_NAME
    record_path: str = DEFAULT_RECORD_PATH
    initial_value: bool = True
    allow_unfunded: bool = False
    deploy_gas_limit: int = DEFAULT_DEPLOY_GAS_LIMIT
    call_gas_limit: int = DEFAULT_CALL_GAS_LIMIT
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT
    log_level: str = "INFO"
    log_file: Optional[str] = DEFAULT_LOG_FILE

    @classmethod
    def from_env(cls) -> "DeploySettings":
        """
        Build settings from environment variables

        Raises:
            ConfigurationError: On malformed boolean or numeric values
        """
        return cls(
            network=_env_str('DEPLOY_NETWORK', DEFAULT_NETWORK),
            private_key=os.getenv('PRIVATE_KEY') or None,
            artifact_dir=_env_str('ARTIFACT_DIR', DEFAULT_ARTIFACT_DIR),
            contract_name=_env_str('CONTRACT_NAME', DEFAULT_CONTRACT_NAME),
            record_path=_env_str('DEPLOYMENT_RECORD_PATH', DEFAULT_RECORD_PATH),
            initial_value=_env_bool('INITIAL_VALUE', True),
            allow_unfunded=_env_bool('ALLOW_UNFUNDED', False),
            deploy_gas_limit=_env_number('DEPLOY_GAS_LIMIT', DEFAULT_DEPLOY_GAS_LIMIT),
            call_gas_limit=_env_number('CALL_GAS_LIMIT', DEFAULT_CALL_GAS_LIMIT),
            receipt_timeout=_env_number('RECEIPT_TIMEOUT', DEFAULT_RECEIPT_TIMEOUT, float),
            log_level=_env_str('LOG_LEVEL', 'INFO'),
            log_file=os.getenv('LOG_FILE', DEFAULT_LOG_FILE) or None,
        )
