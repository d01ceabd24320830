"""
Deployment Recorder
Writes the summary of a successful deployment to a JSON file
"""

import json
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Union
from loguru import logger

from utils.exceptions import RecorderWriteError


DEFAULT_RECORD_PATH = "deployment.json"


@dataclass(frozen=True)
class DeploymentRecord:
    """Persisted result of a successful run."""

    network: str
    chain_id: int
    contract_address: str
    deployer_address: str
    constructor_args: List[Any]
    tx_hash: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "network": self.network,
            "chainId": self.chain_id,
            "contractAddress": self.contract_address,
            "deployerAddress": self.deployer_address,
            "constructorArgs": list(self.constructor_args),
            "deploymentTime": self.timestamp.isoformat().replace("+00:00", "Z"),
            "transactionHash": self.tx_hash,
        }


def write_record(record: DeploymentRecord, path: Union[Path, str] = DEFAULT_RECORD_PATH) -> Path:
    """
    Write the record, replacing any file left by an earlier run

    The JSON goes to a temporary file in the same directory first, so
    the target is either the old file or the complete new one.

    Args:
        record: Record to persist
        path: Target file

    Returns:
        Absolute path written

    Raises:
        RecorderWriteError: If the file could not be written
    """
    target = Path(path).absolute()

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(record.to_dict(), f, indent=2)
                f.write("\n")
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    except (OSError, TypeError, ValueError) as e:
        raise RecorderWriteError(f"Could not write deployment record to {target}: {e}") from e

    logger.info(f"Deployment info saved to {target}")
    return target
