"""
Artifact Loader
Loads the Flipper contract ABI and PolkaVM bytecode from the build directory
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
from loguru import logger

from utils.exceptions import ArtifactMalformedError, ArtifactNotFoundError


DEFAULT_ARTIFACT_DIR = "target/ink"
DEFAULT_CONTRACT_NAME = "flipper"

READ_METHOD = "get"
TOGGLE_METHOD = "flip"

# Where the ABI came from
SOURCE_ABI_FILE = "abi"
SOURCE_METADATA = "metadata"
SOURCE_SYNTHESIZED = "synthesized"


@dataclass(frozen=True)
class ContractArtifact:
    """Compiled contract ready for deployment."""

    abi: List[Dict[str, Any]]
    bytecode: bytes
    source: str = SOURCE_ABI_FILE

    @property
    def bytecode_hex(self) -> str:
        return "0x" + self.bytecode.hex()

    @property
    def size(self) -> int:
        return len(self.bytecode)


def get_artifact_paths(artifact_dir: Union[Path, str], contract_name: str) -> Tuple[Path, Path, Path]:
    """
    Conventional artifact file paths

    Returns:
        Tuple of (abi_path, metadata_path, bytecode_path)
    """
    base = Path(artifact_dir)
    return (
        base / f"{contract_name}.abi",
        base / f"{contract_name}.json",
        base / f"{contract_name}.polkavm",
    )


def minimal_flipper_abi() -> List[Dict[str, Any]]:
    """
    Solidity-style ABI for the Flipper contract

    Used when the toolchain only produced ink! metadata, which web3
    cannot read directly.
    """
    return [
        {
            "type": "constructor",
            "inputs": [{"name": "init_value", "type": "bool"}],
            "stateMutability": "nonpayable"
        },
        {
            "type": "function",
            "name": TOGGLE_METHOD,
            "inputs": [],
            "outputs": [],
            "stateMutability": "nonpayable"
        },
        {
            "type": "function",
            "name": READ_METHOD,
            "inputs": [],
            "outputs": [{"name": "", "type": "bool"}],
            "stateMutability": "view"
        }
    ]


def extract_abi(document: Any) -> Optional[List[Dict[str, Any]]]:
    """
    Pull an ABI out of the JSON shapes the toolchains produce

    Accepts a bare list, {"abi": [...]} (hardhat) or
    {"output": {"abi": [...]}} (solc standard JSON / resolc).

    Returns:
        The ABI list, or None if the document has no recognizable ABI
    """
    if isinstance(document, list):
        return document

    if not isinstance(document, dict):
        return None

    if isinstance(document.get("abi"), list):
        return document["abi"]

    output = document.get("output")
    if isinstance(output, dict) and isinstance(output.get("abi"), list):
        return output["abi"]

    return None


def _read_json(path: Path) -> Any:
    try:
        with open(path, 'r') as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ArtifactMalformedError(f"Cannot parse {path}: {e}") from e
    except OSError as e:
        raise ArtifactMalformedError(f"Cannot read {path}: {e}") from e


def validate_abi(abi: List[Dict[str, Any]], path: Optional[Path] = None):
    """
    Check the ABI has a constructor plus the accessor and toggle methods

    Raises:
        ArtifactMalformedError: If an entry is missing or not a dict
    """
    where = f" in {path}" if path else ""

    if not all(isinstance(entry, dict) for entry in abi):
        raise ArtifactMalformedError(f"ABI entries must be objects{where}")

    has_constructor = any(entry.get("type") == "constructor" for entry in abi)
    functions = {
        entry.get("name") for entry in abi
        if entry.get("type", "function") == "function"
    }

    missing = []
    if not has_constructor:
        missing.append("constructor")
    for method in (READ_METHOD, TOGGLE_METHOD):
        if method not in functions:
            missing.append(method)

    if missing:
        raise ArtifactMalformedError(f"ABI is missing {', '.join(missing)}{where}")


def load_artifact(
    artifact_dir: Union[Path, str] = DEFAULT_ARTIFACT_DIR,
    contract_name: str = DEFAULT_CONTRACT_NAME
) -> ContractArtifact:
    """
    Load ABI and bytecode for a contract

    Args:
        artifact_dir: Directory holding the build output
        contract_name: File stem of the artifacts

    Returns:
        ContractArtifact

    Raises:
        ArtifactNotFoundError: Bytecode file is missing or unreadable
        ArtifactMalformedError: Bytecode is empty or the ABI is unusable or unreadable
    """
    abi_path, metadata_path, bytecode_path = get_artifact_paths(artifact_dir, contract_name)

    if not bytecode_path.is_file():
        raise ArtifactNotFoundError(
            f"Contract bytecode not found: {bytecode_path} "
            "(build it with: cargo contract build --release --metadata solidity)"
        )

    try:
        bytecode = bytecode_path.read_bytes()
    except OSError as e:
        raise ArtifactNotFoundError(f"Contract bytecode cannot be read: {bytecode_path} ({e})") from e

    if not bytecode:
        raise ArtifactMalformedError(f"Contract bytecode is empty: {bytecode_path}")

    if abi_path.is_file():
        abi = extract_abi(_read_json(abi_path))
        if abi is None:
            raise ArtifactMalformedError(f"No ABI found in {abi_path}")
        validate_abi(abi, abi_path)
        source = SOURCE_ABI_FILE
        logger.debug(f"Using Solidity ABI file {abi_path}")

    elif metadata_path.is_file():
        abi = extract_abi(_read_json(metadata_path))
        if abi is not None:
            validate_abi(abi, metadata_path)
            source = SOURCE_METADATA
            logger.debug(f"Using ABI embedded in {metadata_path}")
        else:
            abi = minimal_flipper_abi()
            source = SOURCE_SYNTHESIZED
            logger.info(f"Converted ink! metadata {metadata_path} to a minimal Solidity ABI")

    else:
        abi = minimal_flipper_abi()
        source = SOURCE_SYNTHESIZED
        logger.warning(f"No ABI or metadata next to {bytecode_path}, using the minimal Flipper ABI")

    return ContractArtifact(abi=abi, bytecode=bytecode, source=source)
