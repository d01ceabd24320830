"""
Error Classifier
Maps deployment failures to a fixed set of categories with remediation hints
"""

import asyncio
from dataclasses import dataclass
from enum import Enum

import aiohttp
from web3.exceptions import ContractLogicError, TimeExhausted

from .exceptions import ArtifactError, TransactionRevertedError, VerificationFailedError


class ErrorCategory(Enum):
    """Closed set of failure categories."""

    EXECUTION_REVERTED = "ExecutionReverted"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    NONCE_CONFLICT = "NonceConflict"
    NETWORK_UNREACHABLE = "NetworkUnreachable"
    ARTIFACT_ERROR = "ArtifactError"
    UNKNOWN = "Unknown"


HINTS = {
    ErrorCategory.EXECUTION_REVERTED: (
        "Contract execution reverted. This might be a PolkaVM compatibility issue: "
        "the network may not support this binary or the ink! runtime rejected it"
    ),
    ErrorCategory.INSUFFICIENT_FUNDS: "Insufficient funds for gas. Get more tokens from: {faucet}",
    ErrorCategory.NONCE_CONFLICT: (
        "Nonce issue: another transaction from this account is pending or was replaced. "
        "Wait for it to be mined and try again"
    ),
    ErrorCategory.NETWORK_UNREACHABLE: (
        "Could not reach {rpc_url}. Check the RPC endpoint; for local deployments make sure "
        "a development node is running (try: npx hardhat node)"
    ),
    ErrorCategory.ARTIFACT_ERROR: (
        "Contract files are missing or invalid. Build the contract first: "
        "cargo contract build --release --metadata solidity"
    ),
    ErrorCategory.UNKNOWN: "Unexpected error. Rerun with LOG_LEVEL=DEBUG for details",
}


# Lower-cased message fragments, checked in order
MESSAGE_PATTERNS = (
    (ErrorCategory.EXECUTION_REVERTED, ("execution reverted", "revert")),
    (ErrorCategory.INSUFFICIENT_FUNDS, ("insufficient funds", "insufficient balance")),
    (ErrorCategory.NONCE_CONFLICT, ("nonce", "replacement transaction underpriced", "already known")),
    (ErrorCategory.NETWORK_UNREACHABLE, (
        "network_error", "cannot connect", "connection", "timed out", "timeout", "unreachable",
    )),
)


CONNECTION_ERRORS = (aiohttp.ClientConnectionError, ConnectionError, asyncio.TimeoutError, TimeExhausted)


@dataclass(frozen=True)
class Diagnosis:
    """Classified failure."""

    category: ErrorCategory
    hint: str
    message: str


def _error_message(error: BaseException) -> str:
    try:
        message = str(error)
    except Exception:
        message = ""

    code = getattr(error, 'code', None)
    if code is not None:
        message = f"{message} {code}"

    return message or type(error).__name__


def _category_for(error: BaseException, message: str) -> ErrorCategory:
    if isinstance(error, ArtifactError):
        return ErrorCategory.ARTIFACT_ERROR

    if isinstance(error, (TransactionRevertedError, VerificationFailedError, ContractLogicError)):
        return ErrorCategory.EXECUTION_REVERTED

    if isinstance(error, CONNECTION_ERRORS):
        return ErrorCategory.NETWORK_UNREACHABLE

    lowered = message.lower()
    for category, fragments in MESSAGE_PATTERNS:
        if any(fragment in lowered for fragment in fragments):
            return category

    return ErrorCategory.UNKNOWN


def hint_for(category: ErrorCategory, profile=None) -> str:
    """Remediation hint for a category, filled in with network details"""
    return HINTS[category].format(
        faucet=profile.faucet_hint if profile else "the network's faucet",
        rpc_url=profile.rpc_url if profile else "the RPC endpoint",
    )


def classify_error(error: BaseException, profile=None) -> Diagnosis:
    """
    Classify a failure raised by any deployment stage

    Pure and total: the same error always yields the same category,
    and anything unrecognized is UNKNOWN.

    Args:
        error: The raised exception
        profile: Network the failure happened on (for the hint)

    Returns:
        Diagnosis
    """
    message = _error_message(error)

    try:
        category = _category_for(error, message)
    except Exception:
        category = ErrorCategory.UNKNOWN

    return Diagnosis(category=category, hint=hint_for(category, profile), message=message)
