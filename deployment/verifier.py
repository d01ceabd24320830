"""
Post-Deploy Verifier
Smoke-tests a deployed Flipper: read, flip, read again
"""

from dataclasses import dataclass
from typing import Optional
from loguru import logger

from blockchain.contract_manager import FlipperContract
from utils.exceptions import VerificationFailedError


@dataclass(frozen=True)
class VerificationResult:
    initial_value: bool
    final_value: bool
    flip_tx_hash: str

    @property
    def changed(self) -> bool:
        return self.initial_value != self.final_value


async def verify_toggle(contract: FlipperContract, expected_initial: Optional[bool] = None) -> VerificationResult:
    """
    Check the contract actually works, not just that it was mined

    Args:
        contract: Handle on the deployed contract
        expected_initial: Constructor value the first read must return

    Returns:
        VerificationResult

    Raises:
        VerificationFailedError: Wrong initial value, or flip() had no effect
        TransactionRevertedError: flip() was mined but reverted
    """
    initial_value = await contract.get()
    logger.info(f"Initial value: {initial_value}")

    if expected_initial is not None and initial_value != expected_initial:
        raise VerificationFailedError(
            f"get() returned {initial_value} right after deployment, expected {expected_initial}"
        )

    logger.info("Calling flip()...")
    flip_tx_hash = await contract.flip()

    final_value = await contract.get()
    logger.info(f"Value after flip: {final_value}")

    result = VerificationResult(
        initial_value=initial_value,
        final_value=final_value,
        flip_tx_hash=flip_tx_hash
    )

    if not result.changed:
        raise VerificationFailedError(
            f"flip() was mined ({flip_tx_hash}) but get() still returns {final_value}"
        )

    return result
