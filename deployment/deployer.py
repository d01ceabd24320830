"""
Deployer
Submits the deployment transaction and tracks it to confirmation
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional
from web3 import AsyncWeb3, Web3
from loguru import logger

from blockchain.artifacts import ContractArtifact
from blockchain.networks import NetworkProfile
from blockchain.transaction_builder import DEFAULT_RECEIPT_TIMEOUT, TransactionBuilder
from utils.exceptions import InvalidTransitionError, TransactionRevertedError


# PolkaVM gas accounting differs from the EVM; a generous fixed ceiling
# avoids spurious out-of-gas failures.
DEFAULT_DEPLOY_GAS_LIMIT = 5_000_000


class DeploymentPhase(Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    CONFIRMED = "confirmed"
    FAILED = "failed"


TRANSITIONS = {
    DeploymentPhase.IDLE: {DeploymentPhase.SUBMITTING, DeploymentPhase.FAILED},
    DeploymentPhase.SUBMITTING: {DeploymentPhase.AWAITING_CONFIRMATION, DeploymentPhase.FAILED},
    DeploymentPhase.AWAITING_CONFIRMATION: {DeploymentPhase.CONFIRMED, DeploymentPhase.FAILED},
    DeploymentPhase.CONFIRMED: set(),
    DeploymentPhase.FAILED: set(),
}


@dataclass
class DeploymentAttempt:
    """State of one deployment, from submission to a terminal phase."""

    network: NetworkProfile
    deployer_address: str
    constructor_args: List[Any]
    phase: DeploymentPhase = DeploymentPhase.IDLE
    tx_hash: Optional[str] = None
    error: Optional[BaseException] = None
    _contract_address: Optional[str] = field(default=None, repr=False)

    @property
    def contract_address(self) -> Optional[str]:
        """Only available once the deployment is confirmed"""
        if self.phase is not DeploymentPhase.CONFIRMED:
            return None
        return self._contract_address

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[self.phase]

    def _transition(self, phase: DeploymentPhase):
        if phase not in TRANSITIONS[self.phase]:
            raise InvalidTransitionError(f"Cannot move from {self.phase.value} to {phase.value}")

        logger.debug(f"Deployment phase: {self.phase.value} -> {phase.value}")
        self.phase = phase

    def start(self):
        self._transition(DeploymentPhase.SUBMITTING)

    def submitted(self, tx_hash: str):
        self._transition(DeploymentPhase.AWAITING_CONFIRMATION)
        self.tx_hash = tx_hash

    def confirm(self, contract_address: str):
        self._transition(DeploymentPhase.CONFIRMED)
        self._contract_address = contract_address

    def fail(self, error: BaseException):
        self._transition(DeploymentPhase.FAILED)
        self.error = error


class Deployer:
    """
    Deploys a contract artifact as the wallet's account

    The attempt object is updated in place, so callers can inspect the
    phase reached even when deploy() raises.
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        tx_builder: TransactionBuilder,
        gas_limit: int = DEFAULT_DEPLOY_GAS_LIMIT,
        receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT
    ):
        """
        Initialize Deployer

        Args:
            w3: Web3 client
            tx_builder: Builds, signs and sends as the deployer
            gas_limit: Fixed gas ceiling for the deployment
            receipt_timeout: Seconds to wait for block inclusion
        """
        self.w3 = w3
        self.tx_builder = tx_builder
        self.gas_limit = gas_limit
        self.receipt_timeout = receipt_timeout

    async def deploy(self, attempt: DeploymentAttempt, artifact: ContractArtifact) -> DeploymentAttempt:
        """
        Run the attempt from IDLE to CONFIRMED

        Args:
            attempt: Fresh attempt in the IDLE phase
            artifact: Contract to deploy

        Returns:
            The confirmed attempt

        Raises:
            Whatever the network raised, or TransactionRevertedError;
            the attempt is left in FAILED with the cause attached
        """
        attempt.start()

        try:
            factory = self.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode_hex)
            constructor = factory.constructor(*attempt.constructor_args)

            tx = await self.tx_builder.build(constructor, self.gas_limit)
            tx_hash = await self.tx_builder.send(tx)
            attempt.submitted(tx_hash)

            logger.info(f"Deployment transaction sent: {tx_hash}")
            logger.info("Waiting for deployment confirmation...")

            receipt = await self.tx_builder.wait(tx_hash, timeout=self.receipt_timeout)

            if receipt['status'] != 1:
                raise TransactionRevertedError(tx_hash, "deployment")

            contract_address = receipt['contractAddress']
            if not contract_address:
                raise TransactionRevertedError(tx_hash, "deployment (no contract address in receipt)")

            attempt.confirm(Web3.to_checksum_address(contract_address))

        except Exception as e:
            attempt.fail(e)
            raise

        logger.success(f"Contract deployed at {attempt.contract_address}")
        return attempt
