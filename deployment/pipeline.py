"""
Deployment Pipeline
Survey networks, deploy the Flipper contract, verify it and record the result
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from blockchain.artifacts import ContractArtifact, load_artifact
from blockchain.contract_manager import FlipperContract
from blockchain.funding import FundingStatus, survey_network
from blockchain.networks import NETWORKS, NetworkProfile, get_profile, list_profiles
from blockchain.nonce_manager import NonceManager
from blockchain.transaction_builder import TransactionBuilder
from utils.error_classifier import Diagnosis, classify_error
from utils.exceptions import ArtifactError, RecorderWriteError, UnknownNetworkError
from utils.gas_calculator import GasCalculator
from utils.rpc_manager import RPCManager

from .deployer import Deployer, DeploymentAttempt
from .events import DeploymentEvent, EventHandler, Level, Stage, log_event
from .inputs import InputSource
from .recorder import DeploymentRecord, write_record
from .settings import DeploySettings
from .verifier import VerificationResult, verify_toggle
from .wallet_manager import WalletManager


class OutcomeStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"
    SETUP_FAILED = "setup_failed"
    NO_ELIGIBLE_NETWORK = "no_eligible_network"
    CANCELLED = "cancelled"


@dataclass
class DeploymentOutcome:
    """Terminal result of one run."""

    status: OutcomeStatus
    network: Optional[NetworkProfile] = None
    attempt: Optional[DeploymentAttempt] = None
    verification: Optional[VerificationResult] = None
    record: Optional[DeploymentRecord] = None
    record_path: Optional[str] = None
    diagnosis: Optional[Diagnosis] = None
    reason: str = ""
    label: str = ""  # Failure kind for setup errors the classifier does not cover
    hint: str = ""
    surveyed: List[FundingStatus] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS

    @property
    def exit_code(self) -> int:
        return 0 if self.status in (OutcomeStatus.SUCCESS, OutcomeStatus.CANCELLED) else 1

    def summary(self) -> str:
        """One line describing how the run ended"""
        if self.status is OutcomeStatus.SUCCESS:
            line = (
                f"SUCCESS: deployed to {self.network.name} at {self.record.contract_address} "
                f"(tx {self.record.tx_hash}); get() {self.verification.initial_value} -> "
                f"{self.verification.final_value} after flip()"
            )
            if self.record_path is None:
                line += "; deployment record NOT saved"
            return line

        if self.label:
            return f"SETUP FAILED [{self.label}]: {self.reason} | Hint: {self.hint}"

        if self.diagnosis is not None:
            label = "FAILED" if self.status is OutcomeStatus.FAILED else "SETUP FAILED"
            where = f" on {self.network.name}" if self.network else ""
            return (
                f"{label} [{self.diagnosis.category.value}]{where}: "
                f"{self.diagnosis.message} | Hint: {self.diagnosis.hint}"
            )

        if self.status is OutcomeStatus.NO_ELIGIBLE_NETWORK:
            return f"NO ELIGIBLE NETWORK: {self.reason}"

        if self.status is OutcomeStatus.CANCELLED:
            return f"CANCELLED: {self.reason}"

        return f"{self.status.value.upper()}: {self.reason}"


UNKNOWN_NETWORK_LABEL = "UnknownNetwork"

NO_ELIGIBLE_HINT = (
    "make sure you have a valid private key, test tokens from the faucets, "
    "and a local development node running for local deployment"
)


class DeploymentPipeline:
    """
    One parameterized deployment flow for every entry point

    Progress is reported as DeploymentEvent values through on_event;
    the terminal result is returned as a DeploymentOutcome. Failures
    after network selection never propagate out of run().
    """

    def __init__(
        self,
        settings: DeploySettings,
        wallet: Optional[WalletManager],
        inputs: InputSource,
        rpc_manager: Optional[RPCManager] = None,
        on_event: EventHandler = log_event
    ):
        """
        Initialize pipeline

        Args:
            settings: Run configuration
            wallet: Deployer wallet (None = survey only, nothing is deployable)
            inputs: Source of interactive or preset decisions
            rpc_manager: Provides Web3 clients per network
            on_event: Receives progress events
        """
        self.settings = settings
        self.wallet = wallet
        self.inputs = inputs
        self.rpc_manager = rpc_manager or RPCManager()
        self.on_event = on_event

    def emit(self, stage: Stage, level: Level, message: str, **data):
        self.on_event(DeploymentEvent(stage=stage, level=level, message=message, data=data))

    async def survey(self, profiles: Sequence[NetworkProfile]) -> List[FundingStatus]:
        """
        Probe every network and check the deployer's balance on each

        Networks are surveyed concurrently; results keep the input order.
        """
        address = self.wallet.address if self.wallet else None

        statuses = await asyncio.gather(*(
            survey_network(self.rpc_manager.get_web3(profile), profile, address)
            for profile in profiles
        ))

        for status in statuses:
            self._report_status(status)

        return list(statuses)

    def _report_status(self, status: FundingStatus):
        name = status.network.name
        data = {"network": status.network.key, "reachable": status.reachable}

        if not status.reachable:
            self.emit(Stage.SURVEY, Level.ERROR, f"{name}: connection failed: {status.cause}", **data)
            return

        data["height"] = status.height
        self.emit(Stage.SURVEY, Level.SUCCESS, f"{name}: connection successful, block number: {status.height}", **data)

        if status.balance_wei is None:
            if status.cause:
                self.emit(Stage.SURVEY, Level.WARNING, f"{name}: balance check failed: {status.cause}", **data)
            return

        data["balance_wei"] = status.balance_wei
        if status.can_deploy:
            self.emit(
                Stage.SURVEY, Level.SUCCESS,
                f"{name}: balance {status.balance} {status.network.currency}, account has funds", **data
            )
        else:
            self.emit(
                Stage.SURVEY, Level.WARNING,
                f"{name}: no balance - get tokens from: {status.network.faucet_hint}", **data
            )

    async def _eligible(self, statuses: List[FundingStatus], allow_override: bool) -> List[FundingStatus]:
        eligible = [status for status in statuses if status.can_deploy]

        if eligible or not allow_override:
            return eligible

        # Funding is advisory: a reachable but empty account may be overridden
        overridable = [
            status for status in statuses
            if status.reachable and status.balance_wei == 0
        ]
        for status in overridable:
            if await self.inputs.confirm_unfunded(status):
                self.emit(
                    Stage.SELECTION, Level.WARNING,
                    f"Proceeding on {status.network.name} despite zero balance",
                    network=status.network.key
                )
                eligible.append(status)

        return eligible

    async def run(self, network: Optional[str] = None) -> DeploymentOutcome:
        """
        Run the whole flow

        Args:
            network: Target network key; None surveys every registered
                network and lets the input source choose

        Returns:
            DeploymentOutcome
        """
        try:
            profiles = [get_profile(network)] if network is not None else list_profiles()
        except UnknownNetworkError as e:
            self.emit(Stage.SELECTION, Level.ERROR, str(e), network=network)
            return self._finish(DeploymentOutcome(
                status=OutcomeStatus.SETUP_FAILED,
                label=UNKNOWN_NETWORK_LABEL,
                reason=str(e),
                hint=f"choose one of: {', '.join(NETWORKS)} (set DEPLOY_NETWORK)",
            ))

        statuses = await self.survey(profiles)

        if self.wallet is None:
            return self._finish(DeploymentOutcome(
                status=OutcomeStatus.NO_ELIGIBLE_NETWORK,
                reason=f"no private key supplied; {NO_ELIGIBLE_HINT}",
                surveyed=statuses
            ))

        eligible = await self._eligible(statuses, allow_override=network is not None)

        if not eligible:
            return self._finish(DeploymentOutcome(
                status=OutcomeStatus.NO_ELIGIBLE_NETWORK,
                reason=f"no networks available for deployment; {NO_ELIGIBLE_HINT}",
                surveyed=statuses
            ))

        selected = await self.inputs.select_network(eligible)

        if selected is None:
            return self._finish(DeploymentOutcome(
                status=OutcomeStatus.CANCELLED,
                reason="invalid network selection",
                surveyed=statuses
            ))

        self.emit(Stage.SELECTION, Level.INFO, f"Deploying to {selected.network.name}", network=selected.network.key)

        outcome = await self.deploy_to(selected.network)
        outcome.surveyed = statuses
        return self._finish(outcome)

    def _load_artifact(self) -> ContractArtifact:
        artifact = load_artifact(self.settings.artifact_dir, self.settings.contract_name)
        self.emit(
            Stage.ARTIFACT, Level.SUCCESS,
            f"Contract ABI ({artifact.source}) and bytecode loaded, size: {artifact.size} bytes",
            source=artifact.source, size=artifact.size
        )
        return artifact

    async def deploy_to(self, profile: NetworkProfile) -> DeploymentOutcome:
        """
        Load the artifact, deploy it to one network, verify and record

        Args:
            profile: Target network (already selected)

        Returns:
            DeploymentOutcome (never raises for network or contract failures)
        """
        w3 = self.rpc_manager.get_web3(profile)

        try:
            artifact = self._load_artifact()
        except ArtifactError as e:
            diagnosis = classify_error(e, profile)
            self.emit(Stage.ARTIFACT, Level.ERROR, str(e), category=diagnosis.category.value)
            return DeploymentOutcome(status=OutcomeStatus.SETUP_FAILED, network=profile, diagnosis=diagnosis)

        constructor_args = await self.inputs.constructor_args(self.settings.initial_value)

        calculator = GasCalculator(w3)
        estimate = await calculator.estimate_deployment(artifact, constructor_args, self.wallet.address)
        if estimate is None:
            self.emit(
                Stage.GAS, Level.WARNING,
                f"Gas estimation failed ({calculator.last_error}), trying deployment anyway",
                cause=calculator.last_error
            )
        else:
            self.emit(
                Stage.GAS, Level.INFO,
                f"Estimated gas: {estimate.gas} (~{estimate.cost_ether} {profile.currency})",
                gas=estimate.gas, gas_price_wei=estimate.gas_price_wei
            )

        if not await self.inputs.confirm_deploy(profile, artifact, constructor_args):
            return DeploymentOutcome(
                status=OutcomeStatus.CANCELLED,
                network=profile,
                reason="deployment cancelled by user"
            )

        nonce_manager = NonceManager(w3, self.wallet.address)
        tx_builder = TransactionBuilder(w3, self.wallet, nonce_manager, profile.chain_id)
        deployer = Deployer(
            w3,
            tx_builder,
            gas_limit=self.settings.deploy_gas_limit,
            receipt_timeout=self.settings.receipt_timeout
        )
        attempt = DeploymentAttempt(
            network=profile,
            deployer_address=self.wallet.address,
            constructor_args=list(constructor_args)
        )

        self.emit(Stage.DEPLOY, Level.INFO, f"Deploying contract with constructor args {constructor_args}")

        try:
            await deployer.deploy(attempt, artifact)
            self.emit(
                Stage.DEPLOY, Level.SUCCESS,
                f"Contract deployed successfully at {attempt.contract_address}",
                contract_address=attempt.contract_address, tx_hash=attempt.tx_hash
            )

            contract = FlipperContract(
                w3,
                attempt.contract_address,
                artifact.abi,
                tx_builder,
                gas_limit=self.settings.call_gas_limit,
                receipt_timeout=self.settings.receipt_timeout
            )
            expected = constructor_args[0] if len(constructor_args) == 1 else None
            verification = await verify_toggle(contract, expected_initial=expected)

        except Exception as e:
            diagnosis = classify_error(e, profile)
            stage = Stage.VERIFY if attempt.contract_address else Stage.DEPLOY
            self.emit(
                stage, Level.ERROR, f"{diagnosis.category.value}: {diagnosis.message}",
                category=diagnosis.category.value, phase=attempt.phase.value
            )
            return DeploymentOutcome(
                status=OutcomeStatus.FAILED,
                network=profile,
                attempt=attempt,
                diagnosis=diagnosis
            )

        self.emit(
            Stage.VERIFY, Level.SUCCESS,
            f"get() returned {verification.initial_value}, then {verification.final_value} after flip()",
            initial_value=verification.initial_value, final_value=verification.final_value
        )

        record = DeploymentRecord(
            network=profile.name,
            chain_id=profile.chain_id,
            contract_address=attempt.contract_address,
            deployer_address=self.wallet.address,
            constructor_args=list(constructor_args),
            tx_hash=attempt.tx_hash
        )

        record_path = None
        try:
            record_path = str(write_record(record, self.settings.record_path))
            self.emit(Stage.RECORD, Level.SUCCESS, f"Deployment info saved to {record_path}", path=record_path)
        except RecorderWriteError as e:
            # The contract is live regardless; report and keep the success
            self.emit(Stage.RECORD, Level.ERROR, str(e))

        return DeploymentOutcome(
            status=OutcomeStatus.SUCCESS,
            network=profile,
            attempt=attempt,
            verification=verification,
            record=record,
            record_path=record_path
        )

    def _finish(self, outcome: DeploymentOutcome) -> DeploymentOutcome:
        if outcome.succeeded:
            level = Level.SUCCESS
        elif outcome.status is OutcomeStatus.CANCELLED:
            level = Level.WARNING
        else:
            level = Level.ERROR

        self.emit(Stage.SUMMARY, level, outcome.summary(), status=outcome.status.value)
        return outcome
