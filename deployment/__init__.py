"""
Deployment Package
Deployer state machine, verification, recording and the pipeline that runs them
"""

from .deployer import Deployer, DeploymentAttempt, DeploymentPhase
from .verifier import VerificationResult, verify_toggle
from .recorder import DeploymentRecord, write_record
from .pipeline import DeploymentOutcome, DeploymentPipeline, OutcomeStatus
from .wallet_manager import WalletManager

__all__ = [
    'Deployer',
    'DeploymentAttempt',
    'DeploymentPhase',
    'VerificationResult',
    'verify_toggle',
    'DeploymentRecord',
    'write_record',
    'DeploymentOutcome',
    'DeploymentPipeline',
    'OutcomeStatus',
    'WalletManager'
]
