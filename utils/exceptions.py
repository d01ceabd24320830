"""
Deployment Exceptions
Error taxonomy shared by every stage of the deployment pipeline
"""


class DeploymentError(Exception):
    """Base exception for deployment-related errors."""

    pass


class ConfigurationError(DeploymentError, ValueError):
    """Raised when required settings are missing or invalid."""

    pass


class UnknownNetworkError(DeploymentError, ValueError):
    """Raised when a network key is not in the registry."""

    pass


class ArtifactError(DeploymentError):
    """Base class for contract artifact problems."""

    pass


class ArtifactNotFoundError(ArtifactError, FileNotFoundError):
    """Raised when the compiled bytecode file is missing."""

    pass


class ArtifactMalformedError(ArtifactError, ValueError):
    """Raised when the bytecode is empty or the ABI cannot be parsed."""

    pass


class TransactionRevertedError(DeploymentError):
    """Raised when a mined transaction has status 0."""

    def __init__(self, tx_hash: str, action: str):
        self.tx_hash = tx_hash
        self.action = action
        super().__init__(f"execution reverted: {action} transaction {tx_hash} failed")


class VerificationFailedError(DeploymentError):
    """Raised when the deployed contract does not behave like a toggle."""

    pass


class RecorderWriteError(DeploymentError, OSError):
    """Raised when the deployment record cannot be written."""

    pass


class InvalidTransitionError(DeploymentError, RuntimeError):
    """Raised on an illegal deployment phase transition."""

    pass
