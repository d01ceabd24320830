"""
Blockchain Interaction Package
Network registry, connectivity and funding checks, artifacts and contract calls
"""

from .networks import NetworkProfile, get_profile, list_profiles
from .connectivity import ProbeResult, probe_network
from .funding import FundingStatus, check_funding, survey_network
from .artifacts import ContractArtifact, load_artifact
from .contract_manager import FlipperContract
from .transaction_builder import TransactionBuilder
from .nonce_manager import NonceManager

__all__ = [
    'NetworkProfile',
    'get_profile',
    'list_profiles',
    'ProbeResult',
    'probe_network',
    'FundingStatus',
    'check_funding',
    'survey_network',
    'ContractArtifact',
    'load_artifact',
    'FlipperContract',
    'TransactionBuilder',
    'NonceManager'
]
