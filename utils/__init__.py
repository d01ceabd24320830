"""
Utilities Package
Error taxonomy and classification, gas estimation, RPC clients and logging
"""

from .error_classifier import Diagnosis, ErrorCategory, classify_error
from .gas_calculator import GasCalculator, GasEstimate
from .rpc_manager import RPCManager
from .logger import setup_logging

__all__ = [
    'Diagnosis',
    'ErrorCategory',
    'classify_error',
    'GasCalculator',
    'GasEstimate',
    'RPCManager',
    'setup_logging'
]
