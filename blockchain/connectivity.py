"""
Connectivity Probe
Checks that a network's RPC endpoint answers a block height query
"""

from dataclasses import dataclass
from typing import Optional
from web3 import AsyncWeb3
from loguru import logger

from .networks import NetworkProfile


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a single height query."""

    network: NetworkProfile
    reachable: bool
    height: Optional[int] = None
    cause: Optional[str] = None


async def probe_network(w3: AsyncWeb3, profile: NetworkProfile) -> ProbeResult:
    """
    Query the current block number of a network

    Never raises, so callers can keep probing other networks.

    Args:
        w3: Web3 client for the network
        profile: Network being probed

    Returns:
        ProbeResult with the height, or the failure cause
    """
    try:
        height = await w3.eth.block_number
    except Exception as e:
        logger.debug(f"Probe of {profile.name} failed: {e}")
        return ProbeResult(network=profile, reachable=False, cause=str(e) or type(e).__name__)

    return ProbeResult(network=profile, reachable=True, height=int(height))
