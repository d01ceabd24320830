"""
Account Funding Check
Decides whether an account can pay for a deployment on a network
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from web3 import AsyncWeb3, Web3
from loguru import logger

from .connectivity import ProbeResult, probe_network
from .networks import NetworkProfile


@dataclass(frozen=True)
class FundingStatus:
    """Reachability and balance of one network for the deployer."""

    network: NetworkProfile
    reachable: bool
    balance_wei: Optional[int] = None
    height: Optional[int] = None
    cause: Optional[str] = None

    @property
    def can_deploy(self) -> bool:
        return self.reachable and self.balance_wei is not None and self.balance_wei > 0

    @property
    def balance(self) -> Optional[Decimal]:
        """Balance in whole tokens"""
        if self.balance_wei is None:
            return None
        return Web3.from_wei(self.balance_wei, 'ether')


async def check_funding(
    w3: AsyncWeb3,
    profile: NetworkProfile,
    address: Optional[str],
    probe: ProbeResult
) -> FundingStatus:
    """
    Query the deployer's balance on a network that was already probed

    No balance query is made when the probe failed or no address is known.
    Never raises.

    Args:
        w3: Web3 client for the network
        profile: Network being checked
        address: Deployer address (None when no key was supplied)
        probe: Result of probe_network for the same network

    Returns:
        FundingStatus
    """
    if not probe.reachable:
        return FundingStatus(network=profile, reachable=False, cause=probe.cause)

    if not address:
        return FundingStatus(network=profile, reachable=True, height=probe.height)

    try:
        balance_wei = await w3.eth.get_balance(Web3.to_checksum_address(address))
    except Exception as e:
        logger.debug(f"Balance query on {profile.name} failed: {e}")
        return FundingStatus(
            network=profile,
            reachable=True,
            height=probe.height,
            cause=str(e) or type(e).__name__
        )

    return FundingStatus(
        network=profile,
        reachable=True,
        balance_wei=int(balance_wei),
        height=probe.height
    )


async def survey_network(w3: AsyncWeb3, profile: NetworkProfile, address: Optional[str]) -> FundingStatus:
    """Probe a network, then check the deployer's balance on it"""
    probe = await probe_network(w3, profile)
    return await check_funding(w3, profile, address, probe)
