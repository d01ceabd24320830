"""
Network Registry
Static table of the networks a contract can be deployed to
"""

import os
from dataclasses import dataclass, replace
from typing import List

from utils.exceptions import UnknownNetworkError


@dataclass(frozen=True)
class NetworkProfile:
    """Connection details for one deployment target."""

    key: str  # Registry key, e.g. "polkadot-hub"
    name: str  # Human-readable name
    rpc_url: str
    chain_id: int
    faucet_hint: str  # Where to get test tokens
    currency: str = "ETH"
    rpc_url_env: str = ""  # Environment variable that overrides rpc_url


NETWORKS = {
    "polkadot-hub": NetworkProfile(
        key="polkadot-hub",
        name="Polkadot Hub Testnet",
        rpc_url="https://testnet-passet-hub-eth-rpc.polkadot.io",
        chain_id=420420422,
        faucet_hint="https://faucet.polkadot.io/?parachain=1111",
        currency="PAS",
        rpc_url_env="POLKADOT_HUB_RPC_URL",
    ),
    "local": NetworkProfile(
        key="local",
        name="Local Development",
        rpc_url="http://127.0.0.1:8545",
        chain_id=1337,
        faucet_hint="Built-in test accounts",
        currency="ETH",
        rpc_url_env="LOCAL_RPC_URL",
    ),
}


def _with_rpc_override(profile: NetworkProfile) -> NetworkProfile:
    override = os.getenv(profile.rpc_url_env) if profile.rpc_url_env else None
    if override:
        return replace(profile, rpc_url=override)
    return profile


def get_profile(key: str) -> NetworkProfile:
    """
    Look up a network profile by key

    Args:
        key: Registry key

    Returns:
        NetworkProfile (RPC URL overridden from the environment if set)

    Raises:
        UnknownNetworkError: If the key is not registered
    """
    try:
        profile = NETWORKS[key]
    except KeyError:
        known = ", ".join(NETWORKS)
        raise UnknownNetworkError(f"Unknown network '{key}' (known: {known})") from None

    return _with_rpc_override(profile)


def list_profiles() -> List[NetworkProfile]:
    """All registered profiles in declaration order"""
    return [_with_rpc_override(profile) for profile in NETWORKS.values()]
