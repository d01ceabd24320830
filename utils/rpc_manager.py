"""
RPC Manager
Creates and caches one async Web3 client per deployment network
"""

from typing import Callable, Dict, Optional
from web3 import AsyncWeb3, AsyncHTTPProvider
from loguru import logger


def create_web3(profile) -> AsyncWeb3:
    """Default factory: HTTP JSON-RPC client for the profile's endpoint"""
    return AsyncWeb3(AsyncHTTPProvider(profile.rpc_url))


class RPCManager:
    """
    Owns the Web3 clients used during a run

    Clients are created lazily, one per network key, and closed
    together when the run ends.
    """

    def __init__(self, web3_factory: Optional[Callable[..., AsyncWeb3]] = None):
        """
        Initialize RPC Manager

        Args:
            web3_factory: Builds a client for a profile (defaults to HTTP)
        """
        self.web3_factory = web3_factory or create_web3
        self.w3_instances: Dict[str, AsyncWeb3] = {}

    def get_web3(self, profile) -> AsyncWeb3:
        """
        Get the Web3 client for a network, creating it on first use

        Args:
            profile: Target network

        Returns:
            AsyncWeb3 instance
        """
        w3 = self.w3_instances.get(profile.key)

        if w3 is None:
            w3 = self.web3_factory(profile)
            self.w3_instances[profile.key] = w3
            logger.debug(f"Created RPC client for {profile.name} ({profile.rpc_url})")

        return w3

    async def close(self):
        """Disconnect every client created so far"""
        for key, w3 in self.w3_instances.items():
            try:
                await w3.provider.disconnect()
            except Exception as e:
                logger.debug(f"Error closing RPC client for {key}: {e}")

        self.w3_instances.clear()
