"""
Nonce Manager
Hands out sequential nonces for the deployer's transactions
"""

import asyncio
from typing import Optional
from web3 import AsyncWeb3, Web3
from loguru import logger


class NonceManager:
    """
    Manages transaction nonces for the deployer wallet

    Syncs once from the chain ('pending' count) and then allocates
    locally, so the deploy and flip transactions of one run never
    reuse a nonce.
    """

    def __init__(self, w3: AsyncWeb3, address: str):
        """
        Initialize Nonce Manager

        Args:
            w3: Web3 client
            address: Deployer address
        """
        self.w3 = w3
        self.address = Web3.to_checksum_address(address)

        self.current_nonce: Optional[int] = None
        self.lock = asyncio.Lock()

    async def _sync_nonce(self):
        """Sync nonce with blockchain"""
        self.current_nonce = await self.w3.eth.get_transaction_count(self.address, 'pending')
        logger.debug(f"Nonce synced: {self.current_nonce}")

    async def get_nonce(self) -> int:
        """
        Get next available nonce

        Returns:
            Next nonce to use
        """
        async with self.lock:
            if self.current_nonce is None:
                await self._sync_nonce()

            nonce = self.current_nonce
            self.current_nonce += 1

            logger.debug(f"Allocated nonce: {nonce}")
            return nonce

    async def reset_nonce(self):
        """Forget local state so the next allocation re-reads the chain"""
        async with self.lock:
            self.current_nonce = None
            logger.warning("Nonce state reset; will resync from chain")
