"""
Transaction Builder
Builds, signs and submits the deployer's transactions
"""

from typing import Any, Dict
from web3 import AsyncWeb3, Web3
from loguru import logger

from .nonce_manager import NonceManager


DEFAULT_RECEIPT_TIMEOUT = 120  # seconds


class TransactionBuilder:
    """
    Turns contract calls into signed raw transactions

    Every transaction gets an explicit gas ceiling, the next local nonce,
    the current gas price and the network's chain id.
    """

    def __init__(self, w3: AsyncWeb3, wallet_manager, nonce_manager: NonceManager, chain_id: int):
        """
        Initialize Transaction Builder

        Args:
            w3: Web3 client
            wallet_manager: Signs transactions and provides the sender address
            nonce_manager: Allocates nonces
            chain_id: Target chain id
        """
        self.w3 = w3
        self.wallet_manager = wallet_manager
        self.nonce_manager = nonce_manager
        self.chain_id = chain_id

    async def build(self, call: Any, gas_limit: int) -> Dict:
        """
        Build a transaction dict for a constructor or function call

        Args:
            call: ContractConstructor or ContractFunction (web3)
            gas_limit: Fixed gas ceiling

        Returns:
            Transaction dict
        """
        gas_price = await self.w3.eth.gas_price
        nonce = await self.nonce_manager.get_nonce()

        return await call.build_transaction({
            'from': self.wallet_manager.address,
            'nonce': nonce,
            'gas': gas_limit,
            'gasPrice': gas_price,
            'chainId': self.chain_id
        })

    async def send(self, transaction: Dict) -> str:
        """
        Sign and broadcast a transaction

        Returns:
            Transaction hash as 0x-prefixed hex
        """
        try:
            signed_tx = self.wallet_manager.sign_transaction(transaction)
            tx_hash = await self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        except Exception:
            # The nonce was never consumed on-chain
            await self.nonce_manager.reset_nonce()
            raise

        tx_hash_hex = Web3.to_hex(tx_hash)
        logger.debug(f"Transaction sent: {tx_hash_hex}")
        return tx_hash_hex

    async def wait(self, tx_hash: str, timeout: float = DEFAULT_RECEIPT_TIMEOUT) -> Dict:
        """
        Wait until the transaction is mined

        Args:
            tx_hash: Transaction hash
            timeout: Seconds before web3 raises TimeExhausted

        Returns:
            Transaction receipt
        """
        return await self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
