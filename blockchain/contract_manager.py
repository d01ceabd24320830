"""
Contract Manager
Handles calls to a deployed Flipper contract
"""

from typing import Any, Dict, List
from web3 import AsyncWeb3, Web3
from loguru import logger

from utils.exceptions import TransactionRevertedError
from .artifacts import READ_METHOD, TOGGLE_METHOD
from .transaction_builder import DEFAULT_RECEIPT_TIMEOUT, TransactionBuilder


DEFAULT_CALL_GAS_LIMIT = 1_000_000


class FlipperContract:
    """
    Handle on a deployed Flipper contract

    get() is a read-only eth_call; flip() is a signed transaction that
    returns once it has been mined.
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        address: str,
        abi: List[Dict[str, Any]],
        tx_builder: TransactionBuilder,
        gas_limit: int = DEFAULT_CALL_GAS_LIMIT,
        receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT
    ):
        """
        Initialize contract handle

        Args:
            w3: Web3 client
            address: Deployed contract address
            abi: Contract ABI
            tx_builder: Builds and sends transactions as the deployer
            gas_limit: Gas ceiling for flip()
            receipt_timeout: Seconds to wait for flip() to be mined
        """
        self.w3 = w3
        self.address = Web3.to_checksum_address(address)
        self.tx_builder = tx_builder
        self.gas_limit = gas_limit
        self.receipt_timeout = receipt_timeout

        self.contract = w3.eth.contract(address=self.address, abi=abi)

    async def get(self) -> bool:
        """Read the stored value"""
        value = await getattr(self.contract.functions, READ_METHOD)().call()
        return bool(value)

    async def flip(self) -> str:
        """
        Invert the stored value and wait for the transaction to be mined

        Returns:
            Transaction hash

        Raises:
            TransactionRevertedError: If the transaction was mined with status 0
        """
        call = getattr(self.contract.functions, TOGGLE_METHOD)()
        tx = await self.tx_builder.build(call, self.gas_limit)
        tx_hash = await self.tx_builder.send(tx)

        logger.debug(f"{TOGGLE_METHOD}() sent: {tx_hash}")

        receipt = await self.tx_builder.wait(tx_hash, timeout=self.receipt_timeout)

        if receipt['status'] != 1:
            raise TransactionRevertedError(tx_hash, f"{TOGGLE_METHOD}()")

        return tx_hash
