"""
Gas Calculator
Best-effort pre-flight cost estimate for the deployment transaction
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Sequence
from web3 import AsyncWeb3, Web3
from loguru import logger


@dataclass(frozen=True)
class GasEstimate:
    """Estimated gas usage and price for one transaction."""

    gas: int
    gas_price_wei: int

    @property
    def cost_wei(self) -> int:
        return self.gas * self.gas_price_wei

    @property
    def cost_ether(self) -> Decimal:
        return Web3.from_wei(self.cost_wei, 'ether')

    @property
    def gas_price_gwei(self) -> Decimal:
        return Web3.from_wei(self.gas_price_wei, 'gwei')


class GasCalculator:
    """
    Estimates deployment cost

    Some PolkaVM endpoints reject eth_estimateGas for contract creation,
    so every failure here is reported as a warning and swallowed.
    """

    def __init__(self, w3: AsyncWeb3):
        """
        Initialize Gas Calculator

        Args:
            w3: Web3 client
        """
        self.w3 = w3
        self.last_error: Optional[str] = None

    async def get_gas_price(self) -> int:
        """Current network gas price in wei"""
        return int(await self.w3.eth.gas_price)

    async def estimate_deployment(
        self,
        artifact,
        constructor_args: Sequence[Any],
        from_address: str
    ) -> Optional[GasEstimate]:
        """
        Estimate gas for deploying the artifact

        Args:
            artifact: Contract to deploy
            constructor_args: Constructor arguments
            from_address: Deployer address

        Returns:
            GasEstimate, or None if the endpoint could not estimate
        """
        self.last_error = None

        try:
            factory = self.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode_hex)
            gas = await factory.constructor(*constructor_args).estimate_gas({
                'from': Web3.to_checksum_address(from_address)
            })
            gas_price = await self.get_gas_price()

        except Exception as e:
            self.last_error = str(e) or type(e).__name__
            logger.warning(f"Gas estimation failed: {self.last_error}")
            logger.info("Trying deployment anyway...")
            return None

        estimate = GasEstimate(gas=int(gas), gas_price_wei=gas_price)

        logger.debug(
            f"Estimated gas: {estimate.gas} @ {estimate.gas_price_gwei:.2f} gwei "
            f"= {estimate.cost_ether} (native)"
        )

        return estimate
