"""
Deployment Runner
Entry-point logic for the scripted, interactive and debug modes
"""

import asyncio
from typing import Optional
from loguru import logger

from utils.exceptions import ConfigurationError
from utils.logger import setup_logging
from utils.rpc_manager import RPCManager

from .inputs import InputSource, InteractiveInputs, PresetInputs
from .pipeline import DeploymentOutcome, DeploymentPipeline
from .settings import DEFAULT_NETWORK, DeploySettings
from .wallet_manager import WalletManager


SCRIPTED = "scripted"
INTERACTIVE = "interactive"
DEBUG = "debug"

BANNERS = {
    SCRIPTED: "Flipper Smart Contract Deployment",
    INTERACTIVE: "Flipper Smart Contract Deployment (interactive)",
    DEBUG: "ink! Contract Deployment Debugger",
}


class DeploymentRunner:
    """Builds the pipeline for a mode and turns its outcome into an exit code"""

    def __init__(self, settings: DeploySettings, rpc_manager: Optional[RPCManager] = None):
        """
        Initialize runner

        Args:
            settings: Run configuration
            rpc_manager: Web3 client provider (HTTP by default)
        """
        self.settings = settings
        self.rpc_manager = rpc_manager or RPCManager()
        self.outcome: Optional[DeploymentOutcome] = None

    async def _execute(self, wallet: Optional[WalletManager], inputs: InputSource, network: Optional[str]) -> int:
        pipeline = DeploymentPipeline(self.settings, wallet, inputs, rpc_manager=self.rpc_manager)

        try:
            self.outcome = await pipeline.run(network)
        finally:
            await self.rpc_manager.close()

        return self.outcome.exit_code

    async def run_scripted(self) -> int:
        """Non-interactive: key from PRIVATE_KEY, target from DEPLOY_NETWORK"""
        if not self.settings.private_key:
            logger.error("Please set PRIVATE_KEY environment variable")
            logger.info("Example: PRIVATE_KEY=0x... python main.py")
            return 1

        try:
            wallet = WalletManager(self.settings.private_key)
        except ConfigurationError as e:
            logger.error(str(e))
            return 1

        inputs = PresetInputs(
            initial_value=self.settings.initial_value,
            allow_unfunded=self.settings.allow_unfunded
        )
        return await self._execute(wallet, inputs, self.settings.network or DEFAULT_NETWORK)

    async def run_interactive(self, inputs: Optional[InteractiveInputs] = None) -> int:
        """Prompts for the key, initial value and confirmations"""
        inputs = inputs or InteractiveInputs()

        private_key = self.settings.private_key or await inputs.ask_private_key(required=True)
        if not private_key:
            logger.error("A private key starting with 0x is required")
            return 1

        try:
            wallet = WalletManager(private_key)
        except ConfigurationError as e:
            logger.error(str(e))
            return 1

        return await self._execute(wallet, inputs, self.settings.network or DEFAULT_NETWORK)

    async def run_debug(self, inputs: Optional[InteractiveInputs] = None) -> int:
        """Surveys every network and lets the user pick an eligible one"""
        inputs = inputs or InteractiveInputs()

        private_key = self.settings.private_key or await inputs.ask_private_key(required=False)

        try:
            wallet = WalletManager.optional(private_key)
        except ConfigurationError as e:
            logger.error(str(e))
            return 1

        return await self._execute(wallet, inputs, None)

    async def run(self, mode: str) -> int:
        if mode == SCRIPTED:
            return await self.run_scripted()
        if mode == INTERACTIVE:
            return await self.run_interactive()
        if mode == DEBUG:
            return await self.run_debug()
        raise ValueError(f"Unknown mode: {mode}")


def main(mode: str = SCRIPTED) -> int:
    """
    Process entry point

    Returns:
        Exit code (0 on success or cancellation)
    """
    try:
        settings = DeploySettings.from_env()
    except ConfigurationError as e:
        setup_logging()
        logger.error(str(e))
        return 1

    setup_logging(settings.log_level, settings.log_file)

    logger.info("=" * 50)
    logger.info(BANNERS[mode])
    logger.info("=" * 50)

    runner = DeploymentRunner(settings)

    try:
        return asyncio.run(runner.run(mode))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except EOFError:
        logger.error("Input closed before the deployment was confirmed")
        return 1
