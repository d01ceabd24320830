"""
Input Sources
Answers to the questions a run may ask, either preset or typed at a terminal
"""

import asyncio
from typing import Any, Callable, List, Optional
from loguru import logger

from blockchain.artifacts import ContractArtifact
from blockchain.funding import FundingStatus
from blockchain.networks import NetworkProfile
from .settings import FALSE_VALUES


class InputSource:
    """Decisions the pipeline delegates to its caller."""

    async def constructor_args(self, default: bool) -> List[Any]:
        """Constructor arguments for the deployment"""
        raise NotImplementedError

    async def confirm_unfunded(self, status: FundingStatus) -> bool:
        """Whether to deploy from an account with no balance"""
        raise NotImplementedError

    async def select_network(self, candidates: List[FundingStatus]) -> Optional[FundingStatus]:
        """Pick a network among the eligible ones (None = abort)"""
        raise NotImplementedError

    async def confirm_deploy(
        self,
        profile: NetworkProfile,
        artifact: ContractArtifact,
        constructor_args: List[Any]
    ) -> bool:
        """Last chance to cancel before a transaction is sent"""
        raise NotImplementedError


class PresetInputs(InputSource):
    """Non-interactive answers supplied up front."""

    def __init__(
        self,
        initial_value: Optional[bool] = None,
        allow_unfunded: bool = False,
        network: Optional[str] = None
    ):
        """
        Args:
            initial_value: Constructor value (None = use the caller's default)
            allow_unfunded: Deploy even when the balance is zero
            network: Network key to pick (None = first eligible)
        """
        self.initial_value = initial_value
        self.allow_unfunded = allow_unfunded
        self.network = network

    async def constructor_args(self, default: bool) -> List[Any]:
        value = default if self.initial_value is None else self.initial_value
        return [value]

    async def confirm_unfunded(self, status: FundingStatus) -> bool:
        return self.allow_unfunded

    async def select_network(self, candidates: List[FundingStatus]) -> Optional[FundingStatus]:
        if not candidates:
            return None

        if self.network is None:
            return candidates[0]

        for status in candidates:
            if status.network.key == self.network:
                return status

        return None

    async def confirm_deploy(self, profile, artifact, constructor_args) -> bool:
        return True


class InteractiveInputs(InputSource):
    """Asks the user at the terminal."""

    def __init__(self, prompt: Optional[Callable[[str], str]] = None):
        """
        Args:
            prompt: Reads one answer (builtin input by default)
        """
        self.prompt = prompt or input

    async def ask(self, question: str) -> str:
        answer = await asyncio.to_thread(self.prompt, question)
        return (answer or "").strip()

    async def ask_yes_no(self, question: str) -> bool:
        return (await self.ask(question)).lower() == 'y'

    async def ask_private_key(self, required: bool = True) -> Optional[str]:
        """
        Ask for the deployer key

        Returns:
            The key, or None when skipped (only if not required)
        """
        logger.info("Please enter your private key (starts with 0x)")
        logger.info("You can get this from MetaMask -> Account Details -> Export Private Key")

        question = "Private Key: " if required else "Enter your private key (or press Enter to skip): "
        private_key = await self.ask(question)

        if not private_key:
            return None

        if not private_key.startswith('0x'):
            logger.error("Invalid private key format. Must start with 0x")
            return None

        return private_key

    async def constructor_args(self, default: bool) -> List[Any]:
        shown = "true" if default else "false"
        answer = (await self.ask(f"Enter initial boolean value (true/false) [default: {shown}]: ")).lower()

        if not answer:
            value = default
        else:
            value = answer not in FALSE_VALUES

        logger.info(f"Initial value will be: {value}")
        return [value]

    async def confirm_unfunded(self, status: FundingStatus) -> bool:
        return await self.ask_yes_no("Do you want to continue anyway? (y/N): ")

    async def select_network(self, candidates: List[FundingStatus]) -> Optional[FundingStatus]:
        if not candidates:
            return None

        logger.info("Available networks for deployment:")
        for i, status in enumerate(candidates, start=1):
            logger.info(f"   {i}. {status.network.name}")

        choice = await self.ask(f"Select network (1-{len(candidates)}): ")

        try:
            index = int(choice) - 1
        except ValueError:
            return None

        if 0 <= index < len(candidates):
            return candidates[index]
        return None

    async def confirm_deploy(self, profile, artifact, constructor_args) -> bool:
        return await self.ask_yes_no(f"Ready to deploy to {profile.name}? (y/N): ")
