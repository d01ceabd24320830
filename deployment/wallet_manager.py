"""
Wallet Manager
Holds the deployer account for the duration of a single run
"""

from typing import Dict, Optional
from eth_account import Account
from eth_account.signers.local import LocalAccount
from loguru import logger

from utils.exceptions import ConfigurationError


class WalletManager:
    """
    Wraps the deployer's signing key

    The key is only kept inside the eth_account LocalAccount; it is
    never logged and never written to the deployment record.
    """

    def __init__(self, private_key: str):
        """
        Initialize wallet manager

        Args:
            private_key: Hex private key (with or without 0x prefix)

        Raises:
            ConfigurationError: If the key is empty or not a valid key
        """
        if not private_key:
            raise ConfigurationError("A private key is required to deploy")

        try:
            self._account: LocalAccount = Account.from_key(private_key.strip())
        except (ValueError, TypeError) as e:
            # Do not echo the key material back in the error
            raise ConfigurationError(f"Invalid private key: {type(e).__name__}") from None

        self.address = self._account.address

        logger.info(f"Deployer wallet: {self.address}")

    @classmethod
    def optional(cls, private_key: Optional[str]) -> Optional["WalletManager"]:
        """Wallet for the key, or None when no key was given"""
        if not private_key:
            return None
        return cls(private_key)

    def sign_transaction(self, transaction: Dict):
        """
        Sign a transaction with the deployer key

        Args:
            transaction: Transaction dict

        Returns:
            Signed transaction
        """
        try:
            return self._account.sign_transaction(transaction)
        except Exception as e:
            logger.error(f"Error signing transaction: {e}")
            raise

    def __repr__(self) -> str:
        return f"WalletManager(address={self.address!r})"
