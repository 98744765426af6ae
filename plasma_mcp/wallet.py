"""Signing wallet built from the configured private key."""

from __future__ import annotations

from typing import Any, Dict

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import to_hex

from plasma_mcp.config import PlasmaConfig
from plasma_mcp.errors import ConfigurationError


class Wallet:
    """Holds a local signing account; key material never leaves process memory."""

    def __init__(self, account: LocalAccount) -> None:
        self._account = account

    @classmethod
    def from_private_key(cls, private_key: str) -> "Wallet":
        try:
            account = Account.from_key(private_key)
        except (ValueError, TypeError) as exc:
            raise ConfigurationError("WALLET_PRIVATE_KEY is not a valid private key") from exc
        return cls(account)

    @property
    def address(self) -> str:
        return self._account.address

    def sign_transaction(self, tx: Dict[str, Any]) -> str:
        """Sign a transaction dict and return the raw transaction as 0x-hex."""
        signed = self._account.sign_transaction(tx)
        return to_hex(signed.raw_transaction)

    def __repr__(self) -> str:
        return f"Wallet(address={self.address!r})"


def load_wallet(config: PlasmaConfig) -> Wallet:
    """
    Build the wallet for a write call.

    Raises:
        ConfigurationError: if no private key is configured.
    """
    if not config.private_key:
        raise ConfigurationError("WALLET_PRIVATE_KEY environment variable is required for transactions")
    return Wallet.from_private_key(config.private_key)
