"""Account-related tools."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from plasma_mcp.codec import format_amount
from plasma_mcp.config import PlasmaConfig, default_config
from plasma_mcp.errors import ConfigurationError
from plasma_mcp.rpc import default_client
from plasma_mcp.tools.validators import optional_address
from plasma_mcp.wallet import Wallet, load_wallet

logger = logging.getLogger(__name__)


def _default_address(config: PlasmaConfig, wallet: Optional[Wallet]) -> str:
    if wallet is not None:
        return wallet.address
    if not config.wallet_configured:
        raise ConfigurationError("No address provided and no wallet configured")
    return load_wallet(config).address


async def get_account_balance(
    address: Optional[str] = None,
    *,
    client=default_client,
    config: PlasmaConfig = default_config,
    wallet: Optional[Wallet] = None,
) -> Dict[str, Any]:
    """
    Return the native balance, nonce and account kind for an address.

    Args:
        address: Address to inspect; defaults to the configured wallet.
        client: RPC client (override for testing).
        config: Network configuration.
        wallet: Optional signing wallet used for the default address.

    Returns:
        Dict with ``balance`` ("1.5 XPL"), ``balanceWei``, ``nonce``,
        ``isContract`` and an explorer link.
    """
    address = optional_address(address, "address") or _default_address(config, wallet)

    balance, nonce, is_contract = await asyncio.gather(
        client.get_balance(address),
        client.get_transaction_count(address),
        client.is_contract(address),
    )
    return {
        "address": address,
        "balance": format_amount(balance, config.native_symbol, config.native_decimals),
        "balanceWei": str(balance),
        "nonce": nonce,
        "isContract": is_contract,
        "network": {
            "name": config.name,
            "chainId": config.chain_id,
            "symbol": config.native_symbol,
        },
        "explorer": config.address_url(address),
    }
