"""Service and network information tools."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from plasma_mcp import __version__
from plasma_mcp.codec import format_gwei, to_decimal_string
from plasma_mcp.config import PlasmaConfig, default_config
from plasma_mcp.rpc import default_client

logger = logging.getLogger(__name__)

SERVICE_NAME = "Plasma Network MCP"
SERVICE_FEATURES = [
    "Native XPL transfers",
    "Custom transactions",
    "Transaction monitoring",
    "Faucet integration",
    "Gas estimation",
    "Block explorer",
    "Token metadata (pending token deployment)",
]


def get_service_info(*, config: PlasmaConfig = default_config) -> Dict[str, Any]:
    """Static metadata about the tool surface; makes no network call."""
    return {
        "name": SERVICE_NAME,
        "version": __version__,
        "network": config.name,
        "chainId": config.chain_id,
        "rpcUrl": config.rpc_url,
        "explorer": config.explorer_url,
        "features": list(SERVICE_FEATURES),
        "walletConfigured": config.wallet_configured,
        "status": "operational",
    }


async def get_network_info(
    *, client=default_client, config: PlasmaConfig = default_config
) -> Dict[str, Any]:
    """Chain id, block height and gas price fetched in parallel."""
    chain_id, block_number, gas_price = await asyncio.gather(
        client.get_chain_id(),
        client.get_block_number(),
        client.get_gas_price(),
    )
    return {
        "network": config.name,
        "chainId": chain_id,
        "blockNumber": block_number,
        "gasPrice": format_gwei(gas_price),
        "rpcUrl": config.rpc_url,
        "explorer": config.explorer_url,
    }


async def get_gas_price(
    *, client=default_client, config: PlasmaConfig = default_config
) -> Dict[str, Any]:
    """
    Current gas price in wei, gwei and XPL plus the latest block's base fee.

    Returns:
        Dict with ``gasPrice`` (wei/gwei/eth), ``baseFee`` ("N/A" on pre-London
        blocks), ``network`` and an ISO-8601 ``timestamp``.
    """
    gas_price, latest = await asyncio.gather(client.get_gas_price(), client.get_block("latest"))
    base_fee = (
        format_gwei(latest.base_fee_per_gas) if latest.base_fee_per_gas is not None else "N/A"
    )
    return {
        "gasPrice": {
            "wei": str(gas_price),
            "gwei": to_decimal_string(gas_price, 9),
            "eth": to_decimal_string(gas_price, config.native_decimals),
        },
        "baseFee": base_fee,
        "network": config.name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
