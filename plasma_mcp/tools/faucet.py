"""Faucet tool."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from plasma_mcp.config import PlasmaConfig, default_config
from plasma_mcp.faucet import request_from_faucet
from plasma_mcp.tools.validators import require_address, require_choice

logger = logging.getLogger(__name__)


async def request_faucet(
    address: str,
    faucet_name: Optional[str] = None,
    *,
    config: PlasmaConfig = default_config,
    http_client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    """Request testnet XPL for an address, or explain how to do it manually."""
    address = require_address(address, "address")
    faucet_name = require_choice(
        faucet_name if faucet_name is not None else config.default_faucet,
        "faucetName",
        config.faucets.keys(),
    )
    faucet = config.faucets[faucet_name]
    result = await request_from_faucet(faucet, address, config=config, http_client=http_client)
    payload = result.to_dict()
    payload["address"] = address
    return payload
