"""Token metadata tool."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Union

from plasma_mcp.codec import is_native, resolve_token_address, to_decimal_string
from plasma_mcp.config import NATIVE_TOKEN, PlasmaConfig, default_config
from plasma_mcp.errors import ContractCallError
from plasma_mcp.rpc import default_client
from plasma_mcp.tools.validators import require_non_empty_string

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TokenInfo:
    address: str
    symbol: str
    name: str
    decimals: int
    total_supply: int
    kind: str = "ERC20"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "symbol": self.symbol,
            "name": self.name,
            "decimals": self.decimals,
            "totalSupply": to_decimal_string(self.total_supply, self.decimals),
            "totalSupplyRaw": str(self.total_supply),
            "type": self.kind,
        }


@dataclass(slots=True)
class TokenNotDeployed:
    address: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": "Token not found or not yet deployed",
            "found": False,
            "address": self.address,
            "note": "This token address may not be deployed on Plasma testnet yet",
        }


TokenLookup = Union[TokenInfo, TokenNotDeployed]


def native_token_info(config: PlasmaConfig) -> Dict[str, Any]:
    return {
        "symbol": config.native_symbol,
        "name": config.native_name,
        "decimals": config.native_decimals,
        "type": "native",
        "address": NATIVE_TOKEN,
    }


async def fetch_token_metadata(client, address: str) -> TokenLookup:
    """Run the four ERC20 reads in parallel; a failing read means the token is not deployed."""
    results = await asyncio.gather(
        client.call_contract_read(address, "symbol"),
        client.call_contract_read(address, "name"),
        client.call_contract_read(address, "decimals"),
        client.call_contract_read(address, "totalSupply"),
        return_exceptions=True,
    )
    for outcome in results:
        if isinstance(outcome, ContractCallError):
            logger.info("Token metadata unavailable for %s: %s", address, outcome)
            return TokenNotDeployed(address=address, reason=str(outcome))
    for outcome in results:
        if isinstance(outcome, BaseException):
            raise outcome
    symbol, name, decimals, total_supply = results
    return TokenInfo(
        address=address,
        symbol=symbol,
        name=name,
        decimals=int(decimals),
        total_supply=int(total_supply),
    )


async def get_token_info(
    token_address: str, *, client=default_client, config: PlasmaConfig = default_config
) -> Dict[str, Any]:
    """
    Return metadata for a token symbol or address.

    The native sentinel and unknown symbols yield the static native descriptor
    without touching the network.
    """
    token_address = require_non_empty_string(token_address, "tokenAddress")
    resolved = resolve_token_address(token_address, config.tokens)
    if resolved is None or is_native(resolved):
        return native_token_info(config)

    result = await fetch_token_metadata(client, resolved)
    return result.to_dict()
