"""
Testnet faucet advisor.

Tries the faucet's automated API once when one is configured and otherwise (or
on any failure) returns manual instructions pointing at the public faucet page.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import httpx

from plasma_mcp import __version__
from plasma_mcp.config import FaucetDescriptor, PlasmaConfig

logger = logging.getLogger(__name__)

USER_AGENT = f"Plasma-MCP-Server/{__version__}"
FAUCET_NETWORK = "plasma-testnet"


@dataclass(slots=True)
class FaucetGrant:
    faucet: str
    amount: str
    symbol: str
    next_request_time: int
    tx_hash: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "faucet": self.faucet,
            "txHash": self.tx_hash,
            "amount": f"{self.amount} {self.symbol}",
            "message": f"Successfully requested {self.amount} {self.symbol} from {self.faucet}",
            "nextRequestTime": self.next_request_time,
        }


@dataclass(slots=True)
class ManualFaucetInstructions:
    faucet: str
    url: str
    amount: str
    symbol: str
    instructions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "manual": True,
            "faucet": self.faucet,
            "url": self.url,
            "amount": f"{self.amount} {self.symbol}",
            "message": f"Please visit {self.url} to manually request {self.amount} {self.symbol} tokens",
            "instructions": list(self.instructions),
        }


FaucetResult = Union[FaucetGrant, ManualFaucetInstructions]


def manual_instructions(faucet: FaucetDescriptor, address: str, symbol: str) -> ManualFaucetInstructions:
    return ManualFaucetInstructions(
        faucet=faucet.name,
        url=faucet.url,
        amount=faucet.amount,
        symbol=symbol,
        instructions=[
            f"1. Open the URL: {faucet.url}",
            "2. Connect your wallet",
            f"3. Enter address: {address}",
            "4. Complete any verification (captcha, etc.)",
            '5. Click "Request Tokens"',
            "6. Wait for transaction confirmation",
        ],
    )


async def _request_automated(
    api_url: str,
    faucet: FaucetDescriptor,
    address: str,
    *,
    config: PlasmaConfig,
    http_client: Optional[httpx.AsyncClient],
) -> Optional[FaucetGrant]:
    payload = {"address": address, "network": FAUCET_NETWORK}
    headers = {"User-Agent": USER_AGENT}
    try:
        if http_client is None:
            async with httpx.AsyncClient(timeout=config.faucet_timeout) as client:
                response = await client.post(api_url, json=payload, headers=headers)
        else:
            response = await http_client.post(
                api_url, json=payload, headers=headers, timeout=config.faucet_timeout
            )
    except httpx.HTTPError as exc:
        logger.warning("Faucet API request failed for %s: %s", faucet.name, exc)
        return None

    if not response.is_success:
        logger.warning("Faucet API for %s returned HTTP %s", faucet.name, response.status_code)
        return None
    try:
        data = response.json()
    except ValueError:
        logger.warning("Faucet API for %s returned a non-JSON body", faucet.name)
        return None
    if not isinstance(data, dict) or not data.get("success"):
        logger.warning("Faucet API for %s did not report success", faucet.name)
        return None

    tx_hash = data.get("txHash")
    return FaucetGrant(
        faucet=faucet.name,
        amount=faucet.amount,
        symbol=config.native_symbol,
        next_request_time=int(time.time()) + faucet.cooldown_seconds,
        tx_hash=tx_hash if isinstance(tx_hash, str) else None,
    )


async def request_from_faucet(
    faucet: FaucetDescriptor,
    address: str,
    *,
    config: PlasmaConfig,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FaucetResult:
    """Attempt the automated faucet path once, falling back to manual instructions."""
    if faucet.api_url:
        grant = await _request_automated(
            faucet.api_url, faucet, address, config=config, http_client=http_client
        )
        if grant is not None:
            return grant
    return manual_instructions(faucet, address, config.native_symbol)
