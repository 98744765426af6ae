"""
Configuration helpers for the Plasma MCP server.

This module centralizes RPC endpoint selection, wallet key loading, default
timeouts, and the static network/faucet metadata. No secrets are stored in the
repository; the wallet key is read from environment or a local file if present.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional

NATIVE_TOKEN = "NATIVE"
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Plasma Testnet
DEFAULT_CHAIN_ID = 9746
DEFAULT_RPC_URL = os.getenv("PLASMA_RPC_URL", "https://testnet-rpc.plasma.to")
DEFAULT_NETWORK_NAME = "Plasma Testnet"
DEFAULT_EXPLORER_URL = "https://testnet.plasmascan.to"
NATIVE_SYMBOL = "XPL"
NATIVE_NAME = "Plasma"
NATIVE_DECIMALS = 18

# Private key handling
PRIVATE_KEY_ENV_VAR = "WALLET_PRIVATE_KEY"
PRIVATE_KEY_FILE_ENV_VAR = "WALLET_PRIVATE_KEY_FILE"


def _load_float(env_var: str, default: float) -> float:
    raw_value = os.getenv(env_var)
    if raw_value:
        try:
            return float(raw_value)
        except ValueError:
            return default
    return default


DEFAULT_TIMEOUT = _load_float("PLASMA_HTTP_TIMEOUT", 10.0)
DEFAULT_TX_TIMEOUT = _load_float("PLASMA_TX_TIMEOUT", 120.0)
DEFAULT_TX_POLL_INTERVAL = _load_float("PLASMA_TX_POLL_INTERVAL", 1.0)
DEFAULT_FAUCET_TIMEOUT = 10.0
DEFAULT_FAUCET = "gasZip"
MAX_LATEST_BLOCKS = 20
DEFAULT_LATEST_BLOCKS = 5
LOG_LEVEL = os.getenv("PLASMA_MCP_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("PLASMA_MCP_LOG_FORMAT", "json")  # json or plain


@dataclass(frozen=True, slots=True)
class FaucetDescriptor:
    """Static metadata for a testnet faucet."""

    name: str
    url: str
    amount: str
    cooldown_seconds: int
    api_url: Optional[str] = None


def _default_tokens() -> Dict[str, str]:
    # WXPL doubles as the WETH equivalent. Token contracts are not deployed yet.
    return {
        "xpl": NATIVE_TOKEN,
        "native": NATIVE_TOKEN,
        "wxpl": ZERO_ADDRESS,
        "weth": ZERO_ADDRESS,
        "usdt": ZERO_ADDRESS,
        "usdc": ZERO_ADDRESS,
    }


def _default_faucets() -> Dict[str, FaucetDescriptor]:
    return {
        "gasZip": FaucetDescriptor(
            name="gasZip",
            url="https://gas.zip/faucet/plasma",
            # Unverified endpoint; the automated path is best-effort.
            api_url="https://api.gas.zip/v1/faucet/plasma",
            amount="10",
            cooldown_seconds=86400,
        ),
        "quickNode": FaucetDescriptor(
            name="quickNode",
            url="https://faucet.quicknode.com/plasma/testnet",
            api_url=None,
            amount="1",
            cooldown_seconds=43200,
        ),
    }


def load_private_key() -> Optional[str]:
    """
    Load the wallet private key from environment or a local file.

    Returns:
        The key string if available, otherwise None. The key is never logged
        or returned to callers.
    """
    env_key = os.getenv(PRIVATE_KEY_ENV_VAR)
    if env_key:
        return env_key.strip()

    key_path = os.getenv(PRIVATE_KEY_FILE_ENV_VAR)
    if key_path:
        path = Path(key_path)
        if path.is_file():
            return path.read_text(encoding="utf-8").strip() or None

    return None


@dataclass(frozen=True, slots=True)
class PlasmaConfig:
    """Runtime configuration for the Plasma network and the MCP surface."""

    chain_id: int = DEFAULT_CHAIN_ID
    rpc_url: str = DEFAULT_RPC_URL
    name: str = DEFAULT_NETWORK_NAME
    native_symbol: str = NATIVE_SYMBOL
    native_name: str = NATIVE_NAME
    native_decimals: int = NATIVE_DECIMALS
    explorer_url: str = DEFAULT_EXPLORER_URL
    tokens: Mapping[str, str] = field(default_factory=_default_tokens)
    faucets: Mapping[str, FaucetDescriptor] = field(default_factory=_default_faucets)
    default_faucet: str = DEFAULT_FAUCET
    timeout: float = DEFAULT_TIMEOUT
    tx_timeout: float = DEFAULT_TX_TIMEOUT
    tx_poll_interval: float = DEFAULT_TX_POLL_INTERVAL
    faucet_timeout: float = DEFAULT_FAUCET_TIMEOUT
    max_latest_blocks: int = MAX_LATEST_BLOCKS
    default_latest_blocks: int = DEFAULT_LATEST_BLOCKS
    private_key: Optional[str] = field(default_factory=load_private_key, repr=False)
    log_level: str = LOG_LEVEL
    log_format: str = LOG_FORMAT

    def __post_init__(self) -> None:
        # Copy into read-only views so callers cannot mutate shared config.
        object.__setattr__(self, "tokens", MappingProxyType(dict(self.tokens)))
        object.__setattr__(self, "faucets", MappingProxyType(dict(self.faucets)))

    @property
    def wallet_configured(self) -> bool:
        return bool(self.private_key)

    def tx_url(self, tx_hash: str) -> str:
        return f"{self.explorer_url.rstrip('/')}/tx/{tx_hash}"

    def address_url(self, address: str) -> str:
        return f"{self.explorer_url.rstrip('/')}/address/{address}"


default_config = PlasmaConfig()
