"""LLM-facing tool implementations."""

from .network import get_gas_price, get_network_info, get_service_info
from .account import get_account_balance
from .transactions import estimate_gas, get_transaction_status, send_transaction, send_xpl
from .blocks import get_latest_blocks
from .tokens import get_token_info
from .faucet import request_faucet
from . import validators

__all__ = [
    "get_service_info",
    "get_network_info",
    "get_gas_price",
    "get_account_balance",
    "send_transaction",
    "send_xpl",
    "get_transaction_status",
    "estimate_gas",
    "get_latest_blocks",
    "get_token_info",
    "request_faucet",
    "validators",
]
