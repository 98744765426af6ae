"""JSON-RPC client wrappers for the Plasma node."""

from .client import ERC20_READ_ABI, ContractMethod, PlasmaRpcClient, default_client
from .models import ChainBlock, ChainTransaction, Receipt

__all__ = [
    "PlasmaRpcClient",
    "ContractMethod",
    "ERC20_READ_ABI",
    "ChainBlock",
    "ChainTransaction",
    "Receipt",
    "default_client",
]
