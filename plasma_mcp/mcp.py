"""
Lightweight JSON-RPC surface for MCP-style tooling.

This keeps a minimal, safe mapping of tool names to their implementations, the
dispatch and result wrapping shared by every transport, and the JSON-RPC envelope
served by the HTTP gateway. It is stateless; the caller must handle
authentication to whatever hosts this adapter.
"""

from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from plasma_mcp import __version__
from plasma_mcp.config import default_config
from plasma_mcp.errors import PlasmaMcpError, ValidationError
from plasma_mcp.metrics import default_metrics
from plasma_mcp.tools import (
    estimate_gas,
    get_account_balance,
    get_gas_price,
    get_latest_blocks,
    get_network_info,
    get_service_info,
    get_token_info,
    get_transaction_status,
    request_faucet,
    send_transaction,
    send_xpl,
)
from plasma_mcp.codec import ADDRESS_REGEX, DECIMAL_AMOUNT_REGEX
from plasma_mcp.tools.validators import HEX_DATA_REGEX, POSITIVE_INTEGER_REGEX, TX_HASH_REGEX

logger = logging.getLogger(__name__)

MCP_SERVER_NAME = "plasma-testnet-mcp"
MCP_SERVER_VERSION = __version__

ADDRESS_PATTERN = ADDRESS_REGEX.pattern
TX_HASH_PATTERN = TX_HASH_REGEX.pattern
AMOUNT_PATTERN = DECIMAL_AMOUNT_REGEX.pattern
HEX_DATA_PATTERN = HEX_DATA_REGEX.pattern
POSITIVE_INTEGER_PATTERN = POSITIVE_INTEGER_REGEX.pattern

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _address_schema(description: str) -> Dict[str, Any]:
    return {
        "type": "string",
        "description": description,
        "pattern": ADDRESS_PATTERN,
        "minLength": 42,
        "maxLength": 42,
    }


def _object_schema(properties: Dict[str, Any], required: List[str]) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": required,
        "additionalProperties": False,
    }


ToolCallable = Callable[..., Awaitable[Any]] | Callable[..., Any]


@dataclass(slots=True)
class ToolDefinition:
    name: str
    description: str
    params: Dict[str, Any]
    input_schema: Dict[str, Any]
    callable: ToolCallable
    # Wire argument names that do not map onto snake_case keyword names.
    argument_names: Dict[str, str] = field(default_factory=dict)

    def keyword_arguments(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Map wire arguments onto the handler's keyword names.

        Raises:
            ValidationError: for any argument the input schema does not declare;
                injected dependencies (client, config, wallet) are never bindable.
        """
        declared = self.input_schema.get("properties", {})
        for key in sorted(params):
            if key not in declared:
                raise ValidationError(key, "is not a recognised argument")
        return {
            self.argument_names.get(key, _CAMEL_BOUNDARY.sub("_", key).lower()): value
            for key, value in params.items()
        }


TOOL_REGISTRY: Dict[str, ToolDefinition] = {
    "getServiceInfo": ToolDefinition(
        name="getServiceInfo",
        description="Get MCP service information and status.",
        params={},
        input_schema=_object_schema({}, []),
        callable=get_service_info,
    ),
    "getNetworkInfo": ToolDefinition(
        name="getNetworkInfo",
        description="Get Plasma network information (chain id, block height, gas price).",
        params={},
        input_schema=_object_schema({}, []),
        callable=get_network_info,
    ),
    "getAccountBalance": ToolDefinition(
        name="getAccountBalance",
        description="Get the XPL balance and nonce for an address (defaults to the configured wallet).",
        params={"address": "string (optional)"},
        input_schema=_object_schema(
            {"address": _address_schema("Account address (0x-prefixed, 40 hex chars)")}, []
        ),
        callable=get_account_balance,
    ),
    "sendTransaction": ToolDefinition(
        name="sendTransaction",
        description="Send a custom transaction from the configured wallet.",
        params={
            "to": "string (required)",
            "value": "string (optional, XPL)",
            "data": "string (optional, 0x-hex)",
            "gasLimit": "string (optional)",
            "gasPrice": "string (optional, gwei)",
        },
        input_schema=_object_schema(
            {
                "to": _address_schema("Recipient address"),
                "value": {
                    "type": "string",
                    "description": "Amount of XPL to send (decimal)",
                    "pattern": AMOUNT_PATTERN,
                },
                "data": {
                    "type": "string",
                    "description": "Call data (0x-prefixed hex)",
                    "pattern": HEX_DATA_PATTERN,
                },
                "gasLimit": {
                    "type": "string",
                    "description": "Gas limit (estimated when omitted)",
                    "pattern": POSITIVE_INTEGER_PATTERN,
                },
                "gasPrice": {
                    "type": "string",
                    "description": "Gas price in gwei (network price when omitted)",
                    "pattern": AMOUNT_PATTERN,
                },
            },
            ["to"],
        ),
        callable=send_transaction,
    ),
    "sendXPL": ToolDefinition(
        name="sendXPL",
        description="Send native XPL to an address.",
        params={"to": "string (required)", "amount": "string (required, XPL)"},
        input_schema=_object_schema(
            {
                "to": _address_schema("Recipient address"),
                "amount": {
                    "type": "string",
                    "description": "Amount of XPL to send (decimal)",
                    "pattern": AMOUNT_PATTERN,
                },
            },
            ["to", "amount"],
        ),
        callable=send_xpl,
    ),
    "getTransactionStatus": ToolDefinition(
        name="getTransactionStatus",
        description="Check transaction status and confirmations by hash.",
        params={"txHash": "string (required)"},
        input_schema=_object_schema(
            {
                "txHash": {
                    "type": "string",
                    "description": "Transaction hash (0x-prefixed, 64 hex chars)",
                    "pattern": TX_HASH_PATTERN,
                    "minLength": 66,
                    "maxLength": 66,
                }
            },
            ["txHash"],
        ),
        callable=get_transaction_status,
    ),
    "requestFaucet": ToolDefinition(
        name="requestFaucet",
        description="Request testnet XPL from a faucet, or get manual instructions.",
        params={"address": "string (required)", "faucetName": "string (optional, gasZip|quickNode)"},
        input_schema=_object_schema(
            {
                "address": _address_schema("Address to fund"),
                "faucetName": {
                    "type": "string",
                    "description": "Faucet to use (default gasZip)",
                    "enum": list(default_config.faucets.keys()),
                },
            },
            ["address"],
        ),
        callable=request_faucet,
    ),
    "estimateGas": ToolDefinition(
        name="estimateGas",
        description="Estimate gas limit and cost for a transaction.",
        params={
            "from": "string (required)",
            "to": "string (required)",
            "value": "string (optional, XPL)",
            "data": "string (optional, 0x-hex)",
        },
        input_schema=_object_schema(
            {
                "from": _address_schema("Sender address"),
                "to": _address_schema("Recipient address"),
                "value": {"type": "string", "pattern": AMOUNT_PATTERN},
                "data": {"type": "string", "pattern": HEX_DATA_PATTERN},
            },
            ["from", "to"],
        ),
        callable=estimate_gas,
        argument_names={"from": "from_address"},
    ),
    "getLatestBlocks": ToolDefinition(
        name="getLatestBlocks",
        description="Get summaries of the latest blocks, newest first.",
        params={"count": "integer (optional, 1-20, default 5)"},
        input_schema=_object_schema(
            {
                "count": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": default_config.max_latest_blocks,
                    "default": default_config.default_latest_blocks,
                }
            },
            [],
        ),
        callable=get_latest_blocks,
    ),
    "getGasPrice": ToolDefinition(
        name="getGasPrice",
        description="Get the current gas price and base fee.",
        params={},
        input_schema=_object_schema({}, []),
        callable=get_gas_price,
    ),
    "getTokenInfo": ToolDefinition(
        name="getTokenInfo",
        description="Get token information by symbol or contract address.",
        params={"tokenAddress": "string (required, symbol or address)"},
        input_schema=_object_schema(
            {
                "tokenAddress": {
                    "type": "string",
                    "description": "Token contract address or known symbol (XPL, WXPL, USDT, USDC)",
                    "minLength": 1,
                }
            },
            ["tokenAddress"],
        ),
        callable=get_token_info,
    ),
}


def list_tools() -> List[Dict[str, Any]]:
    """Return a simple list of available tools."""
    return [
        {
            "name": tool.name,
            "description": tool.description,
            "params": tool.params,
            "inputSchema": tool.input_schema,
        }
        for tool in TOOL_REGISTRY.values()
    ]


async def call_tool(tool_name: str, params: Optional[Dict[str, Any]] = None) -> Any:
    """Dispatch to a tool by name."""
    params = params or {}
    tool = TOOL_REGISTRY.get(tool_name)
    if tool is None:
        return {"error": f"Unknown tool: {tool_name}"}

    try:
        kwargs = tool.keyword_arguments(params)
        result = tool.callable(**kwargs)
        if isinstance(result, Awaitable):
            return await result  # type: ignore[return-value]
        return result
    except PlasmaMcpError as exc:
        return {"error": str(exc)}
    except TypeError:
        logger.debug("tool=%s rejected parameters %s", tool_name, sorted(params))
        return {"error": "Invalid parameters."}
    except Exception:
        logger.exception("Unexpected error while calling tool %s", tool_name)
        return {"error": "Unexpected error while calling tool."}


def wrap_tool_result(result: Any) -> Dict[str, Any]:
    """Shape a tool output into a single MCP text content block."""
    if isinstance(result, dict) and set(result) == {"error"}:
        message = result.get("error") or "Error"
        return {"content": [{"type": "text", "text": str(message)}], "isError": True}
    return {"content": [{"type": "text", "text": json.dumps(result, indent=2)}]}


def _log_tool_result(
    tool_name: str, result: Any, request_id: Optional[str] = None, duration_ms: float = 0.0
) -> None:
    if isinstance(result, dict) and set(result) == {"error"}:
        logger.warning(
            "tool=%s outcome=error error=%s request_id=%s duration_ms=%.2f",
            tool_name,
            result.get("error"),
            request_id,
            duration_ms,
            extra={"tool": tool_name, "request_id": request_id, "error": result.get("error")},
        )
        default_metrics.record_tool(tool_name, success=False, duration_ms=duration_ms)
    else:
        logger.info(
            "tool=%s outcome=success request_id=%s duration_ms=%.2f",
            tool_name,
            request_id,
            duration_ms,
            extra={"tool": tool_name, "request_id": request_id},
        )
        default_metrics.record_tool(tool_name, success=True, duration_ms=duration_ms)


async def run_tool(tool_name: str, params: Optional[Dict[str, Any]] = None, request_id: Optional[str] = None) -> Any:
    """Call a tool, then log and record its outcome."""
    start = time.monotonic()
    result = await call_tool(tool_name, params)
    _log_tool_result(tool_name, result, request_id, (time.monotonic() - start) * 1000)
    return result


def jsonrpc_success(rpc_id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


def jsonrpc_error(rpc_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "error": {"code": code, "message": message}}


async def handle_message(body: Any, request_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Handle one JSON-RPC message.

    Supported methods:
      - initialize
      - list_tools / tools/list
      - call_tool / tools/call
      - notifications/* and any message without an id (no response)

    Returns:
        The JSON-RPC response payload, or None for notifications.
    """
    if not isinstance(body, dict):
        return jsonrpc_error(None, -32600, "Invalid request")

    method = body.get("method")
    rpc_id = body.get("id")
    raw_params = body.get("params")
    if raw_params is None:
        params: Dict[str, Any] = {}
    elif isinstance(raw_params, dict):
        params = raw_params
    else:
        return jsonrpc_error(rpc_id, -32602, "Invalid params")

    if not method:
        return jsonrpc_error(rpc_id, -32600, "Invalid request")

    # Notifications never get a response, not even an error.
    if "id" not in body or (isinstance(method, str) and method.startswith("notifications/")):
        logger.debug(
            "mcp notification method=%s request_id=%s",
            method,
            request_id,
            extra={"request_id": request_id},
        )
        return None

    if method == "initialize":
        protocol_version = params.get("protocolVersion")
        if not isinstance(protocol_version, str) or not protocol_version:
            return jsonrpc_error(rpc_id, -32602, "Invalid params")
        logger.debug(
            "mcp initialize requested protocol=%s request_id=%s",
            protocol_version,
            request_id,
            extra={"request_id": request_id},
        )
        return jsonrpc_success(
            rpc_id,
            {
                "protocolVersion": protocol_version,
                "serverInfo": {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION},
                "capabilities": {"tools": {"listChanged": False}},
            },
        )

    if method in ("list_tools", "tools/list"):
        return jsonrpc_success(rpc_id, {"tools": list_tools()})

    if method in ("call_tool", "tools/call"):
        tool_name = params.get("tool") or params.get("name")
        tool_params = params.get("params")
        if tool_params is None:
            tool_params = params.get("arguments") or {}
        if not isinstance(tool_name, str) or not tool_name.strip():
            return jsonrpc_error(rpc_id, -32602, "Invalid params")
        if not isinstance(tool_params, dict):
            return jsonrpc_error(rpc_id, -32602, "Invalid params")
        result = await run_tool(tool_name, tool_params, request_id)
        return jsonrpc_success(rpc_id, wrap_tool_result(result))

    if method == "initialized":
        logger.debug(
            "mcp initialized notification received request_id=%s",
            request_id,
            extra={"request_id": request_id},
        )
        return None

    if method == "ping":
        return jsonrpc_success(rpc_id, {})

    return jsonrpc_error(rpc_id, -32601, "Method not found")
