"""
Thin async JSON-RPC client for a Plasma (EVM-compatible) node.

Every public method issues exactly one JSON-RPC call (``wait_for_receipt`` polls
the receipt until it appears) and maps node failures to the exceptions in
``plasma_mcp.errors`` so the tool layer can turn them into user-facing messages.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

import httpx
from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi.exceptions import DecodingError
from eth_utils import decode_hex, function_signature_to_4byte_selector, to_hex

from plasma_mcp.config import PlasmaConfig, default_config
from plasma_mcp.errors import (
    BlockNotFoundError,
    ContractCallError,
    NodeUnreachableError,
    RemoteRpcError,
    TransactionTimeoutError,
)
from plasma_mcp.rpc.models import ChainBlock, ChainTransaction, Receipt, parse_quantity

logger = logging.getLogger(__name__)

# JSON-RPC error code used by geth-style nodes for reverted calls.
EXECUTION_REVERTED_CODE = 3


@dataclass(frozen=True, slots=True)
class ContractMethod:
    """Minimal ABI fragment for a read-only contract method."""

    name: str
    inputs: Tuple[str, ...]
    outputs: Tuple[str, ...]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.inputs)})"

    def encode_call(self, args: Sequence[Any] = ()) -> str:
        selector = function_signature_to_4byte_selector(self.signature)
        return to_hex(selector + abi_encode(list(self.inputs), list(args)))

    def decode_output(self, data: bytes) -> Any:
        values = abi_decode(list(self.outputs), data)
        return values[0] if len(values) == 1 else values


ERC20_READ_ABI: Dict[str, ContractMethod] = {
    "symbol": ContractMethod("symbol", (), ("string",)),
    "name": ContractMethod("name", (), ("string",)),
    "decimals": ContractMethod("decimals", (), ("uint8",)),
    "totalSupply": ContractMethod("totalSupply", (), ("uint256",)),
}


def _format_block_id(number_or_tag: int | str) -> str:
    if isinstance(number_or_tag, int):
        return hex(number_or_tag)
    return number_or_tag


class PlasmaRpcClient:
    """Async client for the JSON-RPC surface the tools need."""

    def __init__(
        self,
        config: PlasmaConfig | None = None,
        *,
        async_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or default_config
        self._client: Optional[httpx.AsyncClient] = async_client
        self._owns_client = async_client is None
        self._ids = itertools.count(1)

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, params: Optional[list] = None) -> Any:
        client = await self._get_client()
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }
        logger.debug("rpc method=%s", method)
        try:
            response = await client.post(self.config.rpc_url, json=payload)
        except httpx.RequestError as exc:
            logger.warning("Plasma RPC unreachable for method %s", method)
            raise NodeUnreachableError(f"RPC endpoint unreachable: {exc}") from exc

        if response.status_code >= 400:
            raise RemoteRpcError(
                f"RPC request failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise RemoteRpcError(
                "Unexpected response from node.", status_code=response.status_code
            ) from exc
        if not isinstance(data, dict):
            raise RemoteRpcError("Unexpected response from node.", status_code=response.status_code)

        error = data.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise RemoteRpcError(message or "RPC error", code=code, status_code=response.status_code)
        return data.get("result")

    async def get_chain_id(self) -> int:
        """Return the chain id reported by the node."""
        return parse_quantity(await self._request("eth_chainId"))

    async def get_block_number(self) -> int:
        """Return the latest block number."""
        return parse_quantity(await self._request("eth_blockNumber"))

    async def get_balance(self, address: str, block: int | str = "latest") -> int:
        """Return the native balance of an address in wei."""
        return parse_quantity(
            await self._request("eth_getBalance", [address, _format_block_id(block)])
        )

    async def get_transaction_count(self, address: str, block: int | str = "latest") -> int:
        """Return the nonce of an address."""
        return parse_quantity(
            await self._request("eth_getTransactionCount", [address, _format_block_id(block)])
        )

    async def get_block(self, number_or_tag: int | str = "latest") -> ChainBlock:
        """Return a block summary; raises BlockNotFoundError if the node has none."""
        payload = await self._request(
            "eth_getBlockByNumber", [_format_block_id(number_or_tag), False]
        )
        if not isinstance(payload, dict):
            raise BlockNotFoundError(f"Block {number_or_tag} not found")
        return ChainBlock.from_rpc(payload)

    async def get_transaction(self, tx_hash: str) -> Optional[ChainTransaction]:
        payload = await self._request("eth_getTransactionByHash", [tx_hash])
        if not isinstance(payload, dict):
            return None
        return ChainTransaction.from_rpc(payload)

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Receipt]:
        payload = await self._request("eth_getTransactionReceipt", [tx_hash])
        if not isinstance(payload, dict):
            return None
        return Receipt.from_rpc(payload)

    async def get_gas_price(self) -> int:
        """Return the current gas price in wei."""
        return parse_quantity(await self._request("eth_gasPrice"))

    async def estimate_gas(self, tx: Dict[str, Any]) -> int:
        """Estimate the gas limit for a transaction skeleton (int values are hex-encoded)."""
        encoded = {
            key: hex(value) if isinstance(value, int) else value
            for key, value in tx.items()
            if value is not None
        }
        return parse_quantity(await self._request("eth_estimateGas", [encoded]))

    async def get_code(self, address: str, block: int | str = "latest") -> bytes:
        code = await self._request("eth_getCode", [address, _format_block_id(block)])
        if not isinstance(code, str):
            return b""
        return decode_hex(code)

    async def is_contract(self, address: str) -> bool:
        return len(await self.get_code(address)) > 0

    async def send_raw_transaction(self, raw_transaction: str) -> str:
        """Submit a signed transaction and return its hash."""
        tx_hash = await self._request("eth_sendRawTransaction", [raw_transaction])
        if not isinstance(tx_hash, str):
            raise RemoteRpcError("Node did not return a transaction hash.")
        return tx_hash

    async def wait_for_receipt(
        self,
        tx_hash: str,
        *,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> Receipt:
        """Block until the transaction is mined or the timeout elapses."""
        timeout = self.config.tx_timeout if timeout is None else timeout
        poll_interval = self.config.tx_poll_interval if poll_interval is None else poll_interval
        deadline = time.monotonic() + timeout
        while True:
            receipt = await self.get_transaction_receipt(tx_hash)
            if receipt is not None:
                return receipt
            if time.monotonic() >= deadline:
                raise TransactionTimeoutError(
                    f"Transaction {tx_hash} not confirmed within {timeout:g} seconds"
                )
            await asyncio.sleep(poll_interval)

    async def call_contract_read(
        self,
        address: str,
        method: str,
        args: Sequence[Any] = (),
        *,
        abi: Dict[str, ContractMethod] = ERC20_READ_ABI,
    ) -> Any:
        """
        Execute a read-only contract call and decode its single return value.

        Raises:
            ContractCallError: if the call reverts, or the address has no code
                answering the method (empty or undecodable return data).
        """
        fragment = abi.get(method)
        if fragment is None:
            raise ValueError(f"Unknown contract method: {method}")
        call = {"to": address, "data": fragment.encode_call(args)}
        try:
            result = await self._request("eth_call", [call, "latest"])
        except RemoteRpcError as exc:
            if isinstance(exc, NodeUnreachableError):
                raise
            message = str(exc)
            if exc.code == EXECUTION_REVERTED_CODE or "revert" in message.lower():
                raise ContractCallError(f"{method}() reverted: {message}", code=exc.code) from exc
            raise
        data = decode_hex(result) if isinstance(result, str) else b""
        if not data:
            raise ContractCallError(f"{method}() returned no data; no contract at {address}")
        try:
            return fragment.decode_output(data)
        except DecodingError as exc:
            raise ContractCallError(f"{method}() returned undecodable data") from exc


default_client = PlasmaRpcClient()
