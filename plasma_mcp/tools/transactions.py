"""Transaction tools: sending, status lookup and gas estimation."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Tuple

from plasma_mcp.codec import GWEI_DECIMALS, format_amount, format_gwei, to_base_units, to_checksum
from plasma_mcp.config import PlasmaConfig, default_config
from plasma_mcp.errors import InsufficientBalanceError, NotFoundError
from plasma_mcp.rpc import Receipt, default_client
from plasma_mcp.tools.validators import (
    optional_amount,
    optional_hex_data,
    optional_integer_string,
    require_address,
    require_amount,
    require_tx_hash,
)
from plasma_mcp.wallet import Wallet, load_wallet

logger = logging.getLogger(__name__)

EMPTY_DATA = "0x"


async def _resolve_gas(
    client,
    skeleton: Dict[str, Any],
    *,
    address: str,
    gas_limit: Optional[int] = None,
    gas_price: Optional[int] = None,
) -> Tuple[int, int, int]:
    """Fill in gas limit, gas price and the pending nonce, fetching what is missing in parallel."""

    async def _gas_limit() -> int:
        return gas_limit if gas_limit is not None else await client.estimate_gas(skeleton)

    async def _gas_price() -> int:
        return gas_price if gas_price is not None else await client.get_gas_price()

    return await asyncio.gather(
        _gas_limit(),
        _gas_price(),
        client.get_transaction_count(address, "pending"),
    )


async def _sign_and_submit(
    client,
    wallet: Wallet,
    tx: Dict[str, Any],
    *,
    config: PlasmaConfig,
) -> Tuple[str, Receipt]:
    raw_transaction = wallet.sign_transaction(tx)
    tx_hash = await client.send_raw_transaction(raw_transaction)
    logger.info("Submitted transaction %s from %s", tx_hash, wallet.address)
    receipt = await client.wait_for_receipt(
        tx_hash, timeout=config.tx_timeout, poll_interval=config.tx_poll_interval
    )
    logger.info("Transaction %s mined in block %s status=%s", tx_hash, receipt.block_number, receipt.status)
    return tx_hash, receipt


async def send_transaction(
    to: str,
    value: Optional[str] = None,
    data: Optional[str] = None,
    gas_limit: Optional[str] = None,
    gas_price: Optional[str] = None,
    *,
    client=default_client,
    config: PlasmaConfig = default_config,
    wallet: Optional[Wallet] = None,
) -> Dict[str, Any]:
    """
    Sign and send a custom transaction from the configured wallet.

    Args:
        to: Recipient address.
        value: Amount of XPL to attach, as a decimal string (default 0).
        data: Call data as 0x-hex (default empty).
        gas_limit: Gas limit; estimated against the transaction when omitted.
        gas_price: Gas price in gwei; the current network price when omitted.

    Returns:
        Dict with the transaction hash, block, gas used and ``status``
        (``success`` iff the receipt status is 1, else ``failed``).
    """
    to = require_address(to, "to")
    value = optional_amount(value, "value")
    data = optional_hex_data(data, "data")
    gas_limit_value = optional_integer_string(gas_limit, "gasLimit", minimum=1)
    gas_price = optional_amount(gas_price, "gasPrice")

    value_wei = to_base_units(value, config.native_decimals, field="value") if value else 0
    gas_price_wei = (
        to_base_units(gas_price, GWEI_DECIMALS, field="gasPrice") if gas_price is not None else None
    )
    wallet = wallet or load_wallet(config)

    skeleton = {"from": wallet.address, "to": to, "value": value_wei, "data": data or EMPTY_DATA}
    resolved_gas_limit, resolved_gas_price, nonce = await _resolve_gas(
        client,
        skeleton,
        address=wallet.address,
        gas_limit=gas_limit_value,
        gas_price=gas_price_wei,
    )
    tx = {
        "to": to_checksum(to),
        "value": value_wei,
        "data": data or EMPTY_DATA,
        "gas": resolved_gas_limit,
        "gasPrice": resolved_gas_price,
        "nonce": nonce,
        "chainId": config.chain_id,
    }
    tx_hash, receipt = await _sign_and_submit(client, wallet, tx, config=config)
    return {
        "success": receipt.succeeded,
        "txHash": tx_hash,
        "from": wallet.address,
        "to": to,
        "value": format_amount(value_wei, config.native_symbol, config.native_decimals),
        "valueWei": str(value_wei),
        "blockNumber": receipt.block_number,
        "gasLimit": str(resolved_gas_limit),
        "gasPrice": format_gwei(resolved_gas_price),
        "gasUsed": str(receipt.gas_used),
        "status": receipt.status,
        "explorer": config.tx_url(tx_hash),
    }


async def send_xpl(
    to: str,
    amount: str,
    *,
    client=default_client,
    config: PlasmaConfig = default_config,
    wallet: Optional[Wallet] = None,
) -> Dict[str, Any]:
    """
    Transfer native XPL from the configured wallet.

    The balance check against amount + gasLimit x gasPrice is a point-in-time
    read; it is not atomic with submission.
    """
    to = require_address(to, "to")
    amount = require_amount(amount, "amount")
    amount_wei = to_base_units(amount, config.native_decimals)
    wallet = wallet or load_wallet(config)
    symbol = config.native_symbol
    decimals = config.native_decimals

    balance = await client.get_balance(wallet.address)
    if balance < amount_wei:
        raise InsufficientBalanceError(
            f"Insufficient balance. Have {format_amount(balance, symbol, decimals)}, "
            f"need {format_amount(amount_wei, symbol, decimals)}",
            required=amount_wei,
            available=balance,
        )

    skeleton = {"from": wallet.address, "to": to, "value": amount_wei, "data": EMPTY_DATA}
    gas_limit, gas_price, nonce = await _resolve_gas(client, skeleton, address=wallet.address)
    gas_cost = gas_limit * gas_price
    total_needed = amount_wei + gas_cost
    if balance < total_needed:
        shortfall = total_needed - balance
        raise InsufficientBalanceError(
            f"Insufficient balance for gas. Need {format_amount(gas_cost, symbol, decimals)} for gas, "
            f"short by {format_amount(shortfall, symbol, decimals)}",
            required=total_needed,
            available=balance,
        )

    tx = {
        "to": to_checksum(to),
        "value": amount_wei,
        "gas": gas_limit,
        "gasPrice": gas_price,
        "nonce": nonce,
        "chainId": config.chain_id,
    }
    tx_hash, receipt = await _sign_and_submit(client, wallet, tx, config=config)
    return {
        "success": receipt.succeeded,
        "from": wallet.address,
        "to": to,
        "amount": f"{amount} {symbol}",
        "amountWei": str(amount_wei),
        "txHash": tx_hash,
        "blockNumber": receipt.block_number,
        "gasUsed": str(receipt.gas_used),
        "status": receipt.status,
        "explorer": config.tx_url(tx_hash),
    }


async def get_transaction_status(
    tx_hash: str, *, client=default_client, config: PlasmaConfig = default_config
) -> Dict[str, Any]:
    """Report pending/success/failed and confirmations for a transaction hash."""
    tx_hash = require_tx_hash(tx_hash, "txHash")

    tx, receipt = await asyncio.gather(
        client.get_transaction(tx_hash),
        client.get_transaction_receipt(tx_hash),
    )
    if tx is None:
        raise NotFoundError("Transaction not found")

    if receipt is None:
        status = "pending"
        block_number = None
        confirmations = 0
        gas_used = None
    else:
        status = receipt.status
        block_number = receipt.block_number
        confirmations = await client.get_block_number() - receipt.block_number
        gas_used = str(receipt.gas_used)

    return {
        "txHash": tx_hash,
        "status": status,
        "blockNumber": block_number,
        "confirmations": confirmations,
        "from": tx.from_address,
        "to": tx.to_address,
        "value": format_amount(tx.value, config.native_symbol, config.native_decimals),
        "valueWei": str(tx.value),
        "nonce": tx.nonce,
        "gasPrice": format_gwei(tx.gas_price),
        "gasUsed": gas_used,
        "explorer": config.tx_url(tx_hash),
    }


async def estimate_gas(
    from_address: str,
    to: str,
    value: Optional[str] = None,
    data: Optional[str] = None,
    *,
    client=default_client,
    config: PlasmaConfig = default_config,
) -> Dict[str, Any]:
    """Estimate gas limit and total cost for a transaction."""
    from_address = require_address(from_address, "from")
    to = require_address(to, "to")
    value = optional_amount(value, "value")
    data = optional_hex_data(data, "data")
    value_wei = to_base_units(value, config.native_decimals, field="value") if value else 0

    tx = {"from": from_address, "to": to, "value": value_wei, "data": data or EMPTY_DATA}
    gas_limit, gas_price = await asyncio.gather(client.estimate_gas(tx), client.get_gas_price())
    gas_cost = gas_limit * gas_price
    return {
        "gasLimit": str(gas_limit),
        "gasPrice": format_gwei(gas_price),
        "gasPriceWei": str(gas_price),
        "estimatedCost": format_amount(gas_cost, config.native_symbol, config.native_decimals),
        "estimatedCostWei": str(gas_cost),
        "transaction": {
            "from": from_address,
            "to": to,
            "value": value or "0",
        },
    }
