"""Read-only projections of node state returned by the RPC client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


def parse_quantity(value: Any, *, default: Optional[int] = 0) -> Optional[int]:
    """Parse a JSON-RPC quantity ("0x1a", 26, "26") into an int."""
    if value is None:
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        raw = value.strip()
        try:
            if raw.startswith(("0x", "0X")):
                return int(raw, 16) if len(raw) > 2 else 0
            return int(raw, 10)
        except ValueError:
            return default
    return default


@dataclass(slots=True)
class ChainBlock:
    number: int
    hash: Optional[str]
    timestamp: int
    miner: Optional[str]
    transaction_count: int
    gas_used: int
    gas_limit: int
    base_fee_per_gas: Optional[int] = None

    @classmethod
    def from_rpc(cls, payload: Dict[str, Any]) -> "ChainBlock":
        transactions = payload.get("transactions") or []
        return cls(
            number=parse_quantity(payload.get("number")),
            hash=payload.get("hash"),
            timestamp=parse_quantity(payload.get("timestamp")),
            miner=payload.get("miner"),
            transaction_count=len(transactions) if isinstance(transactions, list) else 0,
            gas_used=parse_quantity(payload.get("gasUsed")),
            gas_limit=parse_quantity(payload.get("gasLimit")),
            base_fee_per_gas=parse_quantity(payload.get("baseFeePerGas"), default=None),
        )

    def summary(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "hash": self.hash,
            "timestamp": self.timestamp,
            "miner": self.miner,
            "transactions": self.transaction_count,
            "gasUsed": str(self.gas_used),
            "gasLimit": str(self.gas_limit),
        }


@dataclass(slots=True)
class ChainTransaction:
    hash: str
    from_address: Optional[str]
    to_address: Optional[str]
    value: int
    gas_price: int
    nonce: int
    block_number: Optional[int] = None

    @classmethod
    def from_rpc(cls, payload: Dict[str, Any]) -> "ChainTransaction":
        return cls(
            hash=payload.get("hash", ""),
            from_address=payload.get("from"),
            to_address=payload.get("to"),
            value=parse_quantity(payload.get("value")),
            gas_price=parse_quantity(payload.get("gasPrice")),
            nonce=parse_quantity(payload.get("nonce")),
            block_number=parse_quantity(payload.get("blockNumber"), default=None),
        )


@dataclass(slots=True)
class Receipt:
    transaction_hash: str
    status_code: int
    block_number: int
    gas_used: int
    contract_address: Optional[str] = None

    @classmethod
    def from_rpc(cls, payload: Dict[str, Any]) -> "Receipt":
        return cls(
            transaction_hash=payload.get("transactionHash", ""),
            status_code=parse_quantity(payload.get("status")),
            block_number=parse_quantity(payload.get("blockNumber")),
            gas_used=parse_quantity(payload.get("gasUsed")),
            contract_address=payload.get("contractAddress"),
        )

    @property
    def succeeded(self) -> bool:
        return self.status_code == 1

    @property
    def status(self) -> str:
        return "success" if self.succeeded else "failed"
