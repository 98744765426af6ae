"""Exception taxonomy shared by the RPC adapter and the tool layer."""

from __future__ import annotations

from typing import Optional


class PlasmaMcpError(Exception):
    """Base exception for errors that are reported to the tool caller."""


class ValidationError(PlasmaMcpError):
    """Raised when tool input fails a structural check."""

    def __init__(self, field: str, rule: str) -> None:
        super().__init__(f"Invalid {field}: {rule}")
        self.field = field
        self.rule = rule


class InvalidAmountError(ValidationError):
    """Raised when a decimal amount cannot be converted to base units."""


class ConfigurationError(PlasmaMcpError):
    """Raised when a tool needs configuration that is absent (e.g. the wallet key)."""


class NotFoundError(PlasmaMcpError):
    """Raised when the node knows nothing about a transaction or block."""


class BlockNotFoundError(NotFoundError):
    """Raised when the node returns no block for a number or tag."""


class InsufficientBalanceError(PlasmaMcpError):
    """Raised by the pre-submission balance check."""

    def __init__(self, message: str, *, required: int, available: int) -> None:
        super().__init__(message)
        self.required = required
        self.available = available

    @property
    def shortfall(self) -> int:
        return max(self.required - self.available, 0)


class RemoteRpcError(PlasmaMcpError):
    """Raised when a JSON-RPC call against the node fails."""

    def __init__(
        self,
        message: str,
        *,
        code: Optional[int] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class NodeUnreachableError(RemoteRpcError):
    """Raised when the RPC endpoint cannot be reached."""


class TransactionTimeoutError(RemoteRpcError):
    """Raised when a submitted transaction is not mined within the configured bound."""


class ContractCallError(RemoteRpcError):
    """Raised when a read call reverts or targets an address without matching code."""
