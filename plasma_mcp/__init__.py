"""
Plasma Testnet MCP server package.

This package exposes LLM-friendly tools backed by the JSON-RPC interface of a
Plasma (EVM-compatible) testnet node. See DESIGN.md for full details.
"""

__version__ = "2.0.0"

__all__ = ["config", "__version__"]
