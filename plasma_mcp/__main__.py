"""Command-line entry point: ``python -m plasma_mcp [--transport stdio|http]``."""

from __future__ import annotations

import argparse
import asyncio
import os

from dotenv import load_dotenv


def main(argv=None) -> None:
    # Environment must be loaded before plasma_mcp.config reads it.
    load_dotenv()

    parser = argparse.ArgumentParser(prog="plasma-mcp", description="Plasma testnet MCP server")
    parser.add_argument("--transport", choices=["stdio", "http"], default="stdio")
    parser.add_argument("--host", default=os.getenv("PLASMA_MCP_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PLASMA_MCP_PORT", "8000")))
    args = parser.parse_args(argv)

    if args.transport == "http":
        import uvicorn

        uvicorn.run("plasma_mcp.server:app", host=args.host, port=args.port)
        return

    from plasma_mcp import stdio
    from plasma_mcp.logging_utils import configure_logging

    configure_logging()
    asyncio.run(stdio.serve())


if __name__ == "__main__":
    main()
