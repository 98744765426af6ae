"""FastAPI application wiring Plasma MCP tools to HTTP routes."""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, Response

from plasma_mcp import __version__, mcp
from plasma_mcp.config import default_config
from plasma_mcp.logging_utils import configure_logging
from plasma_mcp.metrics import default_metrics
from plasma_mcp.rpc import default_client

logger = logging.getLogger(__name__)

configure_logging()
HEALTH_STATUS = {"status": "ok"}
APP_VERSION = __version__


@asynccontextmanager
async def lifespan(_app: FastAPI):
    logger.info(
        "Plasma MCP server starting network=%s rpc=%s wallet_configured=%s",
        default_config.name,
        default_config.rpc_url,
        default_config.wallet_configured,
    )
    yield
    await default_client.aclose()


app = FastAPI(
    title="Plasma Testnet MCP Server",
    description="Plasma testnet tool surface for LLM agents.",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def add_request_context(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    start = time.time()
    default_metrics.incr_request()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000
    default_metrics.record_duration(request_id, duration_ms)
    response.headers["X-Request-ID"] = request_id
    return response


async def _tool_response(request: Request, tool_name: str, **params: Any) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    arguments = {key: value for key, value in params.items() if value is not None}
    result = await mcp.run_tool(tool_name, arguments, request_id)
    return JSONResponse(content=result)


@app.get("/health")
async def health() -> JSONResponse:
    """Lightweight health endpoint for monitoring."""
    return JSONResponse(content=HEALTH_STATUS)


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Return in-process metrics snapshot."""
    return JSONResponse(content=default_metrics.snapshot())


@app.get("/tools/service_info")
async def service_info(request: Request) -> JSONResponse:
    """Proxy for getServiceInfo tool."""
    return await _tool_response(request, "getServiceInfo")


@app.get("/tools/network_info")
async def network_info(request: Request) -> JSONResponse:
    """Proxy for getNetworkInfo tool."""
    return await _tool_response(request, "getNetworkInfo")


@app.get("/tools/gas_price")
async def gas_price(request: Request) -> JSONResponse:
    """Proxy for getGasPrice tool."""
    return await _tool_response(request, "getGasPrice")


@app.get("/tools/balance/{address}")
async def balance(address: str, request: Request) -> JSONResponse:
    """Proxy for getAccountBalance tool."""
    return await _tool_response(request, "getAccountBalance", address=address)


@app.get("/tools/transaction/{tx_hash}")
async def transaction_status(tx_hash: str, request: Request) -> JSONResponse:
    """Proxy for getTransactionStatus tool."""
    return await _tool_response(request, "getTransactionStatus", txHash=tx_hash)


@app.get("/tools/blocks")
async def latest_blocks(request: Request, count: Optional[int] = Query(None)) -> JSONResponse:
    """Proxy for getLatestBlocks tool."""
    return await _tool_response(request, "getLatestBlocks", count=count)


@app.get("/tools/token/{token}")
async def token_info(token: str, request: Request) -> JSONResponse:
    """Proxy for getTokenInfo tool."""
    return await _tool_response(request, "getTokenInfo", tokenAddress=token)


@app.post("/mcp")
async def mcp_gateway(request: Request) -> Response:
    """Minimal JSON-RPC gateway for MCP-style integrations."""
    request_id = getattr(request.state, "request_id", None)
    start_time = time.time()
    try:
        body = await request.json()
    except ValueError:
        return JSONResponse(status_code=400, content=mcp.jsonrpc_error(None, -32700, "Parse error"))

    if not isinstance(body, dict):
        return JSONResponse(status_code=400, content=mcp.jsonrpc_error(None, -32600, "Invalid request"))

    payload = await mcp.handle_message(body, request_id=request_id)
    logger.debug(
        "mcp method=%s id=%s duration_ms=%.2f",
        body.get("method"),
        body.get("id"),
        (time.time() - start_time) * 1000,
        extra={"request_id": request_id},
    )
    if payload is None:
        # Notifications should not return a JSON-RPC response body.
        return Response(status_code=204)
    return JSONResponse(content=payload)


# Run with: uvicorn plasma_mcp.server:app --reload
