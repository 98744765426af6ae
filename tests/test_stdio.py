import asyncio
import json

import pytest
from mcp.shared.memory import create_connected_server_and_client_session

from plasma_mcp import mcp, stdio
from plasma_mcp.errors import InsufficientBalanceError, PlasmaMcpError

from conftest import SAMPLE_ADDRESS


@pytest.mark.asyncio
async def test_list_tools_exposes_registry():
    tools = await stdio.list_tools()
    assert {tool.name for tool in tools} == set(mcp.TOOL_REGISTRY)
    send = next(tool for tool in tools if tool.name == "sendXPL")
    assert send.inputSchema["required"] == ["to", "amount"]


@pytest.mark.asyncio
async def test_call_tool_returns_json_text():
    response = await stdio.call_tool("getServiceInfo", {})
    assert len(response) == 1
    assert response[0].type == "text"
    assert json.loads(response[0].text)["chainId"] == 9746


@pytest.mark.asyncio
async def test_call_tool_error_is_raised():
    with pytest.raises(PlasmaMcpError, match="Invalid address"):
        await stdio.call_tool("getAccountBalance", {"address": "bad"})


@pytest.mark.asyncio
async def test_call_tool_rejects_non_object_arguments():
    with pytest.raises(PlasmaMcpError, match="Expected an object"):
        await stdio.call_tool("getServiceInfo", ["x"])


@pytest.mark.asyncio
async def test_session_reports_error_results(monkeypatch):
    async def broke(**_kwargs):
        raise InsufficientBalanceError("Insufficient balance. Have 0.0 XPL, need 1.0 XPL", required=1, available=0)

    monkeypatch.setattr(mcp.TOOL_REGISTRY["sendXPL"], "callable", broke)
    async with create_connected_server_and_client_session(stdio.server) as session:
        result = await session.call_tool("sendXPL", {"to": SAMPLE_ADDRESS, "amount": "1"})
    assert result.isError is True
    assert result.content[0].text == "Insufficient balance. Have 0.0 XPL, need 1.0 XPL"


@pytest.mark.asyncio
async def test_slow_tool_does_not_block_ping(monkeypatch):
    release = asyncio.Event()
    started = asyncio.Event()

    async def slow_send(**_kwargs):
        started.set()
        await release.wait()
        return {"txHash": "0x" + "ab" * 32}

    monkeypatch.setattr(mcp.TOOL_REGISTRY["sendXPL"], "callable", slow_send)

    async with create_connected_server_and_client_session(stdio.server) as session:
        pending = asyncio.create_task(session.call_tool("sendXPL", {"to": SAMPLE_ADDRESS, "amount": "1"}))
        await asyncio.wait_for(started.wait(), 5)

        await asyncio.wait_for(session.send_ping(), 5)
        listed = await asyncio.wait_for(session.list_tools(), 5)
        assert len(listed.tools) == len(mcp.TOOL_REGISTRY)
        assert not pending.done()

        release.set()
        result = await asyncio.wait_for(pending, 5)

    assert not result.isError
    assert json.loads(result.content[0].text)["txHash"].startswith("0xab")
