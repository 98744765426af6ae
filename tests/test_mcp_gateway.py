import json

from fastapi.testclient import TestClient

from plasma_mcp.mcp import MCP_SERVER_NAME, MCP_SERVER_VERSION
from plasma_mcp.server import app


def _rpc(method, rpc_id=1, **params):
    body = {"jsonrpc": "2.0", "id": rpc_id, "method": method}
    if params:
        body["params"] = params
    return body


def test_mcp_initialize_echoes_protocol_version():
    client = TestClient(app)
    resp = client.post("/mcp", json=_rpc("initialize", 10, protocolVersion="2024-11-05", capabilities={}))
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == 10
    assert data["result"]["protocolVersion"] == "2024-11-05"
    assert data["result"]["serverInfo"] == {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION}
    assert data["result"]["capabilities"] == {"tools": {"listChanged": False}}


def test_mcp_tools_list():
    client = TestClient(app)
    resp = client.post("/mcp", json=_rpc("tools/list"))
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == 1
    tool = next(t for t in data["result"]["tools"] if t["name"] == "sendXPL")
    assert tool["inputSchema"]["properties"]["to"]["pattern"] == "^0x[a-fA-F0-9]{40}$"


def test_mcp_tools_call_service_info():
    client = TestClient(app)
    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 2,
            "method": "tools/call",
            "params": {"name": "getServiceInfo", "arguments": {}},
        },
    )
    assert resp.status_code == 200
    content = resp.json()["result"]["content"][0]
    assert content["type"] == "text"
    assert json.loads(content["text"])["name"] == "Plasma Network MCP"


def test_mcp_tools_call_invalid_address_is_error():
    client = TestClient(app)
    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 3,
            "method": "call_tool",
            "params": {"tool": "getAccountBalance", "params": {"address": "bad"}},
        },
    )
    result = resp.json()["result"]
    assert result["isError"] is True
    assert result["content"][0]["text"].startswith("Invalid address")


def test_mcp_notification_has_no_body():
    client = TestClient(app)
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "method": "notifications/initialized"})
    assert resp.status_code == 204
    assert resp.content == b""


def test_mcp_cancel_notification_is_not_answered():
    client = TestClient(app)
    resp = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "method": "notifications/cancelled", "params": {"requestId": 4}},
    )
    assert resp.status_code == 204
    assert resp.content == b""


def test_mcp_parse_error():
    client = TestClient(app)
    resp = client.post("/mcp", content=b"{not json", headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == -32700


def test_mcp_non_object_body():
    client = TestClient(app)
    resp = client.post("/mcp", json=[1, 2])
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == -32600


def test_mcp_unknown_method():
    client = TestClient(app)
    resp = client.post("/mcp", json=_rpc("resources/list", 9))
    assert resp.json()["error"] == {"code": -32601, "message": "Method not found"}
