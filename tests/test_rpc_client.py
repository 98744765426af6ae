import httpx
import pytest
from eth_abi import encode as abi_encode
from eth_utils import to_hex

from plasma_mcp.errors import (
    BlockNotFoundError,
    ContractCallError,
    NodeUnreachableError,
    RemoteRpcError,
    TransactionTimeoutError,
)
from plasma_mcp.rpc import ERC20_READ_ABI, PlasmaRpcClient

from conftest import SAMPLE_ADDRESS, SAMPLE_TX_HASH


class MockResponse:
    def __init__(self, status_code: int, json_body=None, *, invalid_json: bool = False):
        self.status_code = status_code
        self._json = json_body
        self._invalid_json = invalid_json

    def json(self):
        if self._invalid_json:
            raise ValueError("not json")
        return self._json


def rpc_result(result):
    return MockResponse(200, {"jsonrpc": "2.0", "id": 1, "result": result})


def rpc_error(code, message):
    return MockResponse(200, {"jsonrpc": "2.0", "id": 1, "error": {"code": code, "message": message}})


class MockAsyncClient:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    async def post(self, url, json=None, headers=None):
        self.calls.append({"url": url, "json": json})
        if not self.responses:
            raise RuntimeError("No mock responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def aclose(self):
        return None


def make_client(config, responses):
    mock = MockAsyncClient(responses)
    return PlasmaRpcClient(config, async_client=mock), mock


@pytest.mark.asyncio
async def test_request_envelope_and_quantity_parsing(config):
    client, mock = make_client(config, [rpc_result("0x2612")])
    assert await client.get_chain_id() == 9746
    call = mock.calls[0]
    assert call["url"] == "http://rpc.test"
    assert call["json"]["jsonrpc"] == "2.0"
    assert call["json"]["method"] == "eth_chainId"
    assert call["json"]["params"] == []


@pytest.mark.asyncio
async def test_get_balance_passes_block_tag(config):
    client, mock = make_client(config, [rpc_result("0xde0b6b3a7640000")])
    assert await client.get_balance(SAMPLE_ADDRESS) == 10**18
    assert mock.calls[0]["json"]["params"] == [SAMPLE_ADDRESS, "latest"]


@pytest.mark.asyncio
async def test_get_block_parses_and_hex_encodes_number(config):
    block = {
        "number": "0x64",
        "hash": "0x" + "11" * 32,
        "timestamp": "0x6553f100",
        "miner": SAMPLE_ADDRESS,
        "transactions": ["0x01", "0x02"],
        "gasUsed": "0x5208",
        "gasLimit": "0x1c9c380",
        "baseFeePerGas": "0x7",
    }
    client, mock = make_client(config, [rpc_result(block)])
    parsed = await client.get_block(100)
    assert mock.calls[0]["json"]["params"] == ["0x64", False]
    assert parsed.number == 100
    assert parsed.transaction_count == 2
    assert parsed.gas_used == 21000
    assert parsed.base_fee_per_gas == 7
    assert parsed.summary()["gasLimit"] == str(30_000_000)


@pytest.mark.asyncio
async def test_get_block_missing_raises_not_found(config):
    client, _ = make_client(config, [rpc_result(None)])
    with pytest.raises(BlockNotFoundError):
        await client.get_block(10**9)


@pytest.mark.asyncio
async def test_missing_transaction_and_receipt_are_none(config):
    client, _ = make_client(config, [rpc_result(None), rpc_result(None)])
    assert await client.get_transaction(SAMPLE_TX_HASH) is None
    assert await client.get_transaction_receipt(SAMPLE_TX_HASH) is None


@pytest.mark.asyncio
async def test_receipt_status(config):
    receipt = {"transactionHash": SAMPLE_TX_HASH, "status": "0x0", "blockNumber": "0xa", "gasUsed": "0x5208"}
    client, _ = make_client(config, [rpc_result(receipt)])
    parsed = await client.get_transaction_receipt(SAMPLE_TX_HASH)
    assert parsed.status == "failed"
    assert parsed.block_number == 10


@pytest.mark.asyncio
async def test_estimate_gas_hex_encodes_integers(config):
    client, mock = make_client(config, [rpc_result("0x5208")])
    gas = await client.estimate_gas({"from": SAMPLE_ADDRESS, "to": SAMPLE_ADDRESS, "value": 10**18, "data": "0x"})
    assert gas == 21000
    sent = mock.calls[0]["json"]["params"][0]
    assert sent["value"] == "0xde0b6b3a7640000"
    assert sent["data"] == "0x"


@pytest.mark.asyncio
async def test_get_code_classifies_contracts(config):
    client, _ = make_client(config, [rpc_result("0x"), rpc_result("0x6080")])
    assert await client.is_contract(SAMPLE_ADDRESS) is False
    assert await client.is_contract(SAMPLE_ADDRESS) is True


@pytest.mark.asyncio
async def test_transport_error_maps_to_unreachable(config):
    client, _ = make_client(config, [httpx.ConnectError("refused")])
    with pytest.raises(NodeUnreachableError):
        await client.get_block_number()


@pytest.mark.asyncio
async def test_http_error_maps_to_remote_error(config):
    client, _ = make_client(config, [MockResponse(503, {})])
    with pytest.raises(RemoteRpcError) as excinfo:
        await client.get_gas_price()
    assert excinfo.value.status_code == 503


@pytest.mark.asyncio
async def test_non_json_response(config):
    client, _ = make_client(config, [MockResponse(200, invalid_json=True)])
    with pytest.raises(RemoteRpcError, match="Unexpected response"):
        await client.get_gas_price()


@pytest.mark.asyncio
async def test_rpc_error_object_carries_message(config):
    client, _ = make_client(config, [rpc_error(-32000, "nonce too low")])
    with pytest.raises(RemoteRpcError, match="nonce too low") as excinfo:
        await client.send_raw_transaction("0x01")
    assert excinfo.value.code == -32000


@pytest.mark.asyncio
async def test_wait_for_receipt_polls_until_mined(config):
    receipt = {"transactionHash": SAMPLE_TX_HASH, "status": "0x1", "blockNumber": "0x10", "gasUsed": "0x5208"}
    client, mock = make_client(config, [rpc_result(None), rpc_result(None), rpc_result(receipt)])
    parsed = await client.wait_for_receipt(SAMPLE_TX_HASH, timeout=5, poll_interval=0)
    assert parsed.succeeded
    assert len(mock.calls) == 3


@pytest.mark.asyncio
async def test_wait_for_receipt_times_out(config):
    client, _ = make_client(config, [rpc_result(None)])
    with pytest.raises(TransactionTimeoutError):
        await client.wait_for_receipt(SAMPLE_TX_HASH, timeout=0, poll_interval=0)


@pytest.mark.asyncio
async def test_call_contract_read_encodes_selector_and_decodes(config):
    encoded = to_hex(abi_encode(["string"], ["USDT"]))
    client, mock = make_client(config, [rpc_result(encoded)])
    assert await client.call_contract_read(SAMPLE_ADDRESS, "symbol") == "USDT"
    call, block = mock.calls[0]["json"]["params"]
    assert call["to"] == SAMPLE_ADDRESS
    assert call["data"] == "0x95d89b41"
    assert block == "latest"


@pytest.mark.asyncio
async def test_call_contract_read_decodes_integers(config):
    client, _ = make_client(config, [rpc_result(to_hex(abi_encode(["uint8"], [6])))])
    assert await client.call_contract_read(SAMPLE_ADDRESS, "decimals") == 6


@pytest.mark.asyncio
async def test_call_contract_read_without_code(config):
    client, _ = make_client(config, [rpc_result("0x")])
    with pytest.raises(ContractCallError):
        await client.call_contract_read(SAMPLE_ADDRESS, "totalSupply")


@pytest.mark.asyncio
async def test_call_contract_read_revert(config):
    client, _ = make_client(config, [rpc_error(3, "execution reverted")])
    with pytest.raises(ContractCallError):
        await client.call_contract_read(SAMPLE_ADDRESS, "name")


@pytest.mark.asyncio
async def test_call_contract_read_other_errors_propagate(config):
    client, _ = make_client(config, [rpc_error(-32005, "rate limited")])
    with pytest.raises(RemoteRpcError) as excinfo:
        await client.call_contract_read(SAMPLE_ADDRESS, "name")
    assert not isinstance(excinfo.value, ContractCallError)


def test_erc20_fragments():
    assert set(ERC20_READ_ABI) == {"symbol", "name", "decimals", "totalSupply"}
    assert ERC20_READ_ABI["totalSupply"].signature == "totalSupply()"
