import pytest

from plasma_mcp.errors import ValidationError
from plasma_mcp.rpc import ChainBlock
from plasma_mcp.tools.blocks import get_latest_blocks


class StubClient:
    def __init__(self, latest=100):
        self.latest = latest
        self.requested = []

    async def get_block_number(self):
        return self.latest

    async def get_block(self, number_or_tag="latest"):
        self.requested.append(number_or_tag)
        return ChainBlock(
            number=number_or_tag,
            hash=f"0x{number_or_tag:064x}",
            timestamp=1_700_000_000 + number_or_tag,
            miner="0x" + "00" * 20,
            transaction_count=number_or_tag % 3,
            gas_used=21000,
            gas_limit=30_000_000,
        )


@pytest.mark.asyncio
async def test_latest_blocks_newest_first(config):
    client = StubClient()
    result = await get_latest_blocks(5, client=client, config=config)
    assert result["latestBlock"] == 100
    assert [block["number"] for block in result["blocks"]] == [100, 99, 98, 97, 96]
    assert result["blocks"][0]["gasUsed"] == "21000"
    assert result["blocks"][0]["transactions"] == 1
    assert result["explorer"] == "https://testnet.plasmascan.to"


@pytest.mark.asyncio
async def test_latest_blocks_default_count(config):
    result = await get_latest_blocks(client=StubClient(), config=config)
    assert len(result["blocks"]) == config.default_latest_blocks


@pytest.mark.asyncio
async def test_latest_blocks_stops_at_genesis(config):
    client = StubClient(latest=2)
    result = await get_latest_blocks(10, client=client, config=config)
    assert [block["number"] for block in result["blocks"]] == [2, 1, 0]


@pytest.mark.asyncio
@pytest.mark.parametrize("count", [0, 21, -1, True, "5"])
async def test_latest_blocks_rejects_count_before_calls(config, count):
    class FailClient:
        async def get_block_number(self):
            pytest.fail("get_block_number should not be called for invalid count")

    with pytest.raises(ValidationError, match="count"):
        await get_latest_blocks(count, client=FailClient(), config=config)


@pytest.mark.asyncio
async def test_latest_blocks_max_count(config):
    client = StubClient()
    result = await get_latest_blocks(20, client=client, config=config)
    assert len(result["blocks"]) == 20
    assert result["blocks"][-1]["number"] == 81
