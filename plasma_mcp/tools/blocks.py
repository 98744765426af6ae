"""Block-related tools."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from plasma_mcp.config import PlasmaConfig, default_config
from plasma_mcp.rpc import default_client
from plasma_mcp.tools.validators import require_int_range

logger = logging.getLogger(__name__)


async def get_latest_blocks(
    count: Optional[int] = None,
    *,
    client=default_client,
    config: PlasmaConfig = default_config,
) -> Dict[str, Any]:
    """Summaries of the most recent ``count`` blocks, newest first."""
    if count is None:
        count = config.default_latest_blocks
    count = require_int_range(count, "count", minimum=1, maximum=config.max_latest_blocks)

    latest_block = await client.get_block_number()
    # Stop at genesis on very young chains.
    numbers = [latest_block - offset for offset in range(count) if latest_block - offset >= 0]
    blocks = await asyncio.gather(*(client.get_block(number) for number in numbers))
    return {
        "latestBlock": latest_block,
        "blocks": [block.summary() for block in blocks],
        "network": config.name,
        "explorer": config.explorer_url,
    }
