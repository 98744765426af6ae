import os
import sys

import pytest

# Ensure repository root is on sys.path before importing project modules.
repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)

from plasma_mcp.config import PlasmaConfig  # noqa: E402
from plasma_mcp.metrics import default_metrics  # noqa: E402
from plasma_mcp.wallet import Wallet  # noqa: E402

# Well-known throwaway key from the eth-account documentation; never funded.
TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
SAMPLE_ADDRESS = "0x742d35Cc6634C0532925a3b844Bc454e4438f44e"
SAMPLE_TX_HASH = "0x" + "ab" * 32


@pytest.fixture(autouse=True)
def reset_metrics():
    default_metrics.reset()
    yield
    default_metrics.reset()


@pytest.fixture
def config():
    return PlasmaConfig(private_key=None, rpc_url="http://rpc.test", tx_timeout=1.0, tx_poll_interval=0.0)


@pytest.fixture
def wallet():
    return Wallet.from_private_key(TEST_PRIVATE_KEY)
