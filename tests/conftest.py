"""
Pytest configuration and fixtures
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from filecoin_chain.types import FeeMarketSnapshot

TEST_PRIVATE_KEY = "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_MNEMONIC = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)


class FakeLotusClient:
    """Stand-in for LotusClient; every RPC method is an AsyncMock"""

    def __init__(self, endpoint: str) -> None:
        self.endpoint = endpoint
        self.entered = False
        self.closed = False
        self.wallet_balance = AsyncMock()
        self.mpool_get_nonce = AsyncMock()
        self.gas_estimate_message_gas = AsyncMock()
        self.mpool_push = AsyncMock()
        self.state_wait_msg = AsyncMock()

    async def __aenter__(self) -> "FakeLotusClient":
        self.entered = True
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.closed = True


class ClientPool:
    """Client factory that records every client it builds"""

    def __init__(self, configure=None) -> None:
        self.created: list[FakeLotusClient] = []
        self._configure = configure

    def __call__(self, endpoint: str) -> FakeLotusClient:
        client = FakeLotusClient(endpoint)
        if self._configure:
            self._configure(client)
        self.created.append(client)
        return client

    @property
    def endpoints(self) -> list[str]:
        return [client.endpoint for client in self.created]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def test_private_key():
    """Mock secp256k1 private key for tests"""
    return TEST_PRIVATE_KEY


@pytest.fixture
def test_mnemonic():
    return TEST_MNEMONIC


@pytest.fixture
def client_pool():
    """Returns the ClientPool class so tests can pass their own configure hook"""
    return ClientPool


@pytest.fixture
def endpoints():
    return [
        "https://rpc-a.example/rpc/v1",
        "https://rpc-b.example/rpc/v1",
        "https://rpc-c.example/rpc/v1",
    ]


@pytest.fixture
def mock_explorer():
    explorer = MagicMock()
    explorer.get_transaction_fees = AsyncMock(
        return_value=FeeMarketSnapshot(baseFee="100", gasUsed="1000000")
    )
    explorer.get_transactions = AsyncMock(return_value=[])
    return explorer
