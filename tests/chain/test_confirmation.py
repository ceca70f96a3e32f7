"""
Tests for the bounded inclusion wait.
"""

import asyncio

import pytest

from filecoin_chain.confirmation import is_transient_error, wait_for_inclusion
from filecoin_chain.exceptions import InvalidInput, RPCError, TransactionFailedError
from filecoin_chain.types import ConfirmationStatus, MessageLookup

MESSAGE_ID = "bafy2bzacedtestmessagecid"


def _lookup(exit_code=0):
    return MessageLookup(
        Message={"/": MESSAGE_ID},
        Receipt={"ExitCode": exit_code, "Return": None, "GasUsed": 488500},
        TipSet=[{"/": "bafy2bzacetipset"}],
        Height=3123456,
    )


class TestWaitForInclusion:
    @pytest.mark.anyio
    async def test_included_with_exit_code_zero_is_confirmed(self, client_pool):
        client = client_pool()("https://rpc-a.example/rpc/v1")
        client.state_wait_msg.return_value = _lookup(0)

        result = await wait_for_inclusion(client, MESSAGE_ID, interval_ms=1000, retries=5)

        assert result.status == ConfirmationStatus.CONFIRMED
        assert result.message_id == MESSAGE_ID
        assert result.receipt.gas_used == 488500
        client.state_wait_msg.assert_awaited_once_with(MESSAGE_ID)

    @pytest.mark.anyio
    async def test_nonzero_exit_code_raises(self, client_pool):
        client = client_pool()("https://rpc-a.example/rpc/v1")
        client.state_wait_msg.return_value = _lookup(16)

        with pytest.raises(TransactionFailedError) as exc_info:
            await wait_for_inclusion(client, MESSAGE_ID, interval_ms=1000, retries=5)

        assert exc_info.value.exit_code == 16
        assert exc_info.value.message_id == MESSAGE_ID

    @pytest.mark.anyio
    async def test_timer_wins_returns_pending_without_cancelling(self, client_pool):
        client = client_pool()("https://rpc-a.example/rpc/v1")
        release = asyncio.Event()
        finished = asyncio.Event()

        async def slow_wait(message_id):
            await release.wait()
            finished.set()
            return _lookup(0)

        client.state_wait_msg.side_effect = slow_wait

        result = await wait_for_inclusion(client, MESSAGE_ID, interval_ms=10, retries=2)

        assert result.status == ConfirmationStatus.PENDING
        assert result.is_pending
        assert result.receipt is None

        # the abandoned inclusion call keeps running to completion
        release.set()
        await asyncio.wait_for(finished.wait(), timeout=1)

    @pytest.mark.anyio
    async def test_zero_window_is_immediately_pending(self, client_pool):
        client = client_pool()("https://rpc-a.example/rpc/v1")
        release = asyncio.Event()

        async def slow_wait(message_id):
            await release.wait()
            return _lookup(0)

        client.state_wait_msg.side_effect = slow_wait

        result = await wait_for_inclusion(client, MESSAGE_ID, interval_ms=0, retries=10)

        assert result.is_pending
        release.set()
        await asyncio.sleep(0.01)

    @pytest.mark.anyio
    async def test_server_error_is_pending(self, client_pool):
        client = client_pool()("https://rpc-a.example/rpc/v1")
        client.state_wait_msg.side_effect = RPCError("bad gateway", code=502)

        result = await wait_for_inclusion(client, MESSAGE_ID, interval_ms=1000, retries=5)

        assert result.status == ConfirmationStatus.PENDING

    @pytest.mark.anyio
    async def test_client_error_propagates(self, client_pool):
        client = client_pool()("https://rpc-a.example/rpc/v1")
        client.state_wait_msg.side_effect = RPCError("not found", code=404)

        with pytest.raises(RPCError):
            await wait_for_inclusion(client, MESSAGE_ID, interval_ms=1000, retries=5)

    @pytest.mark.anyio
    async def test_other_errors_propagate(self, client_pool):
        client = client_pool()("https://rpc-a.example/rpc/v1")
        client.state_wait_msg.side_effect = ConnectionResetError("reset")

        with pytest.raises(ConnectionResetError):
            await wait_for_inclusion(client, MESSAGE_ID, interval_ms=1000, retries=5)

    @pytest.mark.anyio
    async def test_negative_window_is_invalid(self, client_pool):
        client = client_pool()("https://rpc-a.example/rpc/v1")

        with pytest.raises(InvalidInput):
            await wait_for_inclusion(client, MESSAGE_ID, interval_ms=-1, retries=5)


def test_is_transient_error():
    assert is_transient_error(RPCError("x", code=500))
    assert is_transient_error(RPCError("x", code=503))
    assert not is_transient_error(RPCError("x", code=499))
    assert not is_transient_error(RPCError("x", code=-32000))
    assert not is_transient_error(RPCError("x"))
    assert not is_transient_error(ValueError("x"))
