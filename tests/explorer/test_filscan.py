"""
Tests for FilscanClient.
"""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from filecoin_chain.exceptions import ExplorerError
from filecoin_chain.explorer.filscan import FEE_SNAPSHOT_PATH, MESSAGES_PATH, FilscanClient

API_URL = "https://api.filscan.example/api/v1/"


def _response(body, status_code=200):
    response = MagicMock(status_code=status_code, text=str(body))
    response.json = MagicMock(return_value=body)
    if status_code != 200:
        response.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError("error", request=MagicMock(), response=response)
        )
    return response


@pytest.fixture
def explorer():
    return FilscanClient(API_URL)


class TestGetTransactionFees:
    @pytest.mark.anyio
    async def test_parses_snapshot(self, explorer):
        with patch("httpx.AsyncClient.post") as mock_post:
            mock_post.return_value = _response(
                {"result": {"height": 3123456, "base_fee": "100", "gas_used": 1000000}}
            )
            snapshot = await explorer.get_transaction_fees()

        assert snapshot.base_fee == "100"
        assert snapshot.gas_used == "1000000"
        assert mock_post.call_args.args[0] == f"{API_URL.rstrip('/')}{FEE_SNAPSHOT_PATH}"

    @pytest.mark.anyio
    async def test_accepts_camel_case_fields(self, explorer):
        with patch("httpx.AsyncClient.post") as mock_post:
            mock_post.return_value = _response({"result": {"baseFee": "7", "gasUsed": "8"}})
            snapshot = await explorer.get_transaction_fees()

        assert (snapshot.base_fee, snapshot.gas_used) == ("7", "8")

    @pytest.mark.anyio
    async def test_missing_fields_raise(self, explorer):
        with patch("httpx.AsyncClient.post") as mock_post:
            mock_post.return_value = _response({"result": {"height": 1}})
            with pytest.raises(ExplorerError):
                await explorer.get_transaction_fees()

    @pytest.mark.anyio
    async def test_business_error_raises(self, explorer):
        with patch("httpx.AsyncClient.post") as mock_post:
            mock_post.return_value = _response({"code": 1, "message": "rate limited"})
            with pytest.raises(ExplorerError, match="rate limited"):
                await explorer.get_transaction_fees()

    @pytest.mark.anyio
    async def test_http_error_raises(self, explorer):
        with patch("httpx.AsyncClient.post") as mock_post:
            mock_post.return_value = _response("Bad Gateway", status_code=502)
            with pytest.raises(ExplorerError):
                await explorer.get_transaction_fees()

    @pytest.mark.anyio
    async def test_transport_error_raises(self, explorer):
        with patch("httpx.AsyncClient.post") as mock_post:
            mock_post.side_effect = httpx.ConnectTimeout("timed out")
            with pytest.raises(ExplorerError):
                await explorer.get_transaction_fees()


class TestGetTransactions:
    @pytest.mark.anyio
    async def test_parses_transfers(self, explorer):
        messages = [
            {
                "cid": "bafy2bzaceokmessage",
                "value": "1500000000000000000",
                "exit_code": "Ok",
                "block_time": 1700000000,
                "from": "f1sender",
                "to": "f1receiver",
            },
            {
                "cid": "bafy2bzacefailedmessage",
                "value": "1",
                "exit_code": "SysErrInsufficientFunds(6)",
                "block_time": 1700000030,
                "from": "f1sender",
                "to": "f1receiver",
            },
            {"value": "not-a-number"},
            "garbage",
        ]
        with patch("httpx.AsyncClient.post") as mock_post:
            mock_post.return_value = _response(
                {"result": {"messages_by_account_id_list": messages, "total_count": 3}}
            )
            transfers = await explorer.get_transactions("f1sender", limit=5)

        assert len(transfers) == 3
        ok, failed, broken = transfers
        assert ok.tx_hash == "bafy2bzaceokmessage"
        assert ok.amount == "1.5"
        assert ok.status is True
        assert ok.timestamp == 1700000000
        assert ok.from_address == "f1sender"
        assert ok.to_address == "f1receiver"
        assert failed.status is False
        assert broken.tx_hash is None
        assert broken.amount is None
        assert broken.status is None

        call = mock_post.call_args
        assert call.args[0].endswith(MESSAGES_PATH)
        assert call.kwargs["json"]["account_id"] == "f1sender"
        assert call.kwargs["json"]["filters"]["limit"] == 5

    @pytest.mark.anyio
    async def test_timestamp_forms(self, explorer):
        messages = [
            {"cid": "a", "block_time": "1700000000"},
            {"cid": "b", "block_time": 1700000000.0},
            {"cid": "c", "block_time": "yesterday"},
            {"cid": "d", "block_time": True},
        ]
        with patch("httpx.AsyncClient.post") as mock_post:
            mock_post.return_value = _response({"result": {"messages": messages}})
            transfers = await explorer.get_transactions("f1sender")

        assert [t.timestamp for t in transfers] == [1700000000, 1700000000, None, None]

    @pytest.mark.anyio
    async def test_empty_history(self, explorer):
        with patch("httpx.AsyncClient.post") as mock_post:
            mock_post.return_value = _response({"result": {"messages_by_account_id_list": None}})
            assert await explorer.get_transactions("f1sender") == []
