"""
FilscanClient - fee market snapshots and transfer history from the Filscan API
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from filecoin_chain.exceptions import ExplorerError, InvalidInput
from filecoin_chain.types import ExplorerTransfer, FeeMarketSnapshot
from filecoin_chain.units import from_atto

logger = logging.getLogger(__name__)

FEE_SNAPSHOT_PATH = "/FinalHeightIndex"
MESSAGES_PATH = "/MessagesByAccountID"

EXIT_CODE_OK = ("Ok", "0", 0)


def _pick(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _parse_timestamp(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return None


class FilscanClient:
    """Client for the Filscan explorer REST API"""

    def __init__(self, base_url: str, timeout: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            try:
                response = await client.post(url, json=payload)
                if response.status_code != 200:
                    logger.error(f"Filscan API error {response.status_code}: {response.text}")
                    response.raise_for_status()
                body = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.error(f"Filscan request to {url} failed: {e}")
                raise ExplorerError(f"Filscan request to {path} failed: {e}") from e

        if not isinstance(body, dict):
            raise ExplorerError(f"Filscan returned a malformed body for {path}")
        result = body.get("result")
        if not isinstance(result, dict):
            message = body.get("message") or body.get("error") or "no result"
            raise ExplorerError(f"Filscan business error on {path}: {message}")
        return result

    async def get_transaction_fees(self) -> FeeMarketSnapshot:
        """Current network base fee and gas used, as reported by the explorer"""
        result = await self._post(FEE_SNAPSHOT_PATH, {})
        base_fee = _pick(result, "base_fee", "baseFee")
        gas_used = _pick(result, "gas_used", "gasUsed")
        if base_fee is None or gas_used is None:
            raise ExplorerError(f"Fee snapshot is missing base_fee/gas_used: {result}")
        return FeeMarketSnapshot(baseFee=str(base_fee), gasUsed=str(gas_used))

    async def get_transactions(self, address: str, limit: int = 20) -> List[ExplorerTransfer]:
        """Most recent transfers touching ``address``"""
        payload = {
            "account_id": address,
            "address": "",
            "filters": {"index": 0, "page": 0, "limit": limit, "method_name": ""},
        }
        result = await self._post(MESSAGES_PATH, payload)
        items = _pick(result, "messages_by_account_id_list", "messages") or []
        return [self._parse_transfer(item) for item in items if isinstance(item, dict)]

    @staticmethod
    def _parse_transfer(item: Dict[str, Any]) -> ExplorerTransfer:
        value = _pick(item, "value", "amount")
        try:
            amount = from_atto(value) if value is not None else None
        except InvalidInput:
            amount = None

        exit_code = _pick(item, "exit_code", "exitCode")
        timestamp = _pick(item, "block_time", "timestamp")
        return ExplorerTransfer(
            txHash=_pick(item, "cid", "txHash"),
            amount=amount,
            status=None if exit_code is None else exit_code in EXIT_CODE_OK,
            timestamp=_parse_timestamp(timestamp),
            **{"from": item.get("from"), "to": item.get("to")},
        )
