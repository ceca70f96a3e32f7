"""
LotusClient - minimal Lotus JSON-RPC client over httpx
"""

import logging
from typing import Any

import httpx

from filecoin_chain.config import NetworkConfig
from filecoin_chain.exceptions import RPCError
from filecoin_chain.message import Message
from filecoin_chain.types import MessageLookup, SignedMessage

logger = logging.getLogger(__name__)

# StateWaitMsg: search the whole chain for the message
LOOKBACK_NO_LIMIT = -1


class LotusClient:
    """
    Client for a single Lotus JSON-RPC endpoint.

    Each instance owns its own HTTP connection pool; use it as an async
    context manager so the pool is released when the caller is done.
    """

    def __init__(
        self,
        endpoint: str,
        token: str | None = None,
        timeout: float = NetworkConfig.DEFAULT_RPC_TIMEOUT,
    ) -> None:
        self.endpoint = endpoint
        self._headers = {"Content-Type": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._timeout = timeout
        self._http_client: httpx.AsyncClient | None = None
        self._request_id = 0

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(headers=self._headers, timeout=self._timeout)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client"""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "LotusClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def call(
        self,
        method: str,
        params: list[Any],
        timeout: Any = httpx.USE_CLIENT_DEFAULT,
    ) -> Any:
        """
        Invoke a JSON-RPC method and return its ``result``.

        Args:
            method: Lotus method name (e.g. "Filecoin.WalletBalance")
            params: Positional parameters
            timeout: Per-request timeout; None blocks until the node answers

        Raises:
            RPCError: On transport failure, non-200 status, JSON-RPC error
                object or malformed response
        """
        self._request_id += 1
        payload = {"jsonrpc": "2.0", "method": method, "params": params, "id": self._request_id}
        client = await self._get_client()

        try:
            response = await client.post(self.endpoint, json=payload, timeout=timeout)
        except httpx.HTTPError as e:
            raise RPCError(
                f"{method} request to {self.endpoint} failed: {e}", endpoint=self.endpoint
            ) from e

        if response.status_code != 200:
            logger.error(f"Lotus RPC error {response.status_code}: {response.text[:200]}")
            raise RPCError(
                f"{method} returned HTTP {response.status_code}",
                code=response.status_code,
                endpoint=self.endpoint,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise RPCError(f"{method} returned a non-JSON body", endpoint=self.endpoint) from e
        if not isinstance(body, dict):
            raise RPCError(f"{method} returned a malformed body", endpoint=self.endpoint)

        error = body.get("error")
        if error:
            if isinstance(error, dict):
                raise RPCError(
                    f"{method} failed: {error.get('message')}",
                    code=error.get("code"),
                    endpoint=self.endpoint,
                )
            raise RPCError(f"{method} failed: {error}", endpoint=self.endpoint)
        if "result" not in body:
            raise RPCError(f"{method} response has no result", endpoint=self.endpoint)
        return body["result"]

    async def wallet_balance(self, address: str) -> str:
        """Balance of an address in attoFIL"""
        result = await self.call("Filecoin.WalletBalance", [address])
        return str(result)

    async def mpool_get_nonce(self, address: str) -> int:
        """Next nonce for an address, including pending mpool messages"""
        return int(await self.call("Filecoin.MpoolGetNonce", [address]))

    async def gas_estimate_message_gas(self, message: Message, max_fee: str = "0") -> Message:
        """Fill in GasLimit, GasFeeCap and GasPremium for a message"""
        result = await self.call(
            "Filecoin.GasEstimateMessageGas",
            [message.to_lotus_json(), {"MaxFee": max_fee}, None],
        )
        if not isinstance(result, dict):
            raise RPCError("GasEstimateMessageGas returned no message", endpoint=self.endpoint)
        return Message.from_lotus_json(result)

    async def mpool_push(self, signed_message: SignedMessage) -> str:
        """Submit a signed message; returns its CID"""
        result = await self.call("Filecoin.MpoolPush", [signed_message.model_dump(by_alias=True)])
        if not isinstance(result, dict) or "/" not in result:
            raise RPCError("MpoolPush returned no message CID", endpoint=self.endpoint)
        return result["/"]

    async def state_wait_msg(self, message_cid: str, confidence: int = 0) -> MessageLookup:
        """Block until the message is included; no client-side timeout"""
        result = await self.call(
            "Filecoin.StateWaitMsg",
            [{"/": message_cid}, confidence, LOOKBACK_NO_LIMIT, True],
            timeout=None,
        )
        if not isinstance(result, dict):
            raise RPCError("StateWaitMsg returned no lookup", endpoint=self.endpoint)
        return MessageLookup(**result)


def create_lotus_client(endpoint: str) -> LotusClient:
    """Create a LotusClient for an endpoint.

    Uses a bearer token from FILECOIN_RPC_TOKEN when set.

    Args:
        endpoint: JSON-RPC URL (e.g. "https://api.node.glif.io/rpc/v1")

    Returns:
        LotusClient instance
    """
    token = NetworkConfig.get_rpc_token()
    logger.debug("Creating LotusClient for endpoint=%s (token=%s)", endpoint, bool(token))
    return LotusClient(endpoint, token=token, timeout=NetworkConfig.get_rpc_timeout())
