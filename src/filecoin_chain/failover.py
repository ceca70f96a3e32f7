"""
FailoverExecutor - run an RPC operation against an ordered endpoint pool
"""

import logging
from typing import Any, Awaitable, Callable, Sequence, TypeVar, cast

from filecoin_chain.exceptions import NoEndpointsError
from filecoin_chain.rpc.lotus import LotusClient, create_lotus_client

logger = logging.getLogger(__name__)

T = TypeVar("T")

ClientFactory = Callable[[str], LotusClient]
Operation = Callable[[LotusClient], Awaitable[T]]


class _Unset:
    def __repr__(self) -> str:
        return "<unset>"


UNSET: Any = _Unset()


class FailoverExecutor:
    """
    Sequential failover across interchangeable RPC endpoints.

    Endpoints are tried strictly in order, one at a time. Every attempt gets
    a freshly created client which is closed when the attempt ends; nothing
    is shared between attempts or between calls. The first success wins.
    When every endpoint fails, the fallback is returned if one was given,
    otherwise the last failure is re-raised.
    """

    def __init__(
        self,
        endpoints: Sequence[str],
        client_factory: ClientFactory = create_lotus_client,
    ) -> None:
        self._endpoints = tuple(endpoints)
        self._client_factory = client_factory

    @property
    def endpoints(self) -> tuple[str, ...]:
        return self._endpoints

    async def execute(
        self,
        operation: Operation[T],
        fallback: Any = UNSET,
        name: str | None = None,
    ) -> T:
        """
        Run ``operation`` with a connected client, failing over on error.

        Args:
            operation: Coroutine function receiving a LotusClient
            fallback: Value returned when all endpoints fail (any value,
                including None); omit to propagate the last failure
            name: Operation name for log messages

        Returns:
            The first successful result, or ``fallback``

        Raises:
            NoEndpointsError: If the pool is empty and no fallback was given
            Exception: The last endpoint's failure, when no fallback was given
        """
        op_name = name or getattr(operation, "__name__", "operation")
        total = len(self._endpoints)

        if not total:
            if fallback is not UNSET:
                logger.error("No RPC endpoints configured for %s; returning fallback", op_name)
                return fallback
            raise NoEndpointsError(f"No RPC endpoints configured for {op_name}")

        last_error: Exception | None = None
        for index, endpoint in enumerate(self._endpoints):
            try:
                async with self._client_factory(endpoint) as client:
                    result = await operation(client)
                logger.debug(
                    "%s succeeded on %s (attempt %d/%d)", op_name, endpoint, index + 1, total
                )
                return result
            except Exception as e:
                last_error = e
                logger.warning(
                    "Error for filecoin rpc %s during %s (attempt %d/%d): %s",
                    endpoint,
                    op_name,
                    index + 1,
                    total,
                    e,
                )

        if fallback is not UNSET:
            logger.error(
                "All %d RPC endpoints failed for %s; returning fallback %r",
                total,
                op_name,
                fallback,
            )
            return fallback

        logger.error("All %d RPC endpoints failed for %s: %s", total, op_name, last_error)
        raise cast(Exception, last_error)
