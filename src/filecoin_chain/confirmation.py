"""
Bounded wait for message inclusion.

``StateWaitMsg`` blocks until the node sees the message on chain, which may
be never. It is raced against a fixed timer; when the timer wins the result
is ``pending`` and the inclusion call is left running rather than cancelled.
Its connection is torn down by whoever owns the client (the failover
executor closes it when the attempt ends).
"""

import asyncio
import logging

from filecoin_chain.exceptions import InvalidInput, RPCError, TransactionFailedError
from filecoin_chain.rpc.lotus import LotusClient
from filecoin_chain.types import ConfirmationResult, ConfirmationStatus

logger = logging.getLogger(__name__)

# Server errors are read as "node has not indexed the message yet"
TRANSIENT_ERROR_CODE = 500


def is_transient_error(error: Exception) -> bool:
    code = getattr(error, "code", None)
    return isinstance(code, int) and code >= TRANSIENT_ERROR_CODE


def _discard_abandoned(task: "asyncio.Future[ConfirmationResult]") -> None:
    # Retrieve the outcome so an abandoned wait never logs as an unhandled error
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.debug("Abandoned inclusion wait ended with: %s", error)
    else:
        logger.debug("Abandoned inclusion wait finished: %s", task.result().status.value)


async def _await_inclusion(client: LotusClient, message_id: str) -> ConfirmationResult:
    try:
        lookup = await client.state_wait_msg(message_id)
    except RPCError as e:
        if is_transient_error(e):
            logger.info("Transient error waiting for %s, treating as pending: %s", message_id, e)
            return ConfirmationResult(status=ConfirmationStatus.PENDING, messageId=message_id)
        raise

    exit_code = lookup.receipt.exit_code
    if exit_code != 0:
        logger.error(
            "Message %s included with status %s (exit code %d)",
            message_id,
            ConfirmationStatus.FAILED.value,
            exit_code,
        )
        raise TransactionFailedError(message_id, exit_code)

    logger.info("Message %s confirmed at height %s", message_id, lookup.height)
    return ConfirmationResult(
        status=ConfirmationStatus.CONFIRMED, messageId=message_id, receipt=lookup.receipt
    )


async def wait_for_inclusion(
    client: LotusClient,
    message_id: str,
    interval_ms: int,
    retries: int,
) -> ConfirmationResult:
    """
    Wait up to ``interval_ms * retries`` milliseconds for a message to land.

    Args:
        client: Connected Lotus client
        message_id: Message CID returned by send
        interval_ms: Poll interval in milliseconds
        retries: Number of intervals to wait

    Returns:
        ConfirmationResult with status ``confirmed`` or ``pending``

    Raises:
        TransactionFailedError: If the message was included with a non-zero exit code
        InvalidInput: If interval_ms or retries is negative
        RPCError: On non-transient node errors
    """
    if interval_ms < 0 or retries < 0:
        raise InvalidInput("interval_ms and retries must not be negative")
    timeout = interval_ms * retries / 1000

    inclusion = asyncio.ensure_future(_await_inclusion(client, message_id))
    try:
        done, _ = await asyncio.wait({inclusion}, timeout=timeout)
    finally:
        if not inclusion.done():
            inclusion.add_done_callback(_discard_abandoned)

    if inclusion in done:
        return inclusion.result()

    logger.info("Message %s not included after %.1fs, still pending", message_id, timeout)
    return ConfirmationResult(status=ConfirmationStatus.PENDING, messageId=message_id)
