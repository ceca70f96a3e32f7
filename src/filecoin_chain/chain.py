"""
FilecoinChain - the wallet-facing Filecoin adapter.

Every network operation is a coroutine handed to the FailoverExecutor,
which supplies a fresh LotusClient per endpoint attempt. Read paths
(balance, history) degrade to defaults; fee estimation and sends propagate
the last failure.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Sequence

from filecoin_chain.address import Address, validate_address_string
from filecoin_chain.config import NetworkConfig
from filecoin_chain.confirmation import wait_for_inclusion
from filecoin_chain.exceptions import InvalidInput
from filecoin_chain.explorer.filscan import FilscanClient
from filecoin_chain.failover import ClientFactory, FailoverExecutor
from filecoin_chain.fees import calculate_gas_fee
from filecoin_chain.message import Message
from filecoin_chain.rpc.lotus import LotusClient, create_lotus_client
from filecoin_chain.signers.secp256k1_signer import Secp256k1Signer
from filecoin_chain.types import (
    TX_STATUS_FAILED,
    TX_STATUS_SUCCESS,
    ConfirmationResult,
    EstimateGas,
    ExplorerTransfer,
    FeeEstimate,
    GasParameters,
    TransactionRecord,
    WalletKeys,
)
from filecoin_chain.units import Numeric, from_atto, to_atto

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 5000
DEFAULT_POLL_RETRIES = 12
LINK_HASH_LENGTH = 13


def _transaction_date(timestamp: int | None) -> datetime:
    """UTC date of a unix-seconds timestamp; now when missing or out of range"""
    if timestamp:
        try:
            return datetime.fromtimestamp(timestamp, tz=timezone.utc)
        except (OverflowError, ValueError, OSError):
            logger.warning("Ignoring out of range transfer timestamp %s", timestamp)
    return datetime.now(timezone.utc)


class FilecoinChain:
    """Filecoin adapter for a multi-chain wallet"""

    def __init__(
        self,
        network: str = NetworkConfig.FILECOIN_MAINNET,
        rpc_urls: Sequence[str] | None = None,
        explorer: FilscanClient | None = None,
        client_factory: ClientFactory | None = None,
        explorer_url: str | None = None,
    ) -> None:
        """
        Args:
            network: "filecoin:mainnet" or "filecoin:calibration"
            rpc_urls: Endpoint pool in failover order (defaults to the network's)
            explorer: Fee market / history service
            client_factory: Builds a LotusClient for an endpoint URL
            explorer_url: Explorer web base for message links
        """
        NetworkConfig.is_testnet(network)  # raises UnsupportedNetworkError
        self.network = network
        urls = list(rpc_urls) if rpc_urls is not None else NetworkConfig.get_rpc_urls(network)
        self._executor = FailoverExecutor(urls, client_factory or create_lotus_client)
        self._explorer = explorer or FilscanClient(NetworkConfig.get_filscan_api_url(network))
        self._explorer_url = (explorer_url or NetworkConfig.get_explorer_url(network)).rstrip("/")

    async def is_valid_address(self, address: str) -> bool:
        try:
            return validate_address_string(address)
        except Exception as e:
            logger.error("Error in is_valid_address filecoin: %s", e)
            return False

    async def is_valid_private_key(self, private_key: str) -> bool:
        try:
            wallet = await self.create_wallet_by_private_key(private_key)
            return bool(wallet and wallet.address)
        except Exception as e:
            logger.error("Error in is_valid_private_key filecoin: %s", e)
            return False

    async def create_wallet_by_private_key(self, private_key: str) -> WalletKeys | None:
        """Derive the account address of a private key; None if the key is unusable"""
        try:
            signer = Secp256k1Signer.from_private_key(private_key, self.network)
            return WalletKeys(address=signer.get_address(), privateKey=private_key)
        except Exception as e:
            logger.error("Error in create wallet from private key in filecoin: %s", e)
            return None

    async def create_wallet_by_mnemonic(self, phrase: str) -> WalletKeys | None:
        """Derive address and hex private key from a seed phrase"""
        try:
            signer = Secp256k1Signer.from_mnemonic(phrase, self.network)
            return WalletKeys(address=signer.get_address(), privateKey=signer.export_private_key())
        except Exception as e:
            logger.error("Error in create wallet from mnemonic in filecoin: %s", e)
            return None

    async def get_balance(self, address: str) -> str:
        """Balance in attoFIL; "0" when every endpoint fails"""

        async def balance(client: LotusClient) -> str:
            return await client.wallet_balance(address)

        return await self._executor.execute(balance, fallback="0", name="get_balance")

    async def get_estimate_fee(
        self, to_address: str, from_address: str, amount: Numeric
    ) -> FeeEstimate:
        """
        Estimate the fee of sending ``amount`` FIL.

        Returns:
            FeeEstimate whose ``estimate_gas`` must be passed unchanged to send
        """
        amount_to_send = to_atto(amount)

        async def estimate(client: LotusClient) -> FeeEstimate:
            nonce = await client.mpool_get_nonce(from_address)
            estimated = await client.gas_estimate_message_gas(
                Message(
                    to=to_address,
                    from_address=from_address,
                    nonce=nonce,
                    value=amount_to_send,
                    gas_limit=0,
                    gas_fee_cap="0",
                    gas_premium="0",
                )
            )
            snapshot = await self._explorer.get_transaction_fees()
            gas = GasParameters(
                gasUsed=snapshot.gas_used,
                gasLimit=str(estimated.gas_limit),
                baseFee=snapshot.base_fee,
                gasPremium=estimated.gas_premium,
            )
            total_fee = calculate_gas_fee(
                gas.gas_used, gas.gas_limit, gas.base_fee, gas.gas_premium
            )
            logger.debug(
                "Fee estimate from %s to %s: %s attoFIL (%s)",
                from_address,
                to_address,
                total_fee,
                gas.model_dump(by_alias=True),
            )
            return FeeEstimate(
                fee=from_atto(total_fee),
                estimateGas=EstimateGas(
                    nonce=nonce,
                    gasLimit=estimated.gas_limit,
                    gasFeeCap=estimated.gas_fee_cap,
                    gasPremium=estimated.gas_premium,
                ),
            )

        return await self._executor.execute(estimate, name="get_estimate_fee")

    async def get_transactions(self, address: str) -> List[TransactionRecord]:
        """Recent transfers of ``address``; empty list on failure"""
        try:
            transfers = await self._explorer.get_transactions(address)
            return [self._format_transaction(item) for item in transfers]
        except Exception as e:
            logger.error("Error in get transactions from filecoin: %s", e)
            return []

    def _format_transaction(self, item: ExplorerTransfer) -> TransactionRecord:
        tx_hash = item.tx_hash or ""
        date = _transaction_date(item.timestamp)
        return TransactionRecord(
            amount=item.amount if item.amount is not None else "",
            link=f"{tx_hash[:LINK_HASH_LENGTH]}..." if tx_hash else "",
            url=f"{self._explorer_url}/message/{tx_hash}",
            status=TX_STATUS_SUCCESS if item.status is True else TX_STATUS_FAILED,
            date=date,
            **{"from": item.from_address or "", "to": item.to_address or ""},
        )

    def _load_signer(self, phrase: str | None, private_key: str | None) -> Secp256k1Signer:
        if (phrase is None) == (private_key is None):
            raise InvalidInput("Exactly one of phrase or private_key is required")
        if phrase is not None:
            return Secp256k1Signer.from_mnemonic(phrase, self.network)
        return Secp256k1Signer.from_private_key(private_key, self.network)

    async def send(
        self,
        to: str,
        from_address: str,
        amount: Numeric,
        estimate_gas: EstimateGas | dict[str, Any],
        phrase: str | None = None,
        private_key: str | None = None,
    ) -> str:
        """
        Sign and broadcast a transfer.

        Args:
            to: Recipient address
            from_address: Sender address; must match the key
            amount: Amount in FIL
            estimate_gas: The ``estimate_gas`` of a prior get_estimate_fee
            phrase: Seed phrase of the sender
            private_key: Private key of the sender (instead of phrase)

        Returns:
            CID of the pushed message
        """
        gas = EstimateGas.model_validate(estimate_gas)
        signer = self._load_signer(phrase, private_key)
        if Address.from_string(signer.get_address()).to_bytes() != Address.from_string(
            from_address
        ).to_bytes():
            raise InvalidInput(
                f"Key belongs to {signer.get_address()}, not to sender {from_address}"
            )

        message = Message(
            to=to,
            from_address=from_address,
            nonce=gas.nonce,
            value=to_atto(amount),
            gas_limit=gas.gas_limit,
            gas_fee_cap=gas.gas_fee_cap,
            gas_premium=gas.gas_premium,
        )
        signed = await signer.sign_message(message)

        async def push(client: LotusClient) -> str:
            return await client.mpool_push(signed)

        message_id = await self._executor.execute(push, name="send")
        logger.info("Pushed message %s from %s to %s", message_id, from_address, to)
        return message_id

    async def wait_for_confirmation(
        self,
        transaction: str,
        interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        retries: int = DEFAULT_POLL_RETRIES,
    ) -> ConfirmationResult:
        """
        Wait up to ``interval_ms * retries`` for the message to be included.

        Returns:
            ConfirmationResult (``confirmed`` or ``pending``)

        Raises:
            TransactionFailedError: If the message executed with a non-zero exit code
        """

        async def wait(client: LotusClient) -> ConfirmationResult:
            return await wait_for_inclusion(client, transaction, interval_ms, retries)

        return await self._executor.execute(wait, name="wait_for_confirmation")
