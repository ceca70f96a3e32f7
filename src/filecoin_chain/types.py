"""
Type definitions for the Filecoin chain adapter
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

TX_STATUS_SUCCESS = "SUCCESS"
TX_STATUS_FAILED = "FAILED"


class EstimateGas(BaseModel):
    """Gas parameters a send must reuse verbatim"""

    nonce: int
    gas_limit: int = Field(alias="gasLimit")
    gas_fee_cap: str = Field(alias="gasFeeCap")
    gas_premium: str = Field(alias="gasPremium")

    class Config:
        populate_by_name = True
        frozen = True


class FeeEstimate(BaseModel):
    """Fee estimate: human readable fee (FIL) plus the parameters for send"""

    fee: str
    estimate_gas: EstimateGas = Field(alias="estimateGas")

    class Config:
        populate_by_name = True
        frozen = True


class GasParameters(BaseModel):
    """Inputs of the fee formula, as decimal strings"""

    gas_used: str = Field(alias="gasUsed")
    gas_limit: str = Field(alias="gasLimit")
    base_fee: str = Field(alias="baseFee")
    gas_premium: str = Field(alias="gasPremium")

    class Config:
        populate_by_name = True


class FeeMarketSnapshot(BaseModel):
    """Network-wide fee market data reported by the explorer"""

    base_fee: str = Field(alias="baseFee")
    gas_used: str = Field(alias="gasUsed")

    class Config:
        populate_by_name = True


class WalletKeys(BaseModel):
    """Address and key material of a wallet"""

    address: str
    private_key: str = Field(alias="privateKey")

    class Config:
        populate_by_name = True


class ExplorerTransfer(BaseModel):
    """Raw transfer record from the explorer; every field may be missing"""

    tx_hash: Optional[str] = Field(None, alias="txHash")
    amount: Optional[str] = None
    status: Optional[bool] = None
    timestamp: Optional[int] = None  # unix seconds
    from_address: Optional[str] = Field(None, alias="from")
    to_address: Optional[str] = Field(None, alias="to")

    class Config:
        populate_by_name = True


class TransactionRecord(BaseModel):
    """Transfer as shown in the wallet's history list"""

    amount: str
    link: str
    url: str
    status: str
    date: datetime
    from_address: str = Field(alias="from")
    to_address: str = Field(alias="to")

    class Config:
        populate_by_name = True


class SignedMessage(BaseModel):
    """Lotus JSON form of a signed message"""

    message: dict[str, Any] = Field(alias="Message")
    signature: dict[str, Any] = Field(alias="Signature")

    class Config:
        populate_by_name = True


class MessageReceipt(BaseModel):
    """On-chain execution receipt"""

    exit_code: int = Field(alias="ExitCode")
    return_data: Optional[str] = Field(None, alias="Return")
    gas_used: int = Field(0, alias="GasUsed")

    class Config:
        populate_by_name = True
        extra = "allow"


class MessageLookup(BaseModel):
    """Result of StateWaitMsg"""

    message: Optional[dict[str, Any]] = Field(None, alias="Message")
    receipt: MessageReceipt = Field(alias="Receipt")
    tipset: Optional[list[dict[str, Any]]] = Field(None, alias="TipSet")
    height: Optional[int] = Field(None, alias="Height")

    class Config:
        populate_by_name = True
        extra = "allow"


class ConfirmationStatus(str, Enum):
    CONFIRMED = "confirmed"
    FAILED = "failed"
    PENDING = "pending"


class ConfirmationResult(BaseModel):
    """Outcome of a bounded wait for inclusion"""

    status: ConfirmationStatus
    message_id: str = Field(alias="messageId")
    receipt: Optional[MessageReceipt] = None

    class Config:
        populate_by_name = True

    @property
    def is_pending(self) -> bool:
        return self.status == ConfirmationStatus.PENDING
