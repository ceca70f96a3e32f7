"""
filecoin_chain - Filecoin adapter for multi-chain wallets

Balances, fee estimation, transfers and confirmation polling over
interchangeable public Lotus JSON-RPC endpoints.
"""

__version__ = "0.1.0"

from filecoin_chain.address import Address, validate_address_string
from filecoin_chain.chain import FilecoinChain
from filecoin_chain.config import FIL_DECIMALS, NetworkConfig
from filecoin_chain.confirmation import wait_for_inclusion
from filecoin_chain.exceptions import (
    ConfigurationError,
    ExplorerError,
    FilecoinChainError,
    InvalidAddressError,
    InvalidInput,
    InvalidPrivateKeyError,
    NoEndpointsError,
    RPCError,
    SignatureCreationError,
    TransactionError,
    TransactionFailedError,
    UnsupportedNetworkError,
    ValidationError,
)
from filecoin_chain.failover import FailoverExecutor
from filecoin_chain.fees import calculate_gas_fee
from filecoin_chain.types import (
    ConfirmationResult,
    ConfirmationStatus,
    EstimateGas,
    FeeEstimate,
    TransactionRecord,
    WalletKeys,
)

__all__ = [
    "__version__",
    "FIL_DECIMALS",
    # Adapter
    "FilecoinChain",
    "NetworkConfig",
    "FailoverExecutor",
    "calculate_gas_fee",
    "wait_for_inclusion",
    # Addresses
    "Address",
    "validate_address_string",
    # Types
    "ConfirmationResult",
    "ConfirmationStatus",
    "EstimateGas",
    "FeeEstimate",
    "TransactionRecord",
    "WalletKeys",
    # Exceptions
    "FilecoinChainError",
    "ValidationError",
    "InvalidInput",
    "InvalidAddressError",
    "InvalidPrivateKeyError",
    "ConfigurationError",
    "UnsupportedNetworkError",
    "NoEndpointsError",
    "RPCError",
    "ExplorerError",
    "TransactionError",
    "TransactionFailedError",
    "SignatureCreationError",
]
