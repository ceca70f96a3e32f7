"""
filecoin_chain custom exception hierarchy
"""


class FilecoinChainError(Exception):
    """filecoin_chain base exception"""

    pass


class ValidationError(FilecoinChainError):
    """Validation-related error"""

    pass


class InvalidInput(ValidationError):
    """Numeric or argument input that cannot be processed"""

    pass


class InvalidAddressError(ValidationError):
    """Malformed Filecoin address"""

    pass


class InvalidPrivateKeyError(ValidationError):
    """Malformed or unsupported private key"""

    pass


class ConfigurationError(FilecoinChainError):
    """Configuration-related error"""

    pass


class UnsupportedNetworkError(ConfigurationError):
    """Unsupported network"""

    pass


class NoEndpointsError(ConfigurationError):
    """No RPC endpoint is configured for the network"""

    pass


class RPCError(FilecoinChainError):
    """JSON-RPC call failed.

    ``code`` is the HTTP status for transport failures or the JSON-RPC error
    code when the node answered with an ``error`` object.
    """

    def __init__(self, message: str, code: int | None = None, endpoint: str | None = None):
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class ExplorerError(FilecoinChainError):
    """Block explorer API failure"""

    pass


class TransactionError(FilecoinChainError):
    """Transaction-related error"""

    pass


class TransactionFailedError(TransactionError):
    """Message was included on chain with a non-zero exit code"""

    def __init__(self, message_id: str, exit_code: int):
        self.message_id = message_id
        self.exit_code = exit_code
        super().__init__(f"Transaction failed: message {message_id} exited with code {exit_code}")


class SignatureCreationError(TransactionError):
    """Signature creation failed"""

    pass
