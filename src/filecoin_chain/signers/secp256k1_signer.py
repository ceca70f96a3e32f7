"""
Secp256k1Signer - secp256k1 (f1/t1) account signer
"""

import base64
import binascii
import json
import logging

from filecoin_chain.address import MAINNET_PREFIX, Address
from filecoin_chain.config import NetworkConfig
from filecoin_chain.exceptions import InvalidPrivateKeyError, SignatureCreationError
from filecoin_chain.message import Message
from filecoin_chain.signers.base import MessageSigner
from filecoin_chain.types import SignedMessage

logger = logging.getLogger(__name__)

SIGNATURE_TYPE_SECP256K1 = 1
PRIVATE_KEY_LENGTH = 32
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
LOTUS_KEY_TYPE = "secp256k1"


def decode_private_key(private_key: str) -> bytes:
    """Decode a private key string into 32 raw bytes.

    Accepted forms:
        - 64 hex characters, optionally 0x-prefixed
        - base64 of the 32 key bytes
        - Lotus ``wallet export`` output (hex encoded JSON with Type/PrivateKey)

    Raises:
        InvalidPrivateKeyError: If no form matches
    """
    if not isinstance(private_key, str) or not private_key.strip():
        raise InvalidPrivateKeyError("Private key is empty")
    key = private_key.strip()
    hex_key = key[2:] if key.startswith("0x") else key

    if len(hex_key) == PRIVATE_KEY_LENGTH * 2:
        try:
            return bytes.fromhex(hex_key)
        except ValueError:
            pass

    # Lotus export: hex(json)
    try:
        exported = json.loads(bytes.fromhex(hex_key).decode("utf-8"))
        if isinstance(exported, dict) and "PrivateKey" in exported:
            if exported.get("Type", LOTUS_KEY_TYPE) != LOTUS_KEY_TYPE:
                raise InvalidPrivateKeyError(f"Unsupported key type: {exported.get('Type')}")
            raw = base64.b64decode(exported["PrivateKey"], validate=True)
            if len(raw) == PRIVATE_KEY_LENGTH:
                return raw
    except (ValueError, UnicodeDecodeError, binascii.Error):
        pass

    try:
        raw = base64.b64decode(key, validate=True)
    except (ValueError, binascii.Error) as e:
        raise InvalidPrivateKeyError("Unrecognized private key format") from e
    if len(raw) != PRIVATE_KEY_LENGTH:
        raise InvalidPrivateKeyError("Unrecognized private key format")
    return raw


class Secp256k1Signer(MessageSigner):
    """Signer for secp256k1 accounts using eth_keys"""

    def __init__(self, private_key: bytes, network_prefix: str = MAINNET_PREFIX) -> None:
        from eth_keys import keys

        if not 0 < int.from_bytes(private_key, "big") < SECP256K1_ORDER:
            raise InvalidPrivateKeyError("Private key is outside the secp256k1 range")
        try:
            self._key = keys.PrivateKey(private_key)
        except Exception as e:
            raise InvalidPrivateKeyError(f"Invalid secp256k1 private key: {e}") from e
        public_key = b"\x04" + self._key.public_key.to_bytes()
        self._address = str(Address.from_public_key(public_key, network_prefix))
        logger.debug("Secp256k1Signer initialized", extra={"address": self._address})

    @classmethod
    def from_private_key(
        cls, private_key: str, network: str = NetworkConfig.FILECOIN_MAINNET
    ) -> "Secp256k1Signer":
        """Create signer from an encoded private key"""
        return cls(decode_private_key(private_key), NetworkConfig.get_address_prefix(network))

    @classmethod
    def from_mnemonic(
        cls, phrase: str, network: str = NetworkConfig.FILECOIN_MAINNET
    ) -> "Secp256k1Signer":
        """Create signer from a BIP-39 phrase using the network's derivation path"""
        from eth_account import Account

        Account.enable_unaudited_hdwallet_features()
        path = NetworkConfig.get_derivation_path(network)
        try:
            account = Account.from_mnemonic(phrase, account_path=path)
        except Exception as e:
            raise InvalidPrivateKeyError(f"Cannot derive key from mnemonic: {e}") from e
        return cls(bytes(account.key), NetworkConfig.get_address_prefix(network))

    def get_address(self) -> str:
        return self._address

    def export_private_key(self) -> str:
        return self._key.to_bytes().hex()

    async def sign_message(self, message: Message) -> SignedMessage:
        """Sign blake2b-256(CID) with a recoverable secp256k1 signature (r || s || v)"""
        try:
            signature = self._key.sign_msg_hash(message.signing_bytes())
            data = signature.to_bytes()
        except Exception as e:
            raise SignatureCreationError(f"Failed to sign message: {e}") from e

        return SignedMessage(
            Message=message.to_lotus_json(),
            Signature={
                "Type": SIGNATURE_TYPE_SECP256K1,
                "Data": base64.b64encode(data).decode("ascii"),
            },
        )
