"""
Unsigned Filecoin message and its signing payload
"""

import base64
import hashlib
from dataclasses import dataclass
from typing import Any

import cbor2

from filecoin_chain.address import Address
from filecoin_chain.exceptions import InvalidInput
from filecoin_chain.units import parse_decimal

MESSAGE_VERSION = 0
METHOD_SEND = 0

# CIDv1 / dag-cbor / blake2b-256 multihash prefix
CID_PREFIX = bytes([0x01, 0x71, 0xA0, 0xE4, 0x02, 0x20])


def encode_big_int(value: int) -> bytes:
    """Serialize a non-negative big integer: empty for zero, else sign byte + magnitude"""
    if value < 0:
        raise InvalidInput(f"Token amounts must not be negative: {value}")
    if value == 0:
        return b""
    return b"\x00" + value.to_bytes((value.bit_length() + 7) // 8, "big")


def _as_int(value: Any, name: str) -> int:
    parsed = parse_decimal(value, name)
    if parsed != parsed.to_integral_value():
        raise InvalidInput(f"{name} must be an integer, got {value!r}")
    return int(parsed)


@dataclass(frozen=True)
class Message:
    """A plain value transfer (method 0) between two accounts"""

    to: str
    from_address: str
    nonce: int
    value: str
    gas_limit: int
    gas_fee_cap: str
    gas_premium: str
    method: int = METHOD_SEND
    params: bytes = b""
    version: int = MESSAGE_VERSION

    @classmethod
    def from_lotus_json(cls, data: dict[str, Any]) -> "Message":
        params = data.get("Params") or ""
        return cls(
            to=data["To"],
            from_address=data["From"],
            nonce=int(data.get("Nonce", 0)),
            value=str(data.get("Value", "0")),
            gas_limit=int(data.get("GasLimit", 0)),
            gas_fee_cap=str(data.get("GasFeeCap", "0")),
            gas_premium=str(data.get("GasPremium", "0")),
            method=int(data.get("Method", METHOD_SEND)),
            params=base64.b64decode(params),
            version=int(data.get("Version", MESSAGE_VERSION)),
        )

    def to_lotus_json(self) -> dict[str, Any]:
        return {
            "Version": self.version,
            "To": self.to,
            "From": self.from_address,
            "Nonce": self.nonce,
            "Value": self.value,
            "GasLimit": self.gas_limit,
            "GasFeeCap": self.gas_fee_cap,
            "GasPremium": self.gas_premium,
            "Method": self.method,
            "Params": base64.b64encode(self.params).decode("ascii"),
        }

    def serialize(self) -> bytes:
        """DAG-CBOR encoding used for the message CID"""
        return cbor2.dumps(
            [
                self.version,
                Address.from_string(self.to).to_bytes(),
                Address.from_string(self.from_address).to_bytes(),
                self.nonce,
                encode_big_int(_as_int(self.value, "value")),
                self.gas_limit,
                encode_big_int(_as_int(self.gas_fee_cap, "gas_fee_cap")),
                encode_big_int(_as_int(self.gas_premium, "gas_premium")),
                self.method,
                self.params,
            ]
        )

    def cid(self) -> bytes:
        digest = hashlib.blake2b(self.serialize(), digest_size=32).digest()
        return CID_PREFIX + digest

    def cid_string(self) -> str:
        """Multibase base32 form of the CID (as returned by MpoolPush)"""
        return "b" + base64.b32encode(self.cid()).decode("ascii").lower().rstrip("=")

    def signing_bytes(self) -> bytes:
        """Digest that secp256k1 signers sign"""
        return hashlib.blake2b(self.cid(), digest_size=32).digest()
