"""
Filecoin address parsing and encoding.

String form: ``<network><protocol><payload>`` where network is ``f``
(mainnet) or ``t`` (test networks). Protocol 0 addresses carry a decimal
actor ID; protocols 1-3 carry base32(payload + checksum); protocol 4
(delegated) carries ``<namespace>f<base32(subaddress + checksum)>``. The
checksum is a 4-byte blake2b digest of the protocol byte and payload.
"""

import base64
import binascii
import hashlib
import re
from dataclasses import dataclass

from filecoin_chain.exceptions import InvalidAddressError

MAINNET_PREFIX = "f"
TESTNET_PREFIX = "t"
NETWORK_PREFIXES = (MAINNET_PREFIX, TESTNET_PREFIX)

PROTOCOL_ID = 0
PROTOCOL_SECP256K1 = 1
PROTOCOL_ACTOR = 2
PROTOCOL_BLS = 3
PROTOCOL_DELEGATED = 4

PAYLOAD_HASH_LENGTH = 20
BLS_PUBLIC_KEY_LENGTH = 48
CHECKSUM_LENGTH = 4
MAX_SUBADDRESS_LENGTH = 54
MAX_ACTOR_ID = 2**63 - 1

_FIXED_PAYLOAD_LENGTHS = {
    PROTOCOL_SECP256K1: PAYLOAD_HASH_LENGTH,
    PROTOCOL_ACTOR: PAYLOAD_HASH_LENGTH,
    PROTOCOL_BLS: BLS_PUBLIC_KEY_LENGTH,
}

_DIGITS = re.compile(r"^[0-9]+$")
_BASE32 = re.compile(r"^[a-z2-7]+$")


def _encode_uvarint(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _decode_uvarint(data: bytes) -> tuple[int, int]:
    """Return (value, bytes consumed)"""
    value = 0
    shift = 0
    for i, byte in enumerate(data):
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, i + 1
        shift += 7
        if shift > 63:
            break
    raise InvalidAddressError("Malformed varint in address payload")


def _b32encode(data: bytes) -> str:
    return base64.b32encode(data).decode("ascii").lower().rstrip("=")


def _b32decode(text: str) -> bytes:
    if not _BASE32.match(text):
        raise InvalidAddressError(f"Invalid base32 payload: {text!r}")
    try:
        decoded = base64.b32decode(text.upper() + "=" * (-len(text) % 8))
    except (binascii.Error, ValueError) as e:
        raise InvalidAddressError(f"Invalid base32 payload: {text!r}") from e
    # reject non-canonical trailing bits
    if _b32encode(decoded) != text:
        raise InvalidAddressError(f"Non-canonical base32 payload: {text!r}")
    return decoded


def address_checksum(protocol: int, payload: bytes) -> bytes:
    return hashlib.blake2b(bytes([protocol]) + payload, digest_size=CHECKSUM_LENGTH).digest()


@dataclass(frozen=True)
class Address:
    """Parsed Filecoin address"""

    protocol: int
    payload: bytes
    network: str = MAINNET_PREFIX

    @classmethod
    def from_string(cls, address: str) -> "Address":
        """Parse and checksum-verify an address string.

        Raises:
            InvalidAddressError: If the string is not a valid address
        """
        if not isinstance(address, str) or len(address) < 3:
            raise InvalidAddressError(f"Invalid address: {address!r}")

        network, protocol_char, raw = address[0], address[1], address[2:]
        if network not in NETWORK_PREFIXES:
            raise InvalidAddressError(f"Unknown network prefix in address: {address}")
        if not _DIGITS.match(protocol_char) or int(protocol_char) > PROTOCOL_DELEGATED:
            raise InvalidAddressError(f"Unknown address protocol: {address}")
        protocol = int(protocol_char)

        if protocol == PROTOCOL_ID:
            if not _DIGITS.match(raw) or int(raw) > MAX_ACTOR_ID:
                raise InvalidAddressError(f"Invalid actor ID address: {address}")
            return cls(protocol, _encode_uvarint(int(raw)), network)

        if protocol == PROTOCOL_DELEGATED:
            namespace, sep, body = raw.partition("f")
            if not sep or not _DIGITS.match(namespace) or int(namespace) > MAX_ACTOR_ID:
                raise InvalidAddressError(f"Invalid delegated address: {address}")
            decoded = _b32decode(body)
            subaddress, checksum = decoded[:-CHECKSUM_LENGTH], decoded[-CHECKSUM_LENGTH:]
            if len(subaddress) > MAX_SUBADDRESS_LENGTH:
                raise InvalidAddressError(f"Delegated sub-address too long: {address}")
            payload = _encode_uvarint(int(namespace)) + subaddress
        else:
            decoded = _b32decode(raw)
            payload, checksum = decoded[:-CHECKSUM_LENGTH], decoded[-CHECKSUM_LENGTH:]
            if len(payload) != _FIXED_PAYLOAD_LENGTHS[protocol]:
                raise InvalidAddressError(
                    f"Invalid payload length {len(payload)} for protocol {protocol}: {address}"
                )

        if len(checksum) != CHECKSUM_LENGTH or checksum != address_checksum(protocol, payload):
            raise InvalidAddressError(f"Checksum mismatch: {address}")
        return cls(protocol, payload, network)

    @classmethod
    def from_public_key(cls, public_key: bytes, network: str = MAINNET_PREFIX) -> "Address":
        """Build a protocol 1 address from an uncompressed secp256k1 public key"""
        if len(public_key) != 65 or public_key[0] != 0x04:
            raise InvalidAddressError("Expected a 65-byte uncompressed secp256k1 public key")
        digest = hashlib.blake2b(public_key, digest_size=PAYLOAD_HASH_LENGTH).digest()
        return cls(PROTOCOL_SECP256K1, digest, network)

    def to_bytes(self) -> bytes:
        """Wire encoding: protocol byte followed by the payload"""
        return bytes([self.protocol]) + self.payload

    def __str__(self) -> str:
        if self.protocol == PROTOCOL_ID:
            actor_id, _ = _decode_uvarint(self.payload)
            return f"{self.network}{self.protocol}{actor_id}"

        checksum = address_checksum(self.protocol, self.payload)
        if self.protocol == PROTOCOL_DELEGATED:
            namespace, consumed = _decode_uvarint(self.payload)
            body = _b32encode(self.payload[consumed:] + checksum)
            return f"{self.network}{self.protocol}{namespace}f{body}"

        return f"{self.network}{self.protocol}{_b32encode(self.payload + checksum)}"


def validate_address_string(address: str) -> bool:
    """Return True if ``address`` is a well-formed Filecoin address"""
    try:
        Address.from_string(address)
        return True
    except InvalidAddressError:
        return False
