"""Encoding and decoding utilities for the KNIRV wallet."""

import hashlib
import struct
from typing import Iterable, List, Tuple

from Crypto.Hash import RIPEMD160

from ..constants import BECH32_CHECKSUM_LENGTH, BECH32_MAX_LENGTH, BECH32_SEPARATOR
from ..exceptions import (
    EncodingError,
    InvalidCharacterError,
    InvalidChecksumError,
    InvalidLengthError,
    ValidationError,
)

__all__ = [
    "hex_to_bytes",
    "bytes_to_hex",
    "encode_varint",
    "decode_varint",
    "sha256",
    "double_sha256",
    "hash160",
    "encode_base58",
    "decode_base58",
    "encode_base58_check",
    "decode_base58_check",
    "convert_bits",
    "encode_bech32",
    "decode_bech32",
]

# Constants
BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
BECH32_GENERATOR = (0x3b6a57b2, 0x26508e6d, 0x1ea119fa, 0x3d4233dd, 0x2a1462b3)
BECH32_CONST = 1


def hex_to_bytes(hex_str: str) -> bytes:
    """
    Convert hex string to bytes.

    Args:
        hex_str: Hex string with or without 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValidationError: If hex string is invalid
    """
    try:
        if isinstance(hex_str, str) and hex_str.startswith("0x"):
            hex_str = hex_str[2:]
        return bytes.fromhex(hex_str)
    except ValueError as e:
        raise ValidationError(f"Invalid hex string: {hex_str}") from e


def bytes_to_hex(data: bytes, prefix: bool = False) -> str:
    """
    Convert bytes to hex string.

    Args:
        data: Bytes to encode
        prefix: Add 0x prefix

    Returns:
        Hex string
    """
    hex_str = bytes(data).hex()
    if prefix:
        hex_str = f"0x{hex_str}"
    return hex_str


def encode_varint(n: int) -> bytes:
    """
    Encode integer as a CompactSize variable length integer.

    Args:
        n: Non-negative integer to encode

    Returns:
        Encoded varint bytes
    """
    if n < 0:
        raise EncodingError(f"Cannot encode negative varint: {n}")
    if n < 0xfd:
        return bytes([n])
    elif n <= 0xffff:
        return b"\xfd" + struct.pack("<H", n)
    elif n <= 0xffffffff:
        return b"\xfe" + struct.pack("<I", n)
    elif n <= 0xffffffffffffffff:
        return b"\xff" + struct.pack("<Q", n)
    raise EncodingError(f"Varint out of range: {n}")


def decode_varint(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """
    Decode a CompactSize variable length integer.

    Only minimal encodings are accepted, so every value has exactly one
    byte representation.

    Args:
        data: Bytes containing varint
        offset: Starting position

    Returns:
        Tuple of (value, new_offset)

    Raises:
        InvalidLengthError: If data ends inside the varint
        EncodingError: If the encoding is not minimal
    """
    if offset >= len(data):
        raise InvalidLengthError("Truncated varint")

    prefix = data[offset]
    if prefix < 0xfd:
        return prefix, offset + 1

    fmt, size, minimum = {
        0xfd: ("<H", 2, 0xfd),
        0xfe: ("<I", 4, 0x10000),
        0xff: ("<Q", 8, 0x100000000),
    }[prefix]
    if offset + 1 + size > len(data):
        raise InvalidLengthError("Truncated varint")

    value = struct.unpack_from(fmt, data, offset + 1)[0]
    if value < minimum:
        raise EncodingError("Non-canonical varint encoding")
    return value, offset + 1 + size


def sha256(data: bytes) -> bytes:
    """Perform a single SHA256 hash."""
    return hashlib.sha256(data).digest()


def double_sha256(data: bytes) -> bytes:
    """Perform double SHA256 hash."""
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def hash160(data: bytes) -> bytes:
    """Perform RIPEMD160(SHA256(data))."""
    sha256_hash = hashlib.sha256(data).digest()
    return RIPEMD160.new(sha256_hash).digest()


def encode_base58(data: bytes) -> str:
    """
    Encode bytes as Base58 string.

    Args:
        data: Bytes to encode

    Returns:
        Base58 encoded string
    """
    n = int.from_bytes(data, "big")

    encoded = ""
    while n:
        n, remainder = divmod(n, 58)
        encoded = BASE58_ALPHABET[remainder] + encoded

    # Add leading zeros
    for byte in data:
        if byte == 0:
            encoded = "1" + encoded
        else:
            break

    return encoded


def decode_base58(string: str) -> bytes:
    """
    Decode Base58 string to bytes.

    Args:
        string: Base58 string

    Returns:
        Decoded bytes

    Raises:
        InvalidCharacterError: If string contains invalid characters
    """
    n = 0
    for char in string:
        index = BASE58_ALPHABET.find(char)
        if index < 0:
            raise InvalidCharacterError(f"Invalid Base58 character: {char}")
        n = n * 58 + index

    body = n.to_bytes((n.bit_length() + 7) // 8, "big") if n else b""

    leading_zeros = len(string) - len(string.lstrip("1"))
    return b"\x00" * leading_zeros + body


def encode_base58_check(data: bytes) -> str:
    """
    Encode bytes as Base58Check (with checksum).

    Args:
        data: Bytes to encode

    Returns:
        Base58Check encoded string
    """
    checksum = double_sha256(data)[:4]
    return encode_base58(data + checksum)


def decode_base58_check(string: str) -> bytes:
    """
    Decode Base58Check string.

    Args:
        string: Base58Check string

    Returns:
        Decoded data (without checksum)

    Raises:
        InvalidLengthError: If the string is too short
        InvalidChecksumError: If checksum is invalid
    """
    data = decode_base58(string)
    if len(data) < 4:
        raise InvalidLengthError("Invalid Base58Check string: too short")

    payload, checksum = data[:-4], data[-4:]
    if checksum != double_sha256(payload)[:4]:
        raise InvalidChecksumError("Invalid Base58Check checksum")

    return payload


def convert_bits(data: Iterable[int], from_bits: int, to_bits: int, pad: bool = True) -> List[int]:
    """
    Regroup a sequence of from_bits-wide values into to_bits-wide values.

    Args:
        data: Input values
        from_bits: Width of each input value
        to_bits: Width of each output value
        pad: Zero-pad the final group instead of rejecting leftover bits

    Returns:
        Regrouped values

    Raises:
        EncodingError: If an input value does not fit in from_bits
        InvalidLengthError: If pad is False and leftover bits are invalid
    """
    acc = 0
    bits = 0
    result = []
    maxv = (1 << to_bits) - 1
    max_acc = (1 << (from_bits + to_bits - 1)) - 1

    for value in data:
        if value < 0 or value >> from_bits:
            raise EncodingError(f"Value does not fit in {from_bits} bits: {value}")
        acc = ((acc << from_bits) | value) & max_acc
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            result.append((acc >> bits) & maxv)

    if pad:
        if bits:
            result.append((acc << (to_bits - bits)) & maxv)
    elif bits >= from_bits or (acc << (to_bits - bits)) & maxv:
        raise InvalidLengthError("Invalid bech32 padding")

    return result


def _bech32_polymod(values: List[int]) -> int:
    """Compute Bech32 checksum polymod."""
    chk = 1
    for value in values:
        top = chk >> 25
        chk = (chk & 0x1ffffff) << 5 ^ value
        for i in range(5):
            chk ^= BECH32_GENERATOR[i] if ((top >> i) & 1) else 0
    return chk


def _bech32_hrp_expand(hrp: str) -> List[int]:
    """Expand human-readable part for Bech32."""
    return [ord(x) >> 5 for x in hrp] + [0] + [ord(x) & 31 for x in hrp]


def _bech32_create_checksum(hrp: str, values: List[int]) -> List[int]:
    polymod = _bech32_polymod(_bech32_hrp_expand(hrp) + values + [0] * BECH32_CHECKSUM_LENGTH) ^ BECH32_CONST
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(BECH32_CHECKSUM_LENGTH)]


def _check_hrp(hrp: str) -> str:
    if not hrp:
        raise InvalidLengthError("Bech32 prefix cannot be empty")
    if any(ord(char) < 33 or ord(char) > 126 for char in hrp):
        raise InvalidCharacterError(f"Invalid Bech32 prefix character in: {hrp!r}")
    if hrp.lower() != hrp and hrp.upper() != hrp:
        raise InvalidCharacterError(f"Mixed-case Bech32 prefix: {hrp}")
    return hrp.lower()


def encode_bech32(hrp: str, payload: bytes) -> str:
    """
    Encode bytes as a Bech32 string.

    Args:
        hrp: Human-readable prefix
        payload: Raw bytes to encode

    Returns:
        Lower-case Bech32 string

    Raises:
        InvalidCharacterError: If the prefix contains invalid characters
        InvalidLengthError: If the prefix is empty or the result is too long
    """
    hrp = _check_hrp(hrp)
    values = convert_bits(payload, 8, 5)
    checksum = _bech32_create_checksum(hrp, values)

    encoded = hrp + BECH32_SEPARATOR + "".join(BECH32_CHARSET[v] for v in values + checksum)
    if len(encoded) > BECH32_MAX_LENGTH:
        raise InvalidLengthError(
            f"Bech32 string exceeds {BECH32_MAX_LENGTH} characters: {len(encoded)}"
        )
    return encoded


def decode_bech32(address: str) -> Tuple[str, bytes]:
    """
    Decode a Bech32 string.

    The checksum is verified before the data part is unpacked, so any
    corrupted character is reported as a checksum failure.

    Args:
        address: Bech32 string

    Returns:
        Tuple of (hrp, payload)

    Raises:
        InvalidLengthError: If the string, prefix or data part has a bad length
        InvalidCharacterError: If the string has mixed case or invalid characters
        InvalidChecksumError: If the checksum does not match
    """
    if len(address) > BECH32_MAX_LENGTH:
        raise InvalidLengthError(
            f"Bech32 string exceeds {BECH32_MAX_LENGTH} characters: {len(address)}"
        )
    if any(ord(char) < 33 or ord(char) > 126 for char in address):
        raise InvalidCharacterError("Invalid Bech32 character outside printable ASCII")
    if address.lower() != address and address.upper() != address:
        raise InvalidCharacterError("Mixed-case Bech32 string")

    address = address.lower()

    # Find separator
    pos = address.rfind(BECH32_SEPARATOR)
    if pos < 1:
        raise InvalidLengthError("Invalid Bech32 string: missing prefix or separator")
    if pos + 1 + BECH32_CHECKSUM_LENGTH > len(address):
        raise InvalidLengthError("Invalid Bech32 string: data part too short")

    hrp = address[:pos]
    data = address[pos + 1:]

    values = []
    for char in data:
        index = BECH32_CHARSET.find(char)
        if index < 0:
            raise InvalidCharacterError(f"Invalid Bech32 character: {char}")
        values.append(index)

    if _bech32_polymod(_bech32_hrp_expand(hrp) + values) != BECH32_CONST:
        raise InvalidChecksumError("Invalid Bech32 checksum")

    payload = convert_bits(values[:-BECH32_CHECKSUM_LENGTH], 5, 8, pad=False)
    return hrp, bytes(payload)
