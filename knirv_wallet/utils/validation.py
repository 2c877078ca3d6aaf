"""Validation utilities for the KNIRV wallet."""

import re
from typing import Union

from ..constants import CURVE_ORDER
from ..exceptions import ValidationError

__all__ = [
    "is_valid_private_key",
    "validate_private_key",
    "is_valid_public_key",
    "validate_public_key",
    "validate_prefix",
    "validate_chain_id",
    "validate_type_url",
    "validate_uint64",
]

# Regex patterns
HEX_PATTERN = re.compile(r"[0-9a-fA-F]*")
PREFIX_PATTERN = re.compile(r"[a-z][a-z0-9]{0,82}")
CHAIN_ID_PATTERN = re.compile(r"[a-zA-Z0-9_.\-]{1,50}")
TYPE_URL_PATTERN = re.compile(r"/?[A-Za-z0-9_.]+(/[A-Za-z0-9_.]+)*")

UINT64_MAX = 0xffffffffffffffff


def _hex_or_bytes(key: Union[str, bytes, bytearray], what: str) -> bytes:
    if isinstance(key, str):
        if key.startswith("0x"):
            key = key[2:]
        if not HEX_PATTERN.fullmatch(key):
            raise ValidationError(f"{what} must be hexadecimal")
        try:
            return bytes.fromhex(key)
        except ValueError as e:
            raise ValidationError(f"Invalid hex {what.lower()}: {e}") from e
    if isinstance(key, (bytes, bytearray)):
        return bytes(key)
    raise ValidationError(f"{what} must be bytes or hex string, got {type(key).__name__}")


def is_valid_private_key(key: Union[str, bytes, bytearray]) -> bool:
    """
    Check if private key format is valid.

    Args:
        key: Private key as hex string or bytes

    Returns:
        True if valid, False otherwise
    """
    try:
        validate_private_key(key)
        return True
    except ValidationError:
        return False


def validate_private_key(key: Union[str, bytes, bytearray]) -> bytes:
    """
    Validate private key and return as bytes.

    Args:
        key: Private key as hex string or bytes

    Returns:
        Private key as 32 bytes

    Raises:
        ValidationError: If private key is invalid
    """
    key = _hex_or_bytes(key, "Private key")

    if len(key) != 32:
        raise ValidationError(f"Private key must be 32 bytes, got {len(key)}")

    key_int = int.from_bytes(key, "big")
    if key_int == 0:
        raise ValidationError("Private key cannot be zero")
    if key_int >= CURVE_ORDER:
        raise ValidationError("Private key exceeds curve order")

    return key


def is_valid_public_key(key: Union[str, bytes, bytearray]) -> bool:
    """
    Check if public key format is valid.

    Args:
        key: Public key as hex string or bytes

    Returns:
        True if valid, False otherwise
    """
    try:
        validate_public_key(key)
        return True
    except ValidationError:
        return False


def validate_public_key(key: Union[str, bytes, bytearray]) -> bytes:
    """
    Validate public key encoding and return as bytes.

    Only the SEC1 prefix and length are checked here; curve membership is
    checked when the key is loaded.

    Args:
        key: Public key as hex string or bytes

    Returns:
        Public key bytes (33 or 65 bytes)

    Raises:
        ValidationError: If public key is invalid
    """
    key = _hex_or_bytes(key, "Public key")

    if len(key) == 33:
        if key[0] not in (0x02, 0x03):
            raise ValidationError("Compressed public key must start with 0x02 or 0x03")
    elif len(key) == 65:
        if key[0] != 0x04:
            raise ValidationError("Uncompressed public key must start with 0x04")
    else:
        raise ValidationError(f"Public key must be 33 or 65 bytes, got {len(key)}")

    return key


def validate_prefix(prefix: str) -> str:
    """Validate a bech32 address prefix (lower-case, starts with a letter)."""
    if not isinstance(prefix, str) or not PREFIX_PATTERN.fullmatch(prefix):
        raise ValidationError(f"Invalid address prefix: {prefix!r}")
    return prefix


def validate_chain_id(chain_id: str) -> str:
    """Validate a chain identifier."""
    if not isinstance(chain_id, str) or not CHAIN_ID_PATTERN.fullmatch(chain_id):
        raise ValidationError(f"Invalid chain id: {chain_id!r}")
    return chain_id


def validate_type_url(type_url: str) -> str:
    """Validate a message type URL such as /knirv.transaction.v1.MsgSend."""
    if not isinstance(type_url, str) or not TYPE_URL_PATTERN.fullmatch(type_url):
        raise ValidationError(f"Invalid type URL: {type_url!r}")
    return type_url


def validate_uint64(value: int, name: str = "value") -> int:
    """Validate an unsigned 64-bit integer such as an account number or sequence."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0 or value > UINT64_MAX:
        raise ValidationError(f"{name} out of uint64 range: {value}")
    return value
