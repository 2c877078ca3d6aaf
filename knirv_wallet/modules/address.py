"""Address codec for KNIRV-style bech32 account addresses."""

from typing import Optional, Union

from ..constants import ADDRESS_LENGTH, DEFAULT_ADDRESS_PREFIX
from ..crypto.keys import PublicKey
from ..exceptions import InvalidLengthError, ValidationError
from ..types.common import Address, KeyInput
from ..utils.encoding import decode_bech32, encode_bech32
from ..utils.validation import validate_prefix

__all__ = ["AddressCodec", "to_address", "decode_address", "validate"]


def to_address(
    public_key: Union[PublicKey, KeyInput],
    prefix: str = DEFAULT_ADDRESS_PREFIX,
) -> Address:
    """
    Derive the account address of a public key.

    The payload is HASH160 of the compressed public key, so the same key
    always yields the same 20 bytes whatever the prefix.

    Args:
        public_key: PublicKey, or 33/65-byte key as bytes or hex
        prefix: Human-readable part

    Returns:
        Bech32 address
    """
    if not isinstance(public_key, PublicKey):
        public_key = PublicKey(public_key)
    return Address(encode_bech32(validate_prefix(prefix), public_key.hash160()))


def decode_address(
    address: str,
    prefix: Optional[str] = None,
    length: int = ADDRESS_LENGTH,
) -> bytes:
    """
    Decode an account address to its payload.

    Args:
        address: Bech32 address
        prefix: Expected human-readable part, not checked when None
        length: Expected payload length

    Returns:
        Payload bytes

    Raises:
        EncodingError: If the bech32 string is malformed
        InvalidLengthError: If the payload has the wrong length
        ValidationError: If the prefix does not match
    """
    hrp, payload = decode_bech32(address)
    if prefix is not None and hrp != prefix:
        raise ValidationError(f"Address prefix mismatch: expected {prefix!r}, got {hrp!r}")
    if len(payload) != length:
        raise InvalidLengthError(f"Address payload must be {length} bytes, got {len(payload)}")
    return payload


def validate(
    address: str,
    prefix: Optional[str] = None,
    length: int = ADDRESS_LENGTH,
) -> bool:
    """Check whether a string is a well-formed account address."""
    try:
        decode_address(address, prefix, length)
    except ValidationError:
        return False
    return True


class AddressCodec:
    """
    Address codec bound to one chain prefix.

    Example:
        >>> codec = AddressCodec("knirv")
        >>> address = codec.encode(public_key)
        >>> codec.decode(address) == public_key.hash160()
        True
    """

    def __init__(self, prefix: str = DEFAULT_ADDRESS_PREFIX, length: int = ADDRESS_LENGTH) -> None:
        self.prefix = validate_prefix(prefix)
        self.length = length

    def encode(self, public_key: Union[PublicKey, KeyInput]) -> Address:
        return to_address(public_key, self.prefix)

    def encode_payload(self, payload: bytes) -> Address:
        """Encode a raw payload, for addresses not derived from a key here."""
        if len(payload) != self.length:
            raise InvalidLengthError(
                f"Address payload must be {self.length} bytes, got {len(payload)}"
            )
        return Address(encode_bech32(self.prefix, bytes(payload)))

    def decode(self, address: str) -> bytes:
        return decode_address(address, self.prefix, self.length)

    def validate(self, address: str) -> bool:
        return validate(address, self.prefix, self.length)

    def __repr__(self) -> str:
        return f"AddressCodec(prefix={self.prefix!r})"
