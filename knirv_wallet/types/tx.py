"""Transaction-related type definitions for the KNIRV wallet."""

from dataclasses import dataclass
from typing import Any, Tuple

from ..constants import SIGN_MODE_DIRECT
from ..utils.encoding import encode_varint, sha256
from ..utils.serialization import decode_record, encode_record

__all__ = [
    "Coin",
    "Fee",
    "SignerInfo",
    "AnyMessage",
    "TxMessage",
    "TxBody",
    "AuthInfo",
    "SignDoc",
    "TxRaw",
]


@dataclass(frozen=True)
class Coin:
    """Token amount in a single denomination."""
    denom: str
    amount: str

    def __post_init__(self) -> None:
        if not self.denom:
            raise ValueError("Coin denom cannot be empty")
        if not self.amount.isdigit():
            raise ValueError(f"Coin amount must be a non-negative integer string: {self.amount!r}")

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


@dataclass(frozen=True)
class Fee:
    """Transaction fee and gas limit."""
    amount: Tuple[Coin, ...] = ()
    gas_limit: int = 0
    payer: str = ""
    granter: str = ""


@dataclass(frozen=True)
class SignerInfo:
    """Signer public key and the sequence it signs at."""
    public_key: bytes
    sequence: int = 0
    sign_mode: int = SIGN_MODE_DIRECT


@dataclass(frozen=True)
class AnyMessage:
    """Encoded message tagged with its type URL."""
    type_url: str
    value: bytes


@dataclass(frozen=True)
class TxMessage:
    """Typed message paired with the type URL it is registered under."""
    type_url: str
    value: Any


@dataclass(frozen=True)
class TxBody:
    """Messages and metadata covered by the signature."""
    messages: Tuple[AnyMessage, ...]
    memo: str = ""
    timeout_height: int = 0

    def to_bytes(self) -> bytes:
        return encode_record(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> "TxBody":
        return decode_record(cls, data)


@dataclass(frozen=True)
class AuthInfo:
    """Signer infos and fee."""
    signer_infos: Tuple[SignerInfo, ...]
    fee: Fee

    def to_bytes(self) -> bytes:
        return encode_record(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> "AuthInfo":
        return decode_record(cls, data)


@dataclass(frozen=True)
class SignDoc:
    """
    Document a signer commits to.

    The canonical form concatenates, in this fixed order, the length-prefixed
    body bytes, the length-prefixed auth info bytes, the length-prefixed
    UTF-8 chain id and the 8-byte big-endian account number. The sequence is
    committed through the signer info inside the auth info bytes.
    """
    body_bytes: bytes
    auth_info_bytes: bytes
    chain_id: str
    account_number: int
    sequence: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "body_bytes", bytes(self.body_bytes))
        object.__setattr__(self, "auth_info_bytes", bytes(self.auth_info_bytes))
        if not isinstance(self.chain_id, str):
            raise TypeError("chain_id must be a string")
        for name in ("account_number", "sequence"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < 2 ** 64:
                raise ValueError(f"{name} must be an unsigned 64-bit integer")

    def to_bytes(self) -> bytes:
        """Get the canonical bytes that are hashed for signing."""
        chain_id = self.chain_id.encode("utf-8")
        return b"".join((
            encode_varint(len(self.body_bytes)),
            self.body_bytes,
            encode_varint(len(self.auth_info_bytes)),
            self.auth_info_bytes,
            encode_varint(len(chain_id)),
            chain_id,
            self.account_number.to_bytes(8, "big"),
        ))

    def digest(self) -> bytes:
        """SHA-256 of the canonical bytes."""
        return sha256(self.to_bytes())


@dataclass(frozen=True)
class TxRaw:
    """Signed transaction ready for broadcast."""
    body_bytes: bytes
    auth_info_bytes: bytes
    signatures: Tuple[bytes, ...]

    def to_bytes(self) -> bytes:
        return encode_record(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> "TxRaw":
        return decode_record(cls, data)
