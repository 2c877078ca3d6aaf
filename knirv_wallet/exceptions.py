"""KNIRV wallet exceptions hierarchy."""

from typing import Any, Optional

__all__ = [
    "KnirvWalletError",
    "ValidationError",
    "EncodingError",
    "InvalidChecksumError",
    "InvalidCharacterError",
    "InvalidLengthError",
    "CryptoError",
    "InvalidMnemonicError",
    "InvalidChildKeyError",
    "InvalidSignatureError",
    "RegistryError",
    "UnknownTypeError",
    "DuplicateTypeError",
    "MalformedPayloadError",
    "TransactionError",
    "EmptyBodyError",
    "WalletError",
    "UnknownAccountError",
    "WalletLockedError",
]


class KnirvWalletError(Exception):
    """Base exception for all KNIRV wallet errors."""

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        data: Optional[Any] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ValidationError(KnirvWalletError):
    """Raised when validation fails."""
    pass


class EncodingError(ValidationError):
    """Raised when a text or binary encoding is malformed."""
    pass


class InvalidChecksumError(EncodingError):
    """Raised when a bech32 checksum does not match."""
    pass


class InvalidCharacterError(EncodingError):
    """Raised when an encoded string contains a forbidden character or mixed case."""
    pass


class InvalidLengthError(EncodingError):
    """Raised when an encoded string or payload has the wrong length."""
    pass


class CryptoError(KnirvWalletError):
    """Raised when cryptographic operation fails."""
    pass


class InvalidMnemonicError(CryptoError):
    """Raised when a mnemonic fails wordlist or checksum validation."""
    pass


class InvalidChildKeyError(CryptoError):
    """Raised when a derived child key is zero or outside the curve order."""

    def __init__(self, index: int, message: Optional[str] = None) -> None:
        if message is None:
            message = f"Invalid child key at index {index:#x}"
        super().__init__(message)
        self.index = index


class InvalidSignatureError(CryptoError):
    """Raised when a signature encoding is malformed."""
    pass


class RegistryError(KnirvWalletError):
    """Raised when a type registry operation fails."""
    pass


class UnknownTypeError(RegistryError):
    """Raised when a type URL is not registered."""

    def __init__(self, type_url: str, message: Optional[str] = None) -> None:
        if message is None:
            message = f"Unknown message type: {type_url}"
        super().__init__(message)
        self.type_url = type_url


class DuplicateTypeError(RegistryError):
    """Raised when a type URL is registered twice without override."""

    def __init__(self, type_url: str, message: Optional[str] = None) -> None:
        if message is None:
            message = f"Message type already registered: {type_url}"
        super().__init__(message)
        self.type_url = type_url


class MalformedPayloadError(RegistryError):
    """Raised when message bytes cannot be decoded into a typed message."""
    pass


class TransactionError(KnirvWalletError):
    """Raised when transaction operation fails."""
    pass


class EmptyBodyError(TransactionError):
    """Raised when a transaction body has no messages."""

    def __init__(self, message: str = "Transaction body must contain at least one message") -> None:
        super().__init__(message)


class WalletError(KnirvWalletError):
    """Raised when wallet operation fails."""
    pass


class UnknownAccountError(WalletError):
    """Raised when an address does not belong to the wallet."""

    def __init__(self, address: str, message: Optional[str] = None) -> None:
        if message is None:
            message = f"Account not found: {address}"
        super().__init__(message)
        self.address = address


class WalletLockedError(WalletError):
    """Raised when a locked wallet is used."""

    def __init__(self, message: str = "Wallet is locked") -> None:
        super().__init__(message)
