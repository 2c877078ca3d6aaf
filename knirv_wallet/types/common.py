"""Common type definitions for the KNIRV wallet."""

from typing import NewType, Union

__all__ = [
    "Address",
    "TypeUrl",
    "PrivateKeyBytes",
    "PublicKeyBytes",
    "Signature",
    "KeyInput",
]

# Identifiers
Address = NewType("Address", str)
"""Bech32 account address string."""

TypeUrl = NewType("TypeUrl", str)
"""Registered message type identifier, e.g. /knirv.transaction.v1.MsgSend."""

# Crypto types
PrivateKeyBytes = NewType("PrivateKeyBytes", bytes)
"""32-byte private key."""

PublicKeyBytes = NewType("PublicKeyBytes", bytes)
"""33-byte compressed public key."""

Signature = NewType("Signature", bytes)
"""64-byte compact r || s signature."""

# Type aliases
KeyInput = Union[bytes, bytearray, str]
"""Key material given as raw bytes or hex."""
