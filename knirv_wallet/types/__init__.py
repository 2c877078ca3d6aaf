"""Type definitions for the KNIRV wallet."""

# Common types
from ..types.common import (
    Address,
    TypeUrl,
    PrivateKeyBytes,
    PublicKeyBytes,
    Signature,
    KeyInput,
)

# Transaction types
from ..types.tx import (
    Coin,
    Fee,
    SignerInfo,
    AnyMessage,
    TxMessage,
    TxBody,
    AuthInfo,
    SignDoc,
    TxRaw,
)

# Built-in messages
from ..types.messages import (
    MsgSend,
    MsgCall,
    MemFile,
    MemPackage,
    MsgAddPackage,
    MsgRun,
    BUILTIN_MESSAGES,
)

__all__ = [
    # Common
    "Address",
    "TypeUrl",
    "PrivateKeyBytes",
    "PublicKeyBytes",
    "Signature",
    "KeyInput",

    # Transaction
    "Coin",
    "Fee",
    "SignerInfo",
    "AnyMessage",
    "TxMessage",
    "TxBody",
    "AuthInfo",
    "SignDoc",
    "TxRaw",

    # Messages
    "MsgSend",
    "MsgCall",
    "MemFile",
    "MemPackage",
    "MsgAddPackage",
    "MsgRun",
    "BUILTIN_MESSAGES",
]
