"""
KNIRV Wallet Python Library

Key management and transaction signing for KNIRV and other bech32-address
chains: BIP39 mnemonics, BIP32 derivation, a message type registry and
deterministic secp256k1 signing.
"""

from .constants import ChainConfig, KNIRV, COSMOS
from .exceptions import (
    KnirvWalletError,
    ValidationError,
    EncodingError,
    CryptoError,
    InvalidMnemonicError,
    InvalidSignatureError,
    RegistryError,
    UnknownTypeError,
    DuplicateTypeError,
    MalformedPayloadError,
    TransactionError,
    EmptyBodyError,
    WalletError,
    UnknownAccountError,
    WalletLockedError,
)
from .crypto import PrivateKey, PublicKey, HDNode, generate_mnemonic
from .modules import AddressCodec, Registry, TxBuilder, Wallet, AccountData, default_registry
from .types import (
    Coin,
    Fee,
    SignerInfo,
    SignDoc,
    TxRaw,
    TxMessage,
    MsgSend,
    MsgCall,
    MsgAddPackage,
    MsgRun,
)

__version__ = "1.0.0"
__author__ = "KNIRV Wallet Python Library"

__all__ = [
    # Chains
    "ChainConfig",
    "KNIRV",
    "COSMOS",

    # Exceptions
    "KnirvWalletError",
    "ValidationError",
    "EncodingError",
    "CryptoError",
    "InvalidMnemonicError",
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

    # Crypto
    "PrivateKey",
    "PublicKey",
    "HDNode",
    "generate_mnemonic",

    # Modules
    "AddressCodec",
    "Registry",
    "TxBuilder",
    "Wallet",
    "AccountData",
    "default_registry",

    # Types
    "Coin",
    "Fee",
    "SignerInfo",
    "SignDoc",
    "TxRaw",
    "TxMessage",
    "MsgSend",
    "MsgCall",
    "MsgAddPackage",
    "MsgRun",
]
