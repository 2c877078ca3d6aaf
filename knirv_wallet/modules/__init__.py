"""KNIRV wallet modules."""

from ..modules.address import AddressCodec, to_address, decode_address
from ..modules.registry import Registry, RegisteredType, default_registry, register_default_types
from ..modules.transaction import TxBuilder
from ..modules.account import Account, AccountData
from ..modules.wallet import Wallet

__all__ = [
    # Addresses
    "AddressCodec",
    "to_address",
    "decode_address",

    # Registry
    "Registry",
    "RegisteredType",
    "default_registry",
    "register_default_types",

    # Transactions
    "TxBuilder",

    # Wallet
    "Account",
    "AccountData",
    "Wallet",
]
