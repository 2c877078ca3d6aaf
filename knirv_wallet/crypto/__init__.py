"""Cryptographic utilities for the KNIRV wallet."""

from ..crypto.keys import PrivateKey, PublicKey, KeyPair, generate_mnemonic, derive_key
from ..crypto.bip39 import validate_mnemonic, seed_from_mnemonic
from ..crypto.hd import DerivationPath, HDNode, derive
from ..crypto.signature import (
    sign,
    verify,
    sign_digest,
    verify_digest,
    encode_der_signature,
)

__all__ = [
    # Keys
    "PrivateKey",
    "PublicKey",
    "KeyPair",
    "generate_mnemonic",
    "derive_key",

    # Mnemonics and HD derivation
    "validate_mnemonic",
    "seed_from_mnemonic",
    "DerivationPath",
    "HDNode",
    "derive",

    # Signatures
    "sign",
    "verify",
    "sign_digest",
    "verify_digest",
    "encode_der_signature",
]
