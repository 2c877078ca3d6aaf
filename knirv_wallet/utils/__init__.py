"""Utility helpers for the KNIRV wallet."""

from ..utils.encoding import decode_bech32, encode_bech32, hash160, sha256
from ..utils.locks import ReadWriteLock
from ..utils.serialization import decode_record, encode_record

__all__ = [
    "encode_bech32",
    "decode_bech32",
    "hash160",
    "sha256",
    "ReadWriteLock",
    "encode_record",
    "decode_record",
]
