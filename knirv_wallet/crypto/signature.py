"""Signature utilities for the KNIRV wallet."""

import logging
from typing import Tuple, Union

from ..constants import CURVE_ORDER, SIGNATURE_LENGTH
from ..crypto.keys import PrivateKey, PublicKey
from ..exceptions import InvalidSignatureError
from ..types.common import KeyInput, Signature
from ..types.tx import SignDoc

__all__ = [
    "sign",
    "verify",
    "sign_digest",
    "verify_digest",
    "parse_compact_signature",
    "encode_compact_signature",
    "encode_der_signature",
]

logger = logging.getLogger(__name__)


def sign_digest(private_key: Union[PrivateKey, KeyInput], digest: bytes) -> Signature:
    """
    Sign a 32-byte digest.

    Raw key bytes are loaded into a temporary key that is wiped before
    returning, on success and on error alike.

    Args:
        private_key: PrivateKey, or raw/hex key material
        digest: 32-byte digest

    Returns:
        64-byte compact signature
    """
    if isinstance(private_key, PrivateKey):
        return private_key.sign_digest(digest)

    with PrivateKey(private_key) as scoped_key:
        return scoped_key.sign_digest(digest)


def verify_digest(public_key: Union[PublicKey, KeyInput], digest: bytes, signature: bytes) -> bool:
    """
    Verify a compact signature over a digest.

    Returns:
        True if the signature matches, False otherwise

    Raises:
        InvalidSignatureError: If the signature encoding is malformed
    """
    if not isinstance(public_key, PublicKey):
        public_key = PublicKey(public_key)
    return public_key.verify(signature, digest)


def sign(sign_doc: SignDoc, private_key: Union[PrivateKey, KeyInput]) -> Signature:
    """
    Sign a transaction sign document.

    The signature is deterministic: the same document and key always
    produce the same bytes.

    Args:
        sign_doc: Document to sign
        private_key: Signing key

    Returns:
        64-byte compact r || s signature
    """
    digest = sign_doc.digest()
    signature = sign_digest(private_key, digest)
    logger.debug(f"Signed sign doc for chain {sign_doc.chain_id} digest {digest.hex()[:16]}")
    return signature


def verify(sign_doc: SignDoc, signature: bytes, public_key: Union[PublicKey, KeyInput]) -> bool:
    """
    Verify a signature over a sign document.

    Args:
        sign_doc: Document that was signed
        signature: 64-byte compact signature
        public_key: Signer public key

    Returns:
        True if valid, False for a well-formed signature that does not match

    Raises:
        InvalidSignatureError: If the signature has the wrong length or an
            out-of-range scalar
    """
    return verify_digest(public_key, sign_doc.digest(), signature)


def parse_compact_signature(signature: bytes) -> Tuple[int, int]:
    """
    Split a compact signature into (r, s).

    Raises:
        InvalidSignatureError: If the length is wrong or r/s is outside [1, n)
    """
    if not isinstance(signature, (bytes, bytearray)):
        raise InvalidSignatureError(f"Signature must be bytes, got {type(signature).__name__}")
    if len(signature) != SIGNATURE_LENGTH:
        raise InvalidSignatureError(
            f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(signature)}"
        )

    r = int.from_bytes(signature[:32], "big")
    s = int.from_bytes(signature[32:], "big")
    if not 0 < r < CURVE_ORDER:
        raise InvalidSignatureError("Signature r value out of range")
    if not 0 < s < CURVE_ORDER:
        raise InvalidSignatureError("Signature s value out of range")

    return r, s


def encode_compact_signature(r: int, s: int) -> Signature:
    """Encode (r, s) as a 64-byte compact signature."""
    if not 0 < r < CURVE_ORDER or not 0 < s < CURVE_ORDER:
        raise InvalidSignatureError("Signature scalar out of range")
    return Signature(r.to_bytes(32, "big") + s.to_bytes(32, "big"))


def encode_der_signature(r: int, s: int) -> bytes:
    """
    Encode signature as DER.

    Args:
        r: Signature r value
        s: Signature s value

    Returns:
        DER-encoded signature
    """
    r_bytes = r.to_bytes((r.bit_length() + 7) // 8 or 1, "big")
    if r_bytes[0] & 0x80:
        r_bytes = b"\x00" + r_bytes
    r_encoded = b"\x02" + bytes([len(r_bytes)]) + r_bytes

    s_bytes = s.to_bytes((s.bit_length() + 7) // 8 or 1, "big")
    if s_bytes[0] & 0x80:
        s_bytes = b"\x00" + s_bytes
    s_encoded = b"\x02" + bytes([len(s_bytes)]) + s_bytes

    sequence = r_encoded + s_encoded
    return b"\x30" + bytes([len(sequence)]) + sequence
