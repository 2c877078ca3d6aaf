"""BIP39 mnemonic implementation for the KNIRV wallet."""

import hashlib
import logging
import unicodedata
from typing import Optional

from mnemonic import Mnemonic

from ..constants import (
    BIP39_PBKDF2_ROUNDS,
    BIP39_SALT_PREFIX,
    BIP39_SEED_LENGTH,
    BIP39_STRENGTHS,
)
from ..exceptions import InvalidMnemonicError

__all__ = [
    "generate_mnemonic",
    "normalize_mnemonic",
    "normalize_passphrase",
    "validate_mnemonic",
    "mnemonic_to_entropy",
    "entropy_to_mnemonic",
    "seed_from_mnemonic",
]

logger = logging.getLogger(__name__)

_ENGLISH = Mnemonic("english")


def generate_mnemonic(strength: int = 128) -> str:
    """Generate BIP39 mnemonic phrase."""
    if strength not in BIP39_STRENGTHS:
        raise ValueError("Strength must be 128, 160, 192, 224, or 256")
    return _ENGLISH.generate(strength=strength)


def normalize_mnemonic(mnemonic: str) -> str:
    """NFKD-normalise a phrase and collapse runs of whitespace."""
    if not isinstance(mnemonic, str):
        raise InvalidMnemonicError("Mnemonic must be a string")
    return " ".join(unicodedata.normalize("NFKD", mnemonic).split())


def normalize_passphrase(passphrase: Optional[str]) -> str:
    """Treat a missing passphrase as the empty string, then NFKD-normalise."""
    if passphrase is None:
        return ""
    return unicodedata.normalize("NFKD", passphrase)


def validate_mnemonic(mnemonic: str) -> bool:
    """Check word count, wordlist membership and the checksum bits."""
    try:
        return bool(_ENGLISH.check(normalize_mnemonic(mnemonic)))
    except InvalidMnemonicError:
        return False


def mnemonic_to_entropy(mnemonic: str) -> bytes:
    """
    Recover the entropy encoded by a mnemonic.

    Raises:
        InvalidMnemonicError: If the phrase is not a valid BIP39 mnemonic
    """
    if not validate_mnemonic(mnemonic):
        raise InvalidMnemonicError("Invalid mnemonic: wordlist or checksum mismatch")
    return bytes(_ENGLISH.to_entropy(normalize_mnemonic(mnemonic)))


def entropy_to_mnemonic(entropy: bytes) -> str:
    """Encode entropy (16 to 32 bytes, multiple of 4) as a mnemonic."""
    if len(entropy) * 8 not in BIP39_STRENGTHS:
        raise InvalidMnemonicError(f"Invalid entropy length: {len(entropy)} bytes")
    return _ENGLISH.to_mnemonic(bytes(entropy))


def seed_from_mnemonic(mnemonic: str, passphrase: Optional[str] = None) -> bytes:
    """
    Convert mnemonic to seed using PBKDF2.

    Args:
        mnemonic: Space separated English BIP39 words
        passphrase: Optional passphrase; None and "" give the same seed

    Returns:
        64-byte seed

    Raises:
        InvalidMnemonicError: If the phrase fails wordlist or checksum validation
    """
    phrase = normalize_mnemonic(mnemonic)
    if not _ENGLISH.check(phrase):
        raise InvalidMnemonicError("Invalid mnemonic: wordlist or checksum mismatch")

    salt = (BIP39_SALT_PREFIX + normalize_passphrase(passphrase)).encode("utf-8")

    logger.debug(f"Deriving seed from {len(phrase.split())}-word mnemonic")
    return hashlib.pbkdf2_hmac(
        "sha512",
        phrase.encode("utf-8"),
        salt,
        BIP39_PBKDF2_ROUNDS,
        dklen=BIP39_SEED_LENGTH
    )
