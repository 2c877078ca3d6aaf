"""Key management for the KNIRV wallet."""

import hmac
import logging
import secrets
from dataclasses import dataclass, field
from typing import Optional, Union

from coincurve import PrivateKey as SecpPrivateKey, PublicKey as SecpPublicKey

from ..constants import CURVE_ORDER, DEFAULT_ADDRESS_PREFIX, DEFAULT_COIN_TYPE, HD_PATH_TEMPLATE
from ..exceptions import CryptoError, ValidationError
from ..types.common import Address, KeyInput, PrivateKeyBytes, PublicKeyBytes, Signature
from ..utils.encoding import hash160
from ..utils.validation import validate_private_key, validate_public_key

__all__ = ["PrivateKey", "PublicKey", "KeyPair", "generate_mnemonic", "derive_key"]

logger = logging.getLogger(__name__)


class PrivateKey:
    """
    secp256k1 private key wrapper.

    The scalar is held in a mutable buffer so it can be zeroised with
    :meth:`wipe`. A wiped key refuses every further operation.
    """

    def __init__(self, key: Union[KeyInput, "PrivateKey"]) -> None:
        """
        Initialize private key.

        Args:
            key: Private key as 32 bytes, hex string, or another PrivateKey

        Raises:
            ValidationError: If key format is invalid
        """
        if isinstance(key, PrivateKey):
            self._secret = bytearray(key._require_secret())
        else:
            self._secret = bytearray(validate_private_key(key))

        self._public_point = PublicKeyBytes(
            SecpPublicKey.from_secret(bytes(self._secret)).format(compressed=True)
        )

    @classmethod
    def create(cls) -> "PrivateKey":
        """
        Create new random private key.

        Returns:
            New PrivateKey instance
        """
        while True:
            key_bytes = secrets.token_bytes(32)
            try:
                return cls(key_bytes)
            except ValidationError:
                # Extremely rare, try again
                continue

    def _require_secret(self) -> bytearray:
        if self._secret is None:
            raise CryptoError("Private key has been wiped")
        return self._secret

    @property
    def secret(self) -> PrivateKeyBytes:
        """Get private key as bytes."""
        return PrivateKeyBytes(bytes(self._require_secret()))

    @property
    def is_wiped(self) -> bool:
        return self._secret is None

    def public_key(self) -> "PublicKey":
        """
        Get corresponding compressed public key.

        Returns:
            PublicKey instance
        """
        self._require_secret()
        return PublicKey(self._public_point)

    def sign_digest(self, message_hash: bytes) -> Signature:
        """
        Sign 32-byte message hash.

        The nonce is derived per RFC 6979 from the key and the hash, and the
        result is normalised to low-S by libsecp256k1.

        Args:
            message_hash: 32-byte hash to sign

        Returns:
            64-byte compact r || s signature

        Raises:
            CryptoError: If signing fails
        """
        if len(message_hash) != 32:
            raise ValueError("Message hash must be 32 bytes")

        try:
            key = SecpPrivateKey(bytes(self._require_secret()))
            recoverable = key.sign_recoverable(bytes(message_hash), hasher=None)
        except ValueError as e:
            raise CryptoError(f"Signing failed: {e}") from e

        # r || s || recovery id
        return Signature(recoverable[:64])

    def add_scalar(self, tweak: bytes) -> "PrivateKey":
        """
        Return (self + tweak) mod n.

        Raises:
            CryptoError: If the tweak is out of range or the sum is zero
        """
        tweak_int = int.from_bytes(tweak, "big")
        if tweak_int >= CURVE_ORDER:
            raise CryptoError("Tweak exceeds curve order")

        result_int = (int.from_bytes(self._require_secret(), "big") + tweak_int) % CURVE_ORDER
        if result_int == 0:
            raise CryptoError("Tweaked private key is zero")

        return PrivateKey(result_int.to_bytes(32, "big"))

    def wipe(self) -> None:
        """Overwrite the key bytes with zeros and drop them."""
        if self._secret is not None:
            for i in range(len(self._secret)):
                self._secret[i] = 0
            self._secret = None

    def __enter__(self) -> "PrivateKey":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.wipe()

    def __eq__(self, other: object) -> bool:
        """Check equality in constant time."""
        if not isinstance(other, PrivateKey) or self.is_wiped or other.is_wiped:
            return False
        return hmac.compare_digest(bytes(self._secret), bytes(other._secret))

    def __repr__(self) -> str:
        if self.is_wiped:
            return "PrivateKey(<wiped>)"
        return f"PrivateKey(pub={self._public_point.hex()[:10]}...)"


class PublicKey:
    """
    secp256k1 public key wrapper.

    Always stored in 33-byte compressed form; uncompressed input is
    accepted and compressed.
    """

    def __init__(self, key: Union[KeyInput, "PublicKey"]) -> None:
        """
        Initialize public key.

        Args:
            key: Public key as bytes, hex string, or another PublicKey

        Raises:
            ValidationError: If key format is invalid or not on the curve
        """
        if isinstance(key, PublicKey):
            self._key = key._key
            self._point = key._point
            return

        key_bytes = validate_public_key(key)
        try:
            self._key = SecpPublicKey(key_bytes)
        except ValueError as e:
            raise ValidationError(f"Public key is not a valid curve point: {e}") from e
        self._point = PublicKeyBytes(self._key.format(compressed=True))

    @property
    def point(self) -> PublicKeyBytes:
        """Get compressed public key bytes."""
        return self._point

    def hex(self) -> str:
        """Get public key as hex string."""
        return self._point.hex()

    def hash160(self) -> bytes:
        """Get HASH160 of public key."""
        return hash160(self._point)

    def address(self, prefix: str = DEFAULT_ADDRESS_PREFIX) -> Address:
        """Get bech32 account address for this key."""
        from ..modules.address import to_address
        return to_address(self, prefix)

    def add_point(self, tweak: bytes) -> "PublicKey":
        """
        Return self + tweak*G.

        Raises:
            CryptoError: If the tweak is out of range or the sum is infinity
        """
        if int.from_bytes(tweak, "big") >= CURVE_ORDER:
            raise CryptoError("Tweak exceeds curve order")
        try:
            return PublicKey(self._key.add(bytes(tweak)).format(compressed=True))
        except ValueError as e:
            raise CryptoError(f"Public key tweak failed: {e}") from e

    def verify(self, signature: bytes, message_hash: bytes) -> bool:
        """
        Verify signature.

        Args:
            signature: 64-byte compact r || s signature
            message_hash: 32-byte message hash

        Returns:
            True if signature is valid

        Raises:
            InvalidSignatureError: If the signature encoding is malformed
        """
        from .signature import encode_der_signature, parse_compact_signature

        r, s = parse_compact_signature(signature)
        if len(message_hash) != 32:
            return False

        try:
            return self._key.verify(encode_der_signature(r, s), bytes(message_hash), hasher=None)
        except ValueError:
            return False

    def __eq__(self, other: object) -> bool:
        """Check equality."""
        if not isinstance(other, PublicKey):
            return False
        return self._point == other._point

    def __hash__(self) -> int:
        return hash(self._point)

    def __repr__(self) -> str:
        return f"PublicKey({self.hex()})"


@dataclass(eq=False)
class KeyPair:
    """Private key, its public key and the path it was derived at."""
    private_key: PrivateKey = field(repr=False)
    public_key: PublicKey
    path: Optional[str] = None

    @classmethod
    def from_private_key(cls, key: Union[KeyInput, PrivateKey], path: Optional[str] = None) -> "KeyPair":
        private_key = PrivateKey(key)
        return cls(private_key=private_key, public_key=private_key.public_key(), path=path)

    def wipe(self) -> None:
        self.private_key.wipe()


def generate_mnemonic(strength: int = 128) -> str:
    """Generate BIP39 mnemonic phrase."""
    from .bip39 import generate_mnemonic as _generate
    return _generate(strength)


def derive_key(
    mnemonic: str,
    passphrase: Optional[str] = None,
    account: int = 0,
    change: int = 0,
    index: int = 0,
    coin_type: int = DEFAULT_COIN_TYPE
) -> KeyPair:
    """Derive keypair from mnemonic (BIP39/BIP44)."""
    from .bip39 import seed_from_mnemonic
    from .hd import derive

    path = HD_PATH_TEMPLATE.format(coin_type=coin_type, account=account, change=change, index=index)
    seed = seed_from_mnemonic(mnemonic, passphrase)
    return derive(seed, path)
