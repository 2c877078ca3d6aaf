"""Hierarchical Deterministic key derivation for the KNIRV wallet."""

import hmac
import hashlib
import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from ..constants import BIP32_SEED_KEY, BIP32_XPUB_VERSION, CURVE_ORDER, HARDENED_OFFSET
from ..crypto.keys import KeyPair, PrivateKey, PublicKey
from ..exceptions import CryptoError, InvalidChildKeyError, ValidationError
from ..utils.encoding import decode_base58_check, encode_base58_check, hash160

__all__ = ["PathSegment", "DerivationPath", "HDNode", "derive"]

logger = logging.getLogger(__name__)

SEGMENT_PATTERN = re.compile(r"(\d+)(['hH]?)")
MAX_INDEX = 0xffffffff


@dataclass(frozen=True)
class PathSegment:
    """One level of a derivation path."""
    index: int
    hardened: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.index < HARDENED_OFFSET:
            raise ValidationError(f"Path index out of range: {self.index}")

    @property
    def child_index(self) -> int:
        """Index with the hardened bit applied."""
        return self.index | HARDENED_OFFSET if self.hardened else self.index

    def __str__(self) -> str:
        return f"{self.index}'" if self.hardened else str(self.index)


@dataclass(frozen=True)
class DerivationPath:
    """Ordered sequence of path segments below the master node."""
    segments: Tuple[PathSegment, ...] = ()

    @classmethod
    def parse(cls, path: Union[str, "DerivationPath"]) -> "DerivationPath":
        """
        Parse textual notation such as m/44'/118'/0'/0/0.

        Hardened segments may be marked with ', h or H.

        Raises:
            ValidationError: If the path is malformed
        """
        if isinstance(path, DerivationPath):
            return path
        if not isinstance(path, str):
            raise ValidationError(f"Derivation path must be a string, got {type(path).__name__}")

        parts = path.strip().split("/")
        if parts[0] not in ("m", "M"):
            raise ValidationError(f"Derivation path must start with 'm': {path!r}")

        segments = []
        for component in parts[1:]:
            match = SEGMENT_PATTERN.fullmatch(component)
            if not match:
                raise ValidationError(f"Invalid path component {component!r} in {path!r}")
            segments.append(PathSegment(int(match.group(1)), bool(match.group(2))))

        return cls(tuple(segments))

    def child(self, index: int, hardened: bool = False) -> "DerivationPath":
        return DerivationPath(self.segments + (PathSegment(index, hardened),))

    def __str__(self) -> str:
        return "/".join(["m"] + [str(segment) for segment in self.segments])


class HDNode:
    """HD wallet node (BIP32)."""

    def __init__(
        self,
        private_key: Optional[PrivateKey],
        public_key: PublicKey,
        chain_code: bytes,
        depth: int = 0,
        parent_fingerprint: bytes = b'\x00\x00\x00\x00',
        index: int = 0,
    ):
        if len(chain_code) != 32:
            raise ValidationError("Chain code must be 32 bytes")
        self.private_key = private_key
        self.public_key = public_key
        self.chain_code = bytes(chain_code)
        self.depth = depth
        self.parent_fingerprint = parent_fingerprint
        self.index = index

    @classmethod
    def from_seed(cls, seed: bytes) -> "HDNode":
        """Create master node from seed."""
        if len(seed) < 16 or len(seed) > 64:
            raise ValidationError("Seed must be between 16 and 64 bytes")

        h = hmac.new(BIP32_SEED_KEY, bytes(seed), hashlib.sha512).digest()

        key_int = int.from_bytes(h[:32], 'big')
        if key_int == 0 or key_int >= CURVE_ORDER:
            raise CryptoError("Invalid master key")

        private_key = PrivateKey(h[:32])
        return cls(
            private_key=private_key,
            public_key=private_key.public_key(),
            chain_code=h[32:],
        )

    @property
    def is_private(self) -> bool:
        return self.private_key is not None and not self.private_key.is_wiped

    @property
    def fingerprint(self) -> bytes:
        """First four bytes of HASH160 of the public key."""
        return hash160(self.public_key.point)[:4]

    def derive(self, index: int) -> "HDNode":
        """
        Derive child node.

        Args:
            index: Child index, with HARDENED_OFFSET set for hardened children

        Returns:
            Child node; private if this node is private

        Raises:
            InvalidChildKeyError: If I_L >= n or the child key is zero/infinity
            CryptoError: If hardened derivation is requested from a public node
        """
        if not 0 <= index <= MAX_INDEX:
            raise ValidationError(f"Child index out of range: {index}")

        hardened = index >= HARDENED_OFFSET
        if hardened:
            if not self.is_private:
                raise CryptoError("Cannot do hardened derivation without private key")
            data = b'\x00' + self.private_key.secret + index.to_bytes(4, 'big')
        else:
            data = self.public_key.point + index.to_bytes(4, 'big')

        h = hmac.new(self.chain_code, data, hashlib.sha512).digest()
        tweak, child_chain_code = h[:32], h[32:]

        if int.from_bytes(tweak, 'big') >= CURVE_ORDER:
            raise InvalidChildKeyError(index)

        if self.is_private:
            try:
                child_private_key = self.private_key.add_scalar(tweak)
            except CryptoError as e:
                raise InvalidChildKeyError(index) from e
            child_public_key = child_private_key.public_key()
        else:
            child_private_key = None
            try:
                child_public_key = self.public_key.add_point(tweak)
            except CryptoError as e:
                raise InvalidChildKeyError(index) from e

        return HDNode(
            private_key=child_private_key,
            public_key=child_public_key,
            chain_code=child_chain_code,
            depth=self.depth + 1,
            parent_fingerprint=self.fingerprint,
            index=index,
        )

    def derive_path(self, path: Union[str, DerivationPath]) -> "HDNode":
        """
        Derive using BIP32 path like m/44'/118'/0'/0/0.

        A segment whose child key is invalid moves on to the next index, as
        BIP32 prescribes. Intermediate private keys are wiped.
        """
        path = DerivationPath.parse(path)

        node = self
        for segment in path.segments:
            try:
                child = node.derive_segment(segment)
            finally:
                if node is not self:
                    node.wipe()
            node = child

        return node

    def derive_segment(self, segment: PathSegment) -> "HDNode":
        """
        Derive the child for one path segment.

        An invalid child key moves on to the next index within the same
        hardened or non-hardened range; the child's ``index`` tells which
        one was used.
        """
        index = segment.child_index
        while True:
            try:
                return self.derive(index)
            except InvalidChildKeyError:
                logger.warning(f"Invalid child key at index {index:#x}, trying next index")
                index += 1
                if index > MAX_INDEX or (index >= HARDENED_OFFSET) != segment.hardened:
                    raise

    def neuter(self) -> "HDNode":
        """Get a public-only copy of this node."""
        return HDNode(
            private_key=None,
            public_key=self.public_key,
            chain_code=self.chain_code,
            depth=self.depth,
            parent_fingerprint=self.parent_fingerprint,
            index=self.index,
        )

    def to_keypair(self, path: Optional[str] = None) -> KeyPair:
        """Get the node's keypair; the key is copied, the node keeps its own."""
        if not self.is_private:
            raise ValueError("This is a public-only node")
        return KeyPair(
            private_key=PrivateKey(self.private_key),
            public_key=self.public_key,
            path=path,
        )

    def to_xpub(self) -> str:
        """Serialize the public half as a BIP32 extended public key."""
        data = (
            BIP32_XPUB_VERSION
            + bytes([self.depth])
            + self.parent_fingerprint
            + self.index.to_bytes(4, 'big')
            + self.chain_code
            + self.public_key.point
        )
        return encode_base58_check(data)

    @classmethod
    def from_xpub(cls, xpub: str) -> "HDNode":
        """
        Load a public-only node from a BIP32 extended public key.

        Raises:
            ValidationError: If the key is malformed
        """
        data = decode_base58_check(xpub)
        if len(data) != 78:
            raise ValidationError(f"Extended key must be 78 bytes, got {len(data)}")
        if data[:4] != BIP32_XPUB_VERSION:
            raise ValidationError(f"Unsupported extended key version: {data[:4].hex()}")

        depth = data[4]
        parent_fingerprint = data[5:9]
        index = int.from_bytes(data[9:13], 'big')
        if depth == 0 and (parent_fingerprint != b'\x00' * 4 or index != 0):
            raise ValidationError("Master extended key with non-zero parent or index")

        return cls(
            private_key=None,
            public_key=PublicKey(data[45:78]),
            chain_code=data[13:45],
            depth=depth,
            parent_fingerprint=parent_fingerprint,
            index=index,
        )

    def wipe(self) -> None:
        """Zeroise the node's private key, leaving a public-only node."""
        if self.private_key is not None:
            self.private_key.wipe()
            self.private_key = None

    def __repr__(self) -> str:
        kind = "private" if self.is_private else "public"
        return f"HDNode({kind}, depth={self.depth}, index={self.index:#x})"


def derive(seed: bytes, path: Union[str, DerivationPath]) -> KeyPair:
    """
    Derive the keypair at a path from a seed.

    Same seed and path always give the same keypair.
    """
    path = DerivationPath.parse(path)
    master = HDNode.from_seed(seed)
    try:
        node = master.derive_path(path)
        try:
            return node.to_keypair(str(path))
        finally:
            node.wipe()
    finally:
        master.wipe()
