"""Account module for the KNIRV wallet."""

import logging
from dataclasses import dataclass
from typing import Optional

from ..constants import DEFAULT_ADDRESS_PREFIX
from ..crypto.keys import KeyPair, PublicKey
from ..crypto.signature import sign
from ..modules.address import to_address
from ..types.common import Address, PublicKeyBytes, Signature
from ..types.tx import SignDoc

__all__ = ["AccountData", "Account"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountData:
    """Public view of a wallet account."""
    address: Address
    public_key: PublicKeyBytes
    algo: str = "secp256k1"
    path: Optional[str] = None


class Account:
    """
    Single signing account.

    Owns its keypair; the private key never leaves the account except to
    the signing call that uses it.
    """

    def __init__(
        self,
        keypair: KeyPair,
        prefix: str = DEFAULT_ADDRESS_PREFIX,
        label: Optional[str] = None,
    ) -> None:
        """
        Initialize account.

        Args:
            keypair: Account keypair, owned by the account from now on
            prefix: Address prefix
            label: Account label
        """
        self._keypair = keypair
        self.address = to_address(keypair.public_key, prefix)
        self.label = label
        self._logger = logging.getLogger(f"{__name__}.Account.{self.address[-8:]}")

    @property
    def public_key(self) -> PublicKey:
        return self._keypair.public_key

    @property
    def path(self) -> Optional[str]:
        """Derivation path, None for imported keys."""
        return self._keypair.path

    @property
    def is_wiped(self) -> bool:
        return self._keypair.private_key.is_wiped

    def to_data(self) -> AccountData:
        return AccountData(
            address=self.address,
            public_key=self.public_key.point,
            path=self.path,
        )

    def sign(self, sign_doc: SignDoc) -> Signature:
        """Sign a sign document with the account key."""
        signature = sign(sign_doc, self._keypair.private_key)
        self._logger.debug(f"Signed for chain {sign_doc.chain_id} at sequence {sign_doc.sequence}")
        return signature

    def wipe(self) -> None:
        """Zeroise the account's private key."""
        self._keypair.wipe()

    def __repr__(self) -> str:
        return f"Account(address={self.address!r}, path={self.path!r})"
