"""Wallet module for the KNIRV wallet."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from ..constants import HARDENED_OFFSET, KNIRV, ChainConfig
from ..crypto.bip39 import seed_from_mnemonic
from ..crypto.hd import HDNode, PathSegment
from ..crypto.keys import KeyPair, PrivateKey, PublicKey
from ..crypto.signature import verify as verify_signature
from ..exceptions import UnknownAccountError, ValidationError, WalletError, WalletLockedError
from ..modules.account import Account, AccountData
from ..modules.registry import Registry, default_registry
from ..modules.transaction import TxBuilder
from ..types.common import KeyInput, Signature
from ..types.tx import Fee, SignDoc, SignerInfo, TxRaw
from ..utils.locks import ReadWriteLock

__all__ = ["Wallet"]

logger = logging.getLogger(__name__)


class Wallet:
    """
    Key-holding wallet.

    Derives accounts from a mnemonic (or imports a single private key),
    builds sign documents through a TxBuilder and signs them. Private keys
    stay inside the wallet and are zeroised by :meth:`lock`, after which
    every operation raises WalletLockedError.

    Example:
        >>> with Wallet.from_mnemonic(mnemonic) as wallet:
        ...     address = wallet.get_accounts()[0].address
        ...     signature = wallet.sign_transaction(
        ...         address, [msg], fee, "knirv-1", account_number=7, sequence=0
        ...     )
    """

    def __init__(
        self,
        chain: ChainConfig = KNIRV,
        registry: Optional[Registry] = None,
        name: str = "default",
    ) -> None:
        """
        Initialize an empty wallet.

        Args:
            chain: Chain configuration (address prefix, coin type)
            registry: Message registry, defaults to the process-wide one
            name: Wallet identifier used in log records
        """
        self.name = name
        self.chain = chain
        self._registry = registry if registry is not None else default_registry()
        self._builder = TxBuilder(self._registry)
        self._accounts: Dict[str, Account] = {}
        self._branch: Optional[HDNode] = None
        self._locked = False
        self._state_lock = ReadWriteLock()
        self._logger = logging.getLogger(f"{__name__}.Wallet.{name}")

    @classmethod
    def from_mnemonic(
        cls,
        mnemonic: str,
        passphrase: Optional[str] = None,
        *,
        chain: ChainConfig = KNIRV,
        account_indices: Iterable[int] = (0,),
        registry: Optional[Registry] = None,
        name: str = "default",
    ) -> "Wallet":
        """
        Create an HD wallet from a BIP39 mnemonic.

        Only the private node at m/44'/coin'/0'/0 is kept, so further
        accounts can be derived without holding on to the seed.

        Args:
            mnemonic: BIP39 mnemonic phrase
            passphrase: Optional BIP39 passphrase
            chain: Chain configuration
            account_indices: Address indices to derive up front
            registry: Message registry
            name: Wallet identifier

        Returns:
            Wallet with the requested accounts

        Raises:
            InvalidMnemonicError: If the mnemonic is invalid
        """
        seed = seed_from_mnemonic(mnemonic, passphrase)
        master = HDNode.from_seed(seed)
        del seed
        try:
            branch = master.derive_path(chain.branch_path())
        finally:
            master.wipe()

        wallet = cls(chain=chain, registry=registry, name=name)
        wallet._branch = branch
        try:
            for index in account_indices:
                wallet.derive_account(index)
        except Exception:
            wallet.lock()
            raise
        return wallet

    @classmethod
    def from_private_key(
        cls,
        key: Union[KeyInput, PrivateKey],
        *,
        chain: ChainConfig = KNIRV,
        registry: Optional[Registry] = None,
        name: str = "default",
    ) -> "Wallet":
        """Create a single-account wallet from an existing private key."""
        wallet = cls(chain=chain, registry=registry, name=name)
        wallet._add_account(KeyPair.from_private_key(key))
        return wallet

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def builder(self) -> TxBuilder:
        return self._builder

    @property
    def is_locked(self) -> bool:
        return self._locked

    @property
    def is_hd(self) -> bool:
        return self._branch is not None

    def _check_unlocked(self) -> None:
        if self._locked:
            raise WalletLockedError()

    def _add_account(self, keypair: KeyPair) -> Account:
        account = Account(keypair, prefix=self.chain.prefix)
        existing = self._accounts.get(account.address)
        if existing is not None:
            account.wipe()
            return existing

        self._accounts[account.address] = account
        self._logger.info(f"Created account: {account.address}")
        return account

    def _get_account(self, address: str) -> Account:
        account = self._accounts.get(address)
        if account is None:
            raise UnknownAccountError(address)
        return account

    def derive_account(self, index: int) -> AccountData:
        """
        Derive the account at address index ``index``.

        Deriving an index twice returns the existing account.

        Raises:
            WalletError: If the wallet was not created from a mnemonic
            WalletLockedError: If the wallet is locked
        """
        with self._state_lock.write_locked():
            self._check_unlocked()
            if self._branch is None:
                raise WalletError("Wallet was not created from a mnemonic")
            if not 0 <= index < HARDENED_OFFSET:
                raise ValidationError(f"Address index out of range: {index}")

            node = self._branch.derive_segment(PathSegment(index))
            try:
                keypair = node.to_keypair(self.chain.hd_path(node.index))
            finally:
                node.wipe()
            return self._add_account(keypair).to_data()

    def get_accounts(self) -> List[AccountData]:
        """Get the public data of every account, in derivation order."""
        with self._state_lock.read_locked():
            self._check_unlocked()
            return [account.to_data() for account in self._accounts.values()]

    def get_account(self, address: str) -> AccountData:
        """
        Get the public data of one account.

        Raises:
            UnknownAccountError: If the address does not belong to this wallet
        """
        with self._state_lock.read_locked():
            self._check_unlocked()
            return self._get_account(address).to_data()

    def has_account(self, address: str) -> bool:
        with self._state_lock.read_locked():
            self._check_unlocked()
            return address in self._accounts

    @property
    def addresses(self) -> List[str]:
        """Get all addresses."""
        return [account.address for account in self.get_accounts()]

    def build_sign_doc(
        self,
        address: str,
        messages: Sequence[Any],
        fee: Fee,
        chain_id: str,
        account_number: int,
        sequence: int,
        memo: str = "",
        timeout_height: int = 0,
    ) -> SignDoc:
        """Build a sign document for one of the wallet's accounts."""
        with self._state_lock.read_locked():
            self._check_unlocked()
            account = self._get_account(address)
            return self._builder.build_sign_doc(
                messages,
                fee,
                SignerInfo(public_key=account.public_key.point),
                chain_id,
                account_number,
                sequence,
                memo=memo,
                timeout_height=timeout_height,
            )

    def sign_transaction(
        self,
        address: str,
        messages: Sequence[Any],
        fee: Fee,
        chain_id: str,
        account_number: int,
        sequence: int,
        memo: str = "",
        timeout_height: int = 0,
    ) -> Signature:
        """
        Build and sign a transaction for an account.

        Args:
            address: Signing account address
            messages: Body messages
            fee: Transaction fee
            chain_id: Chain identifier
            account_number: On-chain account number
            sequence: Account sequence
            memo: Free-form note
            timeout_height: Block height after which the tx is invalid

        Returns:
            64-byte compact signature

        Raises:
            UnknownAccountError: If the address does not belong to this wallet
            UnknownTypeError: If a message type is not registered
            EmptyBodyError: If there are no messages
            WalletLockedError: If the wallet is locked
        """
        sign_doc = self.build_sign_doc(
            address, messages, fee, chain_id, account_number, sequence, memo, timeout_height
        )
        return self.sign_direct(address, sign_doc)

    def sign_direct(self, address: str, sign_doc: SignDoc) -> Signature:
        """
        Sign an already built sign document.

        Raises:
            UnknownAccountError: If the address does not belong to this wallet
            WalletLockedError: If the wallet is locked
        """
        with self._state_lock.read_locked():
            self._check_unlocked()
            return self._get_account(address).sign(sign_doc)

    def make_signed_tx(
        self,
        address: str,
        messages: Sequence[Any],
        fee: Fee,
        chain_id: str,
        account_number: int,
        sequence: int,
        memo: str = "",
        timeout_height: int = 0,
    ) -> TxRaw:
        """Build, sign and assemble a transaction ready for broadcast."""
        sign_doc = self.build_sign_doc(
            address, messages, fee, chain_id, account_number, sequence, memo, timeout_height
        )
        signature = self.sign_direct(address, sign_doc)
        return self._builder.assemble(sign_doc, [signature])

    def verify(
        self,
        sign_doc: SignDoc,
        signature: bytes,
        public_key: Union[PublicKey, KeyInput],
    ) -> bool:
        """
        Verify a signature over a sign document.

        Returns:
            True if valid, False for a well-formed non-matching signature

        Raises:
            InvalidSignatureError: If the signature is malformed
            WalletLockedError: If the wallet is locked
        """
        self._check_unlocked()
        return verify_signature(sign_doc, signature, public_key)

    def lock(self) -> None:
        """
        Zeroise all key material and lock the wallet.

        Locking is final and idempotent.
        """
        with self._state_lock.write_locked():
            if self._locked:
                return
            try:
                for account in self._accounts.values():
                    account.wipe()
                if self._branch is not None:
                    self._branch.wipe()
            finally:
                self._accounts.clear()
                self._branch = None
                self._locked = True

        self._logger.info("Wallet locked")

    def __enter__(self) -> "Wallet":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.lock()

    def __len__(self) -> int:
        return len(self._accounts)

    def __repr__(self) -> str:
        state = "locked" if self._locked else f"{len(self._accounts)} account(s)"
        return f"Wallet(name={self.name!r}, chain={self.chain.name!r}, {state})"
