"""Transaction building for the KNIRV wallet."""

import logging
from dataclasses import replace
from typing import Any, Iterable, List, Sequence

from ..crypto.signature import parse_compact_signature
from ..exceptions import EmptyBodyError, TransactionError, UnknownTypeError
from ..modules.registry import Registry
from ..types.tx import AnyMessage, AuthInfo, Fee, SignDoc, SignerInfo, TxBody, TxMessage, TxRaw
from ..utils.validation import validate_chain_id, validate_uint64

__all__ = ["TxBuilder"]

logger = logging.getLogger(__name__)


class TxBuilder:
    """
    Builds sign documents and signed transactions.

    Messages are encoded through the registry the builder is given, so the
    set of message types it accepts is exactly the registry's.
    """

    def __init__(self, registry: Registry) -> None:
        """
        Initialize transaction builder.

        Args:
            registry: Registry used to encode body messages
        """
        self._registry = registry
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def registry(self) -> Registry:
        return self._registry

    def encode_messages(self, messages: Iterable[Any]) -> List[AnyMessage]:
        """
        Encode body messages into AnyMessage envelopes.

        Already-encoded AnyMessage values are kept as they are but must
        still name a registered type.

        Raises:
            UnknownTypeError: If a message type is not registered
            MalformedPayloadError: If a message does not fit its codec
        """
        encoded = []
        for message in messages:
            if isinstance(message, AnyMessage):
                if not self._registry.is_registered(message.type_url):
                    raise UnknownTypeError(message.type_url)
                encoded.append(message)
            else:
                encoded.append(self._registry.encode_any(message))
        return encoded

    def build_sign_doc(
        self,
        messages: Iterable[Any],
        fee: Fee,
        signer_info: SignerInfo,
        chain_id: str,
        account_number: int,
        sequence: int,
        memo: str = "",
        timeout_height: int = 0,
    ) -> SignDoc:
        """
        Build the document a signer commits to.

        Args:
            messages: Body messages, as typed messages, TxMessage or AnyMessage
            fee: Transaction fee
            signer_info: Signer public key; its sequence is set to ``sequence``
            chain_id: Chain identifier
            account_number: On-chain account number
            sequence: Account sequence
            memo: Free-form note
            timeout_height: Block height after which the tx is invalid, 0 for none

        Returns:
            Immutable SignDoc

        Raises:
            EmptyBodyError: If there are no messages
            UnknownTypeError: If a message type is not registered
            ValidationError: If chain_id or a counter is invalid
        """
        encoded = tuple(self.encode_messages(messages))
        if not encoded:
            raise EmptyBodyError()

        chain_id = validate_chain_id(chain_id)
        account_number = validate_uint64(account_number, "account_number")
        sequence = validate_uint64(sequence, "sequence")
        timeout_height = validate_uint64(timeout_height, "timeout_height")

        body = TxBody(
            messages=encoded,
            memo=memo,
            timeout_height=timeout_height,
        )
        auth_info = AuthInfo(
            signer_infos=(replace(signer_info, sequence=sequence),),
            fee=fee,
        )

        sign_doc = SignDoc(
            body_bytes=body.to_bytes(),
            auth_info_bytes=auth_info.to_bytes(),
            chain_id=chain_id,
            account_number=account_number,
            sequence=sequence,
        )
        self._logger.debug(
            f"Built sign doc with {len(body.messages)} message(s) "
            f"for chain {chain_id}, account {account_number}, sequence {sequence}"
        )
        return sign_doc

    def decode_body(self, body_bytes: bytes) -> TxBody:
        """
        Decode body bytes, checking that every message decodes.

        Raises:
            MalformedPayloadError: If the body or a message is malformed
            UnknownTypeError: If a message type is not registered
        """
        body = TxBody.from_bytes(body_bytes)
        for message in body.messages:
            self._registry.decode_any(message)
        return body

    def decode_messages(self, body_bytes: bytes) -> List[TxMessage]:
        """Decode body bytes into typed messages."""
        body = TxBody.from_bytes(body_bytes)
        return [self._registry.decode_any(message) for message in body.messages]

    def assemble(self, sign_doc: SignDoc, signatures: Sequence[bytes]) -> TxRaw:
        """
        Combine a sign document with its signatures.

        Args:
            sign_doc: Signed document
            signatures: One compact signature per signer info, in order

        Returns:
            Transaction ready for broadcast

        Raises:
            InvalidSignatureError: If a signature is malformed
            TransactionError: If the signature count does not match the signers
        """
        auth_info = AuthInfo.from_bytes(sign_doc.auth_info_bytes)
        if len(signatures) != len(auth_info.signer_infos):
            raise TransactionError(
                f"Expected {len(auth_info.signer_infos)} signature(s), got {len(signatures)}"
            )
        for signature in signatures:
            parse_compact_signature(signature)

        return TxRaw(
            body_bytes=sign_doc.body_bytes,
            auth_info_bytes=sign_doc.auth_info_bytes,
            signatures=tuple(bytes(signature) for signature in signatures),
        )
