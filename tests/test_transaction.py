import pytest
from knirv_wallet.constants import MSG_SEND
from knirv_wallet.crypto.keys import PrivateKey
from knirv_wallet.crypto.signature import sign, verify
from knirv_wallet.exceptions import (
    EmptyBodyError,
    InvalidSignatureError,
    MalformedPayloadError,
    TransactionError,
    UnknownTypeError,
    ValidationError,
)
from knirv_wallet.modules.registry import Registry
from knirv_wallet.modules.transaction import TxBuilder
from knirv_wallet.types.messages import MsgCall, MsgSend
from knirv_wallet.types.tx import AnyMessage, AuthInfo, Coin, SignDoc, SignerInfo, TxBody, TxMessage, TxRaw
from knirv_wallet.utils.encoding import encode_varint, sha256

KEY = PrivateKey((42).to_bytes(32, "big"))


@pytest.fixture
def builder(registry):
    return TxBuilder(registry)


@pytest.fixture
def signer_info():
    return SignerInfo(public_key=KEY.public_key().point)


def _send(recipient):
    return MsgSend(KEY.public_key().address(), recipient, (Coin("uknirv", "1000"),))


def test_build_sign_doc(builder, fee, signer_info, recipient):
    message = _send(recipient)
    doc = builder.build_sign_doc([message], fee, signer_info, "knirv-1", 12, 4, memo="hello")
    assert doc.chain_id == "knirv-1"
    assert doc.account_number == 12
    assert doc.sequence == 4

    body = TxBody.from_bytes(doc.body_bytes)
    assert body.memo == "hello"
    assert body.messages == (AnyMessage(MSG_SEND, builder.registry.encode(MSG_SEND, message)),)

    auth_info = AuthInfo.from_bytes(doc.auth_info_bytes)
    assert auth_info.fee == fee
    assert auth_info.signer_infos == (SignerInfo(public_key=signer_info.public_key, sequence=4),)


def test_sign_doc_canonical_bytes():
    doc = SignDoc(b"body", b"auth", "knirv-1", 258, 9)
    expected = b"\x04body" + b"\x04auth" + b"\x07knirv-1" + (258).to_bytes(8, "big")
    assert doc.to_bytes() == expected
    assert doc.digest() == sha256(expected)
    assert len(encode_varint(len(doc.body_bytes))) == 1


def test_sign_doc_validates_fields():
    with pytest.raises(ValueError):
        SignDoc(b"", b"", "knirv-1", -1, 0)
    with pytest.raises(ValueError):
        SignDoc(b"", b"", "knirv-1", 0, 2**64)
    with pytest.raises(TypeError):
        SignDoc(b"", b"", 1, 0, 0)


def test_digest_depends_on_every_field(builder, fee, signer_info, recipient):
    message = _send(recipient)
    base = builder.build_sign_doc([message], fee, signer_info, "knirv-1", 1, 0)
    variants = [
        builder.build_sign_doc([message], fee, signer_info, "knirv-2", 1, 0),
        builder.build_sign_doc([message], fee, signer_info, "knirv-1", 2, 0),
        builder.build_sign_doc([message], fee, signer_info, "knirv-1", 1, 1),
        builder.build_sign_doc([message], fee, signer_info, "knirv-1", 1, 0, memo="x"),
        builder.build_sign_doc([message, message], fee, signer_info, "knirv-1", 1, 0),
    ]
    digests = {doc.digest() for doc in variants}
    assert base.digest() not in digests
    assert len(digests) == len(variants)
    assert builder.build_sign_doc([message], fee, signer_info, "knirv-1", 1, 0) == base


def test_empty_body(builder, fee, signer_info):
    with pytest.raises(EmptyBodyError):
        builder.build_sign_doc([], fee, signer_info, "knirv-1", 1, 0)
    with pytest.raises(EmptyBodyError):
        builder.build_sign_doc(iter([]), fee, signer_info, "knirv-1", 1, 0)
    with pytest.raises(EmptyBodyError):
        builder.build_sign_doc((m for m in ()), fee, signer_info, "knirv-1", 1, 0)


def test_unknown_type_bubbles_up(fee, signer_info, recipient):
    builder = TxBuilder(Registry())
    with pytest.raises(UnknownTypeError):
        builder.build_sign_doc([_send(recipient)], fee, signer_info, "knirv-1", 1, 0)
    with pytest.raises(UnknownTypeError):
        builder.build_sign_doc([AnyMessage("/unregistered.Type", b"")], fee, signer_info, "knirv-1", 1, 0)


def test_invalid_counters_rejected(builder, fee, signer_info, recipient):
    with pytest.raises(ValidationError):
        builder.build_sign_doc([_send(recipient)], fee, signer_info, "knirv 1", 1, 0)
    with pytest.raises(ValidationError):
        builder.build_sign_doc([_send(recipient)], fee, signer_info, "knirv-1\n", 1, 0)
    with pytest.raises(ValidationError):
        builder.build_sign_doc([_send(recipient)], fee, signer_info, "knirv-1", -1, 0)


def test_message_forms(builder, fee, signer_info, recipient):
    message = _send(recipient)
    typed = builder.build_sign_doc([message], fee, signer_info, "knirv-1", 1, 0)
    wrapped = builder.build_sign_doc([TxMessage(MSG_SEND, message)], fee, signer_info, "knirv-1", 1, 0)
    encoded = builder.build_sign_doc(
        [builder.registry.encode_any(message)], fee, signer_info, "knirv-1", 1, 0
    )
    assert typed == wrapped == encoded


def test_decode_body(builder, fee, signer_info, recipient):
    messages = [_send(recipient), MsgCall(caller=recipient, pkg_path="gno.land/r/demo", func="Do")]
    doc = builder.build_sign_doc(messages, fee, signer_info, "knirv-1", 1, 0)
    assert builder.decode_body(doc.body_bytes).messages == tuple(
        builder.registry.encode_any(message) for message in messages
    )
    assert [m.value for m in builder.decode_messages(doc.body_bytes)] == messages
    with pytest.raises(MalformedPayloadError):
        builder.decode_body(doc.body_bytes + b"\x00")


def test_assemble(builder, fee, signer_info, recipient):
    doc = builder.build_sign_doc([_send(recipient)], fee, signer_info, "knirv-1", 1, 0)
    signature = sign(doc, KEY)
    tx = builder.assemble(doc, [signature])
    assert tx == TxRaw(doc.body_bytes, doc.auth_info_bytes, (signature,))
    assert TxRaw.from_bytes(tx.to_bytes()) == tx
    assert verify(doc, tx.signatures[0], KEY.public_key())

    with pytest.raises(TransactionError):
        builder.assemble(doc, [])
    with pytest.raises(TransactionError):
        builder.assemble(doc, [signature, signature])
    with pytest.raises(InvalidSignatureError):
        builder.assemble(doc, [signature[:10]])
