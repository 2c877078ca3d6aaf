import pytest
from knirv_wallet.crypto.keys import KeyPair, PrivateKey, PublicKey
from knirv_wallet.exceptions import CryptoError, ValidationError

ONE = (1).to_bytes(32, "big")
GENERATOR = "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
GENERATOR_UNCOMPRESSED = (
    "0479be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
    "483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8"
)


def test_private_key_public_key():
    key = PrivateKey(ONE)
    assert key.public_key().hex() == GENERATOR
    assert key.secret == ONE
    assert PrivateKey(ONE.hex()) == key
    assert PrivateKey(key) == key


def test_private_key_rejects_invalid_scalars():
    with pytest.raises(ValidationError):
        PrivateKey(bytes(32))
    with pytest.raises(ValidationError):
        PrivateKey(b"\xff" * 32)


def test_private_key_create_is_random():
    assert PrivateKey.create() != PrivateKey.create()


def test_private_key_wipe():
    key = PrivateKey(ONE)
    buffer = key._secret
    key.wipe()
    assert key.is_wiped
    assert buffer == bytearray(32)
    assert "wiped" in repr(key)
    with pytest.raises(CryptoError):
        key.secret
    with pytest.raises(CryptoError):
        key.sign_digest(bytes(32))
    key.wipe()


def test_private_key_context_manager_wipes_on_error():
    with pytest.raises(RuntimeError):
        with PrivateKey(ONE) as key:
            raise RuntimeError("boom")
    assert key.is_wiped


def test_private_key_repr_hides_secret():
    key = PrivateKey(ONE)
    assert ONE.hex() not in repr(key)


def test_public_key_compresses_uncompressed_input():
    pub = PublicKey(GENERATOR_UNCOMPRESSED)
    assert pub.hex() == GENERATOR
    assert pub == PublicKey(GENERATOR)
    assert len({pub, PublicKey(GENERATOR)}) == 1


def test_public_key_rejects_off_curve_point():
    with pytest.raises(ValidationError):
        PublicKey("02" + "ff" * 32)


def test_public_key_hash160_and_address():
    pub = PublicKey(GENERATOR)
    assert pub.hash160().hex() == "751e76e8199196d454941c45d1b3a323f1433bd6"
    assert pub.address().startswith("knirv1")
    assert pub.address("cosmos").startswith("cosmos1")


def test_sign_and_verify_digest():
    key = PrivateKey(ONE)
    digest = bytes(range(32))
    signature = key.sign_digest(digest)
    assert len(signature) == 64
    assert key.sign_digest(digest) == signature
    assert key.public_key().verify(signature, digest)
    assert not key.public_key().verify(signature, bytes(32))
    with pytest.raises(ValueError):
        key.sign_digest(b"short")


def test_tweaks_agree():
    key = PrivateKey(ONE)
    tweak = (5).to_bytes(32, "big")
    assert key.add_scalar(tweak).public_key() == key.public_key().add_point(tweak)
    assert key.add_scalar(tweak).secret == (6).to_bytes(32, "big")
    with pytest.raises(CryptoError):
        key.add_scalar(b"\xff" * 32)


def test_keypair_from_private_key():
    pair = KeyPair.from_private_key(ONE, path="m/0")
    assert pair.public_key.hex() == GENERATOR
    assert ONE.hex() not in repr(pair)
    pair.wipe()
    assert pair.private_key.is_wiped
