import pytest
from knirv_wallet.crypto.keys import PrivateKey
from knirv_wallet.exceptions import InvalidChecksumError, InvalidLengthError, ValidationError
from knirv_wallet.modules.address import AddressCodec, decode_address, to_address, validate
from knirv_wallet.utils.encoding import decode_bech32, encode_bech32

GENERATOR = "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
PAYLOAD = bytes.fromhex("751e76e8199196d454941c45d1b3a323f1433bd6")


def test_to_address():
    address = to_address(GENERATOR)
    assert address == encode_bech32("knirv", PAYLOAD)
    assert decode_bech32(address) == ("knirv", PAYLOAD)
    assert to_address(PrivateKey((1).to_bytes(32, "big")).public_key(), "cosmos").startswith("cosmos1")
    with pytest.raises(ValidationError):
        to_address(GENERATOR, "Bad")


def test_decode_address_checks(cosmos_address):
    address = to_address(GENERATOR)
    assert decode_address(address) == PAYLOAD
    assert decode_address(address, "knirv") == PAYLOAD
    assert len(decode_address(cosmos_address, "cosmos")) == 20

    with pytest.raises(ValidationError):
        decode_address(address, "cosmos")
    with pytest.raises(InvalidLengthError):
        decode_address(encode_bech32("knirv", bytes(32)))
    with pytest.raises(InvalidChecksumError):
        decode_address(address[:-1] + ("q" if address[-1] != "q" else "p"))


def test_validate():
    address = to_address(GENERATOR)
    assert validate(address)
    assert validate(address, "knirv")
    assert not validate(address, "cosmos")
    assert not validate(address.replace("knirv", "knirw"))
    assert not validate("not an address")
    assert not validate(encode_bech32("knirv", bytes(19)))


def test_address_codec():
    codec = AddressCodec("knirv")
    address = codec.encode(GENERATOR)
    assert codec.decode(address) == PAYLOAD
    assert codec.validate(address)
    assert codec.encode_payload(PAYLOAD) == address
    assert not AddressCodec("cosmos").validate(address)
    with pytest.raises(InvalidLengthError):
        codec.encode_payload(bytes(21))
    with pytest.raises(ValidationError):
        AddressCodec("")
