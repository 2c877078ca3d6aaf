import pytest
from knirv_wallet.exceptions import (
    EncodingError,
    InvalidCharacterError,
    InvalidChecksumError,
    InvalidLengthError,
    ValidationError,
)
from knirv_wallet.utils.encoding import (
    hex_to_bytes, bytes_to_hex, encode_varint, decode_varint,
    encode_base58, decode_base58, encode_base58_check, decode_base58_check,
    encode_bech32, decode_bech32, convert_bits, hash160,
)

BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
PAYLOAD = bytes.fromhex("751e76e8199196d454941c45d1b3a323f1433bd6")
ADDRESS = encode_bech32("knirv", PAYLOAD)


def test_hex_bytes_roundtrip():
    data = b"\x00\x01deadbeef"
    hex_str = bytes_to_hex(data, prefix=True)
    assert hex_str.startswith("0x")
    assert hex_to_bytes(hex_str) == data
    with pytest.raises(ValidationError):
        hex_to_bytes("zzzz")


def test_varint_roundtrip():
    for value in [0, 1, 252, 253, 65535, 65536, 2**32 + 1]:
        encoded = encode_varint(value)
        decoded, offset = decode_varint(encoded)
        assert decoded == value
        assert offset == len(encoded)


def test_varint_rejects_non_minimal_and_truncated():
    with pytest.raises(EncodingError):
        decode_varint(b"\xfd\x01\x00")
    with pytest.raises(InvalidLengthError):
        decode_varint(b"\xfd\x01")
    with pytest.raises(InvalidLengthError):
        decode_varint(b"")
    with pytest.raises(EncodingError):
        encode_varint(-1)


def test_base58_roundtrip():
    assert encode_base58(b"hello world") == "StV1DL6CwTryKyV"
    assert decode_base58("StV1DL6CwTryKyV") == b"hello world"
    assert encode_base58(b"\x00\x00\x01") == "112"
    assert decode_base58("112") == b"\x00\x00\x01"
    with pytest.raises(InvalidCharacterError):
        decode_base58("0OIl")


def test_base58_check():
    encoded = encode_base58_check(b"payload")
    assert decode_base58_check(encoded) == b"payload"
    corrupted = encoded[:-1] + ("1" if encoded[-1] != "1" else "2")
    with pytest.raises(InvalidChecksumError):
        decode_base58_check(corrupted)


def test_hash160_of_generator_point():
    generator = bytes.fromhex("0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798")
    assert hash160(generator) == PAYLOAD


def test_convert_bits_padding():
    assert convert_bits([0xff], 8, 5) == [31, 28]
    assert convert_bits([31, 28], 5, 8, pad=False) == [0xff]
    with pytest.raises(InvalidLengthError):
        convert_bits([31, 29], 5, 8, pad=False)


def test_bech32_roundtrip():
    assert ADDRESS.startswith("knirv1")
    assert decode_bech32(ADDRESS) == ("knirv", PAYLOAD)
    for payload in (b"", b"\x00", bytes(range(32))):
        assert decode_bech32(encode_bech32("test", payload)) == ("test", payload)


@pytest.mark.parametrize("address", [
    "A12UEL5L",
    "a12uel5l",
    "an83characterlonghumanreadablepartthatcontainsthenumber1andtheexcludedcharactersbio1tt5tgs",
    "abcdef1qpzry9x8gf2tvdw0s3jn54khce6mua7lmqqqxw",
    "11" + "q" * 82 + "c8247j",
    "split1checkupstagehandshakeupstreamerranterredcaperred2y9e3w",
])
def test_bech32_reference_valid_strings(address):
    hrp, payload = decode_bech32(address)
    assert hrp == address.lower()[:address.rfind("1")]
    assert encode_bech32(hrp, payload) == address.lower()


@pytest.mark.parametrize("address,error", [
    ("pzry9x0s0muk", InvalidLengthError),
    ("1pzry9x0s0muk", InvalidLengthError),
    ("x1b4n0q5v", InvalidCharacterError),
    ("li1dgmt3", InvalidLengthError),
    ("de1lg7wt\xff", InvalidCharacterError),
    ("A1G7SGD8", InvalidChecksumError),
    ("10a06t8", InvalidLengthError),
    ("1qzzfhee", InvalidLengthError),
    ("an84characterslonghumanreadablepartthatcontainsthenumber1andtheexcludedcharactersbio1569pvx",
     InvalidLengthError),
])
def test_bech32_reference_invalid_strings(address, error):
    with pytest.raises(error):
        decode_bech32(address)


def test_bech32_case_rules():
    assert decode_bech32(ADDRESS.upper()) == ("knirv", PAYLOAD)
    mixed = ADDRESS[:-1] + ADDRESS[-1].upper()
    with pytest.raises(InvalidCharacterError):
        decode_bech32(mixed)
    with pytest.raises(InvalidCharacterError):
        encode_bech32("Knirv", PAYLOAD)


def test_bech32_length_limits():
    with pytest.raises(InvalidLengthError):
        encode_bech32("knirv", bytes(60))
    with pytest.raises(InvalidLengthError):
        decode_bech32("a1" + "q" * 89)
    with pytest.raises(InvalidLengthError):
        encode_bech32("", PAYLOAD)


def _substitutions(address):
    separator = address.rfind("1")
    for position, char in enumerate(address):
        if position == separator:
            continue
        alphabet = "abcdefghijklmnopqrstuvwxyz" if position < separator else BECH32_CHARSET
        for replacement in alphabet:
            if replacement != char:
                yield position, address[:position] + replacement + address[position + 1:]


@pytest.mark.parametrize("position", range(len(ADDRESS)))
def test_bech32_detects_every_single_substitution(position):
    if position == ADDRESS.rfind("1"):
        # without a separator the string has no prefix/data split
        for replacement in BECH32_CHARSET:
            with pytest.raises(InvalidLengthError):
                decode_bech32(ADDRESS[:position] + replacement + ADDRESS[position + 1:])
        return
    for address in (a for p, a in _substitutions(ADDRESS) if p == position):
        with pytest.raises(InvalidChecksumError):
            decode_bech32(address)
