import pytest
from knirv_wallet.constants import CURVE_ORDER
from knirv_wallet.exceptions import ValidationError
from knirv_wallet.utils.validation import (
    is_valid_private_key,
    is_valid_public_key,
    validate_chain_id,
    validate_prefix,
    validate_private_key,
    validate_public_key,
    validate_type_url,
    validate_uint64,
)


def test_private_key_validation():
    assert validate_private_key("0x" + "11" * 32) == b"\x11" * 32
    assert is_valid_private_key(b"\x01" * 32)
    assert not is_valid_private_key(b"\x00" * 32)
    assert not is_valid_private_key(CURVE_ORDER.to_bytes(32, "big"))
    assert not is_valid_private_key(b"\x01" * 31)
    assert not is_valid_private_key("xyz")


def test_public_key_validation():
    compressed = "02" + "11" * 32
    assert validate_public_key(compressed) == bytes.fromhex(compressed)
    assert is_valid_public_key(b"\x04" + b"\x01" * 64)
    assert not is_valid_public_key(b"\x05" + b"\x01" * 32)
    assert not is_valid_public_key(b"\x02" + b"\x01" * 31)
    with pytest.raises(ValidationError):
        validate_public_key(12345)


def test_prefix_chain_id_and_type_url():
    assert validate_prefix("knirv") == "knirv"
    for prefix in ("", "Knirv", "1knirv", "kn irv"):
        with pytest.raises(ValidationError):
            validate_prefix(prefix)

    assert validate_chain_id("knirv-testnet.1") == "knirv-testnet.1"
    for chain_id in ("", "bad chain", "x" * 51):
        with pytest.raises(ValidationError):
            validate_chain_id(chain_id)

    assert validate_type_url("/knirv.transaction.v1.MsgSend")
    assert validate_type_url("unregistered.Type")
    with pytest.raises(ValidationError):
        validate_type_url("/bad type")


def test_trailing_newline_rejected():
    for validate, value in (
        (validate_prefix, "knirv\n"),
        (validate_chain_id, "knirv-1\n"),
        (validate_type_url, "/a.B\n"),
    ):
        with pytest.raises(ValidationError):
            validate(value)
    assert not is_valid_private_key("11" * 32 + "\n")


def test_uint64_validation():
    assert validate_uint64(0) == 0
    assert validate_uint64(2**64 - 1) == 2**64 - 1
    for value in (-1, 2**64, True, "1"):
        with pytest.raises(ValidationError):
            validate_uint64(value)
