import pytest

from knirv_wallet.modules.registry import Registry, register_default_types
from knirv_wallet.types.tx import Coin, Fee
from knirv_wallet.utils.encoding import encode_bech32

TEST_MNEMONIC = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)
COSMOS_ADDRESS = "cosmos19rl4cm2hmr8afy4kldpxz3fka4jguq0auqdal4"
RECIPIENT = encode_bech32("knirv", bytes(range(20)))


@pytest.fixture
def mnemonic():
    return TEST_MNEMONIC


@pytest.fixture
def registry():
    return register_default_types(Registry())


@pytest.fixture
def fee():
    return Fee(amount=(Coin(denom="uknirv", amount="2500"),), gas_limit=200000)


@pytest.fixture
def cosmos_address():
    return COSMOS_ADDRESS


@pytest.fixture
def recipient():
    return RECIPIENT
