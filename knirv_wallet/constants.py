"""Constants and chain configuration for the KNIRV wallet."""

from dataclasses import dataclass

__all__ = [
    "CURVE_ORDER",
    "HARDENED_OFFSET",
    "BIP32_SEED_KEY",
    "BIP32_XPUB_VERSION",
    "BIP39_SALT_PREFIX",
    "BIP39_PBKDF2_ROUNDS",
    "BIP39_SEED_LENGTH",
    "BIP39_STRENGTHS",
    "BECH32_MAX_LENGTH",
    "BECH32_CHECKSUM_LENGTH",
    "BECH32_SEPARATOR",
    "ADDRESS_LENGTH",
    "DEFAULT_ADDRESS_PREFIX",
    "DEFAULT_COIN_TYPE",
    "HD_PATH_TEMPLATE",
    "SIGNATURE_LENGTH",
    "SIGN_MODE_DIRECT",
    "MSG_SEND",
    "MSG_CALL",
    "MSG_ADD_PACKAGE",
    "MSG_RUN",
    "ChainConfig",
    "KNIRV",
    "COSMOS",
]

# secp256k1 group order
CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

# BIP32
HARDENED_OFFSET = 0x80000000
BIP32_SEED_KEY = b"Bitcoin seed"
BIP32_XPUB_VERSION = bytes.fromhex("0488b21e")

# BIP39
BIP39_SALT_PREFIX = "mnemonic"
BIP39_PBKDF2_ROUNDS = 2048
BIP39_SEED_LENGTH = 64
BIP39_STRENGTHS = (128, 160, 192, 224, 256)

# Bech32 (BIP173)
BECH32_MAX_LENGTH = 90
BECH32_CHECKSUM_LENGTH = 6
BECH32_SEPARATOR = "1"

# Addresses and signatures
ADDRESS_LENGTH = 20
DEFAULT_ADDRESS_PREFIX = "knirv"
DEFAULT_COIN_TYPE = 118
HD_PATH_TEMPLATE = "m/44'/{coin_type}'/{account}'/{change}/{index}"
SIGNATURE_LENGTH = 64
SIGN_MODE_DIRECT = 1

# Built-in message type URLs
MSG_SEND = "/knirv.transaction.v1.MsgSend"
MSG_CALL = "/knirv.transaction.v1.MsgCall"
MSG_ADD_PACKAGE = "/knirv.transaction.v1.MsgAddPackage"
MSG_RUN = "/knirv.transaction.v1.MsgRun"


@dataclass(frozen=True)
class ChainConfig:
    """Per-chain address and derivation settings."""
    name: str
    prefix: str
    coin_type: int = DEFAULT_COIN_TYPE
    address_length: int = ADDRESS_LENGTH

    def hd_path(self, index: int = 0, account: int = 0, change: int = 0) -> str:
        """Get the BIP44 path for an address index."""
        return HD_PATH_TEMPLATE.format(
            coin_type=self.coin_type,
            account=account,
            change=change,
            index=index,
        )

    def branch_path(self, account: int = 0, change: int = 0) -> str:
        """Get the path of the node whose children are the address indices."""
        return self.hd_path(account=account, change=change).rsplit("/", 1)[0]


KNIRV = ChainConfig(name="knirv", prefix=DEFAULT_ADDRESS_PREFIX)
COSMOS = ChainConfig(name="cosmoshub", prefix="cosmos")
