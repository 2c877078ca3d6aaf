"""Built-in KNIRV transaction messages."""

from dataclasses import dataclass
from typing import ClassVar, Tuple

from ..constants import MSG_ADD_PACKAGE, MSG_CALL, MSG_RUN, MSG_SEND
from ..types.tx import Coin

__all__ = [
    "MsgSend",
    "MsgCall",
    "MemFile",
    "MemPackage",
    "MsgAddPackage",
    "MsgRun",
    "BUILTIN_MESSAGES",
]


@dataclass(frozen=True)
class MsgSend:
    """Bank transfer between two accounts."""
    type_url: ClassVar[str] = MSG_SEND

    from_address: str
    to_address: str
    amount: Tuple[Coin, ...]


@dataclass(frozen=True)
class MsgCall:
    """Call of an exported realm function."""
    type_url: ClassVar[str] = MSG_CALL

    caller: str
    pkg_path: str
    func: str
    send: str = ""
    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class MemFile:
    name: str
    body: str


@dataclass(frozen=True)
class MemPackage:
    name: str
    path: str
    files: Tuple[MemFile, ...] = ()


@dataclass(frozen=True)
class MsgAddPackage:
    """Upload of a new package."""
    type_url: ClassVar[str] = MSG_ADD_PACKAGE

    creator: str
    package: MemPackage
    deposit: str = ""


@dataclass(frozen=True)
class MsgRun:
    """Execution of an ephemeral package."""
    type_url: ClassVar[str] = MSG_RUN

    caller: str
    package: MemPackage
    send: str = ""


BUILTIN_MESSAGES = (MsgSend, MsgCall, MsgAddPackage, MsgRun)
