"""Message type registry for the KNIRV wallet."""

import logging
import threading
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Type

from ..exceptions import DuplicateTypeError, MalformedPayloadError, UnknownTypeError
from ..types.common import TypeUrl
from ..types.messages import BUILTIN_MESSAGES
from ..types.tx import AnyMessage, TxMessage
from ..utils.locks import ReadWriteLock
from ..utils.serialization import decode_record, encode_record
from ..utils.validation import validate_type_url

__all__ = [
    "EncodeFn",
    "DecodeFn",
    "RegisteredType",
    "Registry",
    "register_default_types",
    "default_registry",
]

logger = logging.getLogger(__name__)

EncodeFn = Callable[[Any], bytes]
DecodeFn = Callable[[bytes], Any]


@dataclass(frozen=True)
class RegisteredType:
    """Codec pair registered under a type URL."""
    type_url: TypeUrl
    encode: EncodeFn
    decode: DecodeFn
    message_class: Optional[type] = None


class Registry:
    """
    Mapping from type URL to message codec.

    Lookups take a shared lock and registrations an exclusive one, so a
    registry can be shared between threads that sign concurrently. Codec
    functions run outside the lock.

    Example:
        >>> registry = Registry()
        >>> registry.register_message(MsgSend)
        >>> data = registry.encode(MsgSend.type_url, msg)
        >>> registry.decode(MsgSend.type_url, data) == msg
        True
    """

    def __init__(self) -> None:
        self._types: Dict[str, RegisteredType] = {}
        self._lock = ReadWriteLock()
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def register(
        self,
        type_url: str,
        encode: EncodeFn,
        decode: DecodeFn,
        *,
        message_class: Optional[type] = None,
        override: bool = False,
    ) -> RegisteredType:
        """
        Register a codec pair.

        Args:
            type_url: Type URL such as "/knirv.transaction.v1.MsgSend"
            encode: Function turning a message into bytes
            decode: Function turning bytes into a message
            message_class: If given, encode rejects messages of other types
            override: Replace an existing registration instead of failing

        Returns:
            The new registration

        Raises:
            DuplicateTypeError: If the type URL is taken and override is False
            ValidationError: If the type URL is malformed
        """
        type_url = validate_type_url(type_url)
        if not callable(encode) or not callable(decode):
            raise TypeError("encode and decode must be callable")

        entry = RegisteredType(TypeUrl(type_url), encode, decode, message_class)
        with self._lock.write_locked():
            if type_url in self._types and not override:
                raise DuplicateTypeError(type_url)
            replaced = type_url in self._types
            self._types[type_url] = entry

        if replaced:
            self._logger.info(f"Replaced codec for {type_url}")
        else:
            self._logger.debug(f"Registered codec for {type_url}")
        return entry

    def register_message(
        self,
        message_class: Type[Any],
        type_url: Optional[str] = None,
        *,
        override: bool = False,
    ) -> RegisteredType:
        """
        Register a dataclass message with the record codec.

        Args:
            message_class: Dataclass, normally with a ``type_url`` class attribute
            type_url: Type URL, defaults to ``message_class.type_url``
            override: Replace an existing registration instead of failing
        """
        if type_url is None:
            type_url = getattr(message_class, "type_url", None)
            if type_url is None:
                raise ValueError(f"{message_class.__name__} has no type_url attribute")

        return self.register(
            type_url,
            encode_record,
            partial(decode_record, message_class),
            message_class=message_class,
            override=override,
        )

    def lookup(self, type_url: str) -> RegisteredType:
        """
        Get the registration for a type URL.

        Raises:
            UnknownTypeError: If nothing is registered under the URL
        """
        with self._lock.read_locked():
            entry = self._types.get(type_url)
        if entry is None:
            raise UnknownTypeError(type_url)
        return entry

    def is_registered(self, type_url: str) -> bool:
        with self._lock.read_locked():
            return type_url in self._types

    def type_urls(self) -> List[str]:
        with self._lock.read_locked():
            return sorted(self._types)

    def encode(self, type_url: str, message: Any) -> bytes:
        """
        Encode a message with the codec registered under type_url.

        Raises:
            UnknownTypeError: If the type URL is not registered
            MalformedPayloadError: If the message does not fit the codec
        """
        entry = self.lookup(type_url)
        if entry.message_class is not None and not isinstance(message, entry.message_class):
            raise MalformedPayloadError(
                f"{type_url} expects {entry.message_class.__name__}, got {type(message).__name__}"
            )

        try:
            data = entry.encode(message)
        except MalformedPayloadError:
            raise
        except (TypeError, ValueError, AttributeError) as e:
            raise MalformedPayloadError(f"Failed to encode {type_url}: {e}") from e

        if not isinstance(data, (bytes, bytearray)):
            raise MalformedPayloadError(
                f"Encoder for {type_url} returned {type(data).__name__}, expected bytes"
            )
        return bytes(data)

    def decode(self, type_url: str, data: bytes) -> Any:
        """
        Decode bytes with the codec registered under type_url.

        Raises:
            UnknownTypeError: If the type URL is not registered
            MalformedPayloadError: If the bytes do not decode
        """
        entry = self.lookup(type_url)
        try:
            return entry.decode(bytes(data))
        except MalformedPayloadError:
            raise
        except (TypeError, ValueError, IndexError) as e:
            raise MalformedPayloadError(f"Failed to decode {type_url}: {e}") from e

    def encode_any(self, message: Any) -> AnyMessage:
        """
        Encode a message into an AnyMessage envelope.

        Accepts a TxMessage or any message carrying a ``type_url`` attribute.
        """
        if isinstance(message, TxMessage):
            type_url, value = message.type_url, message.value
        else:
            type_url = getattr(message, "type_url", None)
            if type_url is None:
                raise MalformedPayloadError(
                    f"Cannot determine type URL of {type(message).__name__}"
                )
            value = message
        return AnyMessage(type_url=type_url, value=self.encode(type_url, value))

    def decode_any(self, message: AnyMessage) -> TxMessage:
        return TxMessage(message.type_url, self.decode(message.type_url, message.value))

    def __contains__(self, type_url: object) -> bool:
        return isinstance(type_url, str) and self.is_registered(type_url)

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._types)

    def __repr__(self) -> str:
        return f"Registry(types={len(self)})"


def register_default_types(registry: Registry, override: bool = False) -> Registry:
    """Register the built-in KNIRV messages on a registry."""
    for message_class in BUILTIN_MESSAGES:
        registry.register_message(message_class, override=override)
    return registry


_default_registry: Optional[Registry] = None
_default_registry_lock = threading.Lock()


def default_registry() -> Registry:
    """
    Get the process-wide registry holding the built-in messages.

    It is created on first use; callers that want isolation should build
    their own Registry instead.
    """
    global _default_registry
    with _default_registry_lock:
        if _default_registry is None:
            _default_registry = register_default_types(Registry())
            logger.debug("Initialized default registry")
        return _default_registry
