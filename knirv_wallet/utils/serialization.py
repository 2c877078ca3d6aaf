"""Deterministic length-prefixed binary codec for dataclass records.

Wire format, fields in declaration order:

* ``str`` / ``bytes`` -- varint length followed by the raw (UTF-8) bytes
* ``int`` -- 8-byte big-endian unsigned
* ``bool`` -- a single 0x00 / 0x01 byte
* nested dataclass -- varint length followed by the encoded record
* ``Tuple[X, ...]`` -- varint item count followed by each item

Every value has exactly one encoding, so ``decode_record(cls,
encode_record(m)) == m`` and equal records always produce equal bytes.
"""

import dataclasses
from functools import lru_cache
from typing import Any, List, Tuple, Type, TypeVar, get_args, get_origin, get_type_hints

from ..exceptions import EncodingError, MalformedPayloadError
from ..utils.encoding import decode_varint, encode_varint

__all__ = ["encode_record", "decode_record"]

R = TypeVar("R")

UINT64_MAX = 0xffffffffffffffff


@lru_cache(maxsize=None)
def _record_fields(cls: type) -> Tuple[Tuple[str, Any], ...]:
    if not dataclasses.is_dataclass(cls):
        raise MalformedPayloadError(f"{cls.__name__} is not a dataclass record")
    hints = get_type_hints(cls)
    return tuple((f.name, hints[f.name]) for f in dataclasses.fields(cls))


def _sequence_item_type(tp: Any) -> Any:
    args = get_args(tp)
    if get_origin(tp) is tuple and len(args) == 2 and args[1] is Ellipsis:
        return args[0]
    if get_origin(tp) is list and len(args) == 1:
        return args[0]
    return None


def _encode_value(tp: Any, value: Any, out: bytearray, path: str) -> None:
    if tp is bool:
        if not isinstance(value, bool):
            raise MalformedPayloadError(f"{path}: expected bool, got {type(value).__name__}")
        out.append(1 if value else 0)
    elif tp is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise MalformedPayloadError(f"{path}: expected int, got {type(value).__name__}")
        if value < 0 or value > UINT64_MAX:
            raise MalformedPayloadError(f"{path}: integer out of uint64 range: {value}")
        out.extend(value.to_bytes(8, "big"))
    elif tp is str:
        if not isinstance(value, str):
            raise MalformedPayloadError(f"{path}: expected str, got {type(value).__name__}")
        raw = value.encode("utf-8")
        out.extend(encode_varint(len(raw)))
        out.extend(raw)
    elif tp is bytes:
        if not isinstance(value, (bytes, bytearray)):
            raise MalformedPayloadError(f"{path}: expected bytes, got {type(value).__name__}")
        out.extend(encode_varint(len(value)))
        out.extend(value)
    elif dataclasses.is_dataclass(tp):
        if not isinstance(value, tp):
            raise MalformedPayloadError(
                f"{path}: expected {tp.__name__}, got {type(value).__name__}"
            )
        inner = encode_record(value)
        out.extend(encode_varint(len(inner)))
        out.extend(inner)
    else:
        item_type = _sequence_item_type(tp)
        if item_type is None:
            raise MalformedPayloadError(f"{path}: unsupported field type {tp!r}")
        if not isinstance(value, (tuple, list)):
            raise MalformedPayloadError(f"{path}: expected sequence, got {type(value).__name__}")
        out.extend(encode_varint(len(value)))
        for i, item in enumerate(value):
            _encode_value(item_type, item, out, f"{path}[{i}]")


def encode_record(record: Any) -> bytes:
    """
    Encode a dataclass record.

    Args:
        record: Dataclass instance whose fields use supported types

    Returns:
        Canonical bytes

    Raises:
        MalformedPayloadError: If a field value does not match its annotation
    """
    cls = type(record)
    out = bytearray()
    for name, tp in _record_fields(cls):
        _encode_value(tp, getattr(record, name), out, f"{cls.__name__}.{name}")
    return bytes(out)


class _Reader:
    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def read(self, size: int, path: str) -> bytes:
        if size > self.remaining:
            raise MalformedPayloadError(
                f"{path}: truncated payload, need {size} bytes, have {self.remaining}"
            )
        chunk = self.data[self.offset:self.offset + size]
        self.offset += size
        return chunk

    def read_varint(self, path: str) -> int:
        try:
            value, self.offset = decode_varint(self.data, self.offset)
        except EncodingError as e:
            raise MalformedPayloadError(f"{path}: {e}") from e
        return value


def _decode_value(tp: Any, reader: _Reader, path: str) -> Any:
    if tp is bool:
        flag = reader.read(1, path)[0]
        if flag not in (0, 1):
            raise MalformedPayloadError(f"{path}: invalid bool byte {flag:#x}")
        return flag == 1
    elif tp is int:
        return int.from_bytes(reader.read(8, path), "big")
    elif tp is str:
        raw = reader.read(reader.read_varint(path), path)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedPayloadError(f"{path}: invalid UTF-8") from e
    elif tp is bytes:
        return reader.read(reader.read_varint(path), path)
    elif dataclasses.is_dataclass(tp):
        inner = reader.read(reader.read_varint(path), path)
        return decode_record(tp, inner)

    item_type = _sequence_item_type(tp)
    if item_type is None:
        raise MalformedPayloadError(f"{path}: unsupported field type {tp!r}")
    count = reader.read_varint(path)
    if count > reader.remaining:
        raise MalformedPayloadError(f"{path}: item count {count} exceeds payload size")
    items: List[Any] = [_decode_value(item_type, reader, f"{path}[{i}]") for i in range(count)]
    return tuple(items) if get_origin(tp) is tuple else items


def decode_record(cls: Type[R], data: bytes) -> R:
    """
    Decode bytes produced by encode_record back into a record.

    Args:
        cls: Dataclass type to decode into
        data: Encoded bytes

    Returns:
        Decoded record

    Raises:
        MalformedPayloadError: If the bytes are truncated, carry trailing
            data or contain invalid values
    """
    reader = _Reader(data)
    values = {}
    for name, tp in _record_fields(cls):
        values[name] = _decode_value(tp, reader, f"{cls.__name__}.{name}")

    if reader.remaining:
        raise MalformedPayloadError(
            f"{cls.__name__}: {reader.remaining} trailing bytes after record"
        )

    try:
        return cls(**values)
    except (TypeError, ValueError) as e:
        raise MalformedPayloadError(f"{cls.__name__}: {e}") from e
