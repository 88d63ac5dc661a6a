"""Length-delimited protobuf messages and message counts on binary streams.

Messages are duck-typed: anything with ``SerializeToString()`` and
``ParseFromString(data)`` works, such as generated protobuf classes.
"""

from __future__ import annotations

from typing import BinaryIO, Protocol

_MAX_UINT32 = 0xFFFFFFFF
_MAX_VARINT_BYTES = 10


class ProtoStreamError(Exception):
    """Raised when a stream does not hold a readable varint or message."""


class _Message(Protocol):
    def SerializeToString(self) -> bytes: ...

    def ParseFromString(self, data: bytes) -> object: ...


def encode_varint32(value: int) -> bytes:
    """Encode an unsigned 32-bit integer as a base-128 varint."""
    if not 0 <= value <= _MAX_UINT32:
        raise ValueError(f"value {value} does not fit in 32 unsigned bits")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _read_varint32(stream: BinaryIO) -> tuple[int, int]:
    """Read a varint; return (value truncated to 32 bits, bytes consumed)."""
    result = 0
    for position in range(_MAX_VARINT_BYTES):
        raw = stream.read(1)
        if not raw:
            raise ProtoStreamError("stream ended inside a varint")
        byte = raw[0]
        result |= (byte & 0x7F) << (7 * position)
        if not byte & 0x80:
            return result & _MAX_UINT32, position + 1
    raise ProtoStreamError("varint is too long")


def read_message_count(stream: BinaryIO, byte_offset: int) -> tuple[int, int]:
    """Read a message count at ``byte_offset``; return (count, new offset)."""
    stream.seek(byte_offset)
    try:
        count, consumed = _read_varint32(stream)
    except ProtoStreamError as exc:
        raise ProtoStreamError("could not read message count") from exc
    return count, byte_offset + consumed


def write_message_count(message_count: int, stream: BinaryIO) -> None:
    stream.write(encode_varint32(message_count))


def read_message(stream: BinaryIO, message: _Message, byte_offset: int) -> int:
    """Parse the size-prefixed message at ``byte_offset`` into ``message``.

    Returns the offset just past the message.
    """
    stream.seek(byte_offset)
    try:
        size, consumed = _read_varint32(stream)
    except ProtoStreamError as exc:
        raise ProtoStreamError("could not read protobuf message size") from exc
    if size == 0:
        raise ProtoStreamError("empty protobuf message")
    data = stream.read(size)
    if len(data) != size:
        raise ProtoStreamError("could not consume protobuf message")
    try:
        message.ParseFromString(data)
    except Exception as exc:
        raise ProtoStreamError("could not parse stream") from exc
    return byte_offset + consumed + size


def write_message(message: _Message, stream: BinaryIO) -> None:
    data = message.SerializeToString()
    stream.write(encode_varint32(len(data)))
    stream.write(data)