"""Wire format of message frames: metadata encoding, batching and parsing.

A message frame as stored and delivered looks like::

    single: [MAGIC][CHECKSUM] [METADATA_SIZE][METADATA] [PAYLOAD]
    batch:  [MAGIC][CHECKSUM] [METADATA_SIZE][METADATA]
            [SIZE][SINGLE_METADATA][PAYLOAD] [SIZE][SINGLE_METADATA][PAYLOAD] ...

The checksum is CRC-32C over everything that follows it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Mapping, Protocol, Sequence

from pulsarkit.buffer import Buffer, wrap
from pulsarkit.checksum import crc32c

MAX_FRAME_SIZE = 5 * 1024 * 1024
MAGIC_CRC32C = 0x0E01

_MASK64 = (1 << 64) - 1
_VARINT = 0
_FIXED64 = 1
_LENGTH = 2
_FIXED32 = 5


class CorruptedMessageError(ValueError):
    """The data is missing a header, has a bad magic number or bad metadata."""

    def __init__(self, message: str = "corrupted message") -> None:
        super().__init__(message)


class EndOfMessages(EOFError):
    """No more messages are available in the frame."""

    def __init__(self, message: str = "EOF") -> None:
        super().__init__(message)


class _Encodable(Protocol):
    def encode(self) -> bytes: ...


# --- protobuf wire helpers -------------------------------------------------


def _varint(n: int) -> bytes:
    n &= _MASK64
    out = bytearray()
    while n > 0x7F:
        out.append((n & 0x7F) | 0x80)
        n >>= 7
    out.append(n)
    return bytes(out)


def _tag(number: int, wire_type: int) -> bytes:
    return _varint(number << 3 | wire_type)


def _varint_field(number: int, value: int) -> bytes:
    return _tag(number, _VARINT) + _varint(value)


def _bytes_field(number: int, data: bytes) -> bytes:
    return _tag(number, _LENGTH) + _varint(len(data)) + bytes(data)


def _string_field(number: int, text: str) -> bytes:
    return _bytes_field(number, text.encode("utf-8"))


def _read_varint(data: bytes, pos: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        if pos >= len(data):
            raise ValueError("truncated varint")
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result & _MASK64, pos
        shift += 7
        if shift >= 70:
            raise ValueError("varint too long")


def _take(data: bytes, pos: int, length: int) -> tuple[bytes, int]:
    end = pos + length
    if end > len(data):
        raise ValueError("truncated field")
    return bytes(data[pos:end]), end


def _fields(data: bytes) -> Iterator[tuple[int, int, int | bytes]]:
    """Yield ``(field_number, wire_type, value)`` for every field in ``data``."""
    pos = 0
    while pos < len(data):
        key, pos = _read_varint(data, pos)
        number, wire_type = key >> 3, key & 7
        if number == 0:
            raise ValueError("invalid field number 0")
        value: int | bytes
        if wire_type == _VARINT:
            value, pos = _read_varint(data, pos)
        elif wire_type == _LENGTH:
            length, pos = _read_varint(data, pos)
            value, pos = _take(data, pos, length)
        elif wire_type == _FIXED64:
            value, pos = _take(data, pos, 8)
        elif wire_type == _FIXED32:
            value, pos = _take(data, pos, 4)
        else:
            raise ValueError(f"unsupported wire type {wire_type}")
        yield number, wire_type, value


def _check(number: int, wire_type: int, expected: int) -> None:
    if wire_type != expected:
        raise ValueError(
            f"field {number} has wire type {wire_type}, expected {expected}"
        )


def _as_int(number: int, wire_type: int, value: int | bytes) -> int:
    _check(number, wire_type, _VARINT)
    assert isinstance(value, int)
    return value


def _as_int32(number: int, wire_type: int, value: int | bytes) -> int:
    v = _as_int(number, wire_type, value) & 0xFFFFFFFF
    return v - (1 << 32) if v & 0x80000000 else v


def _as_bytes(number: int, wire_type: int, value: int | bytes) -> bytes:
    _check(number, wire_type, _LENGTH)
    assert isinstance(value, bytes)
    return value


def _as_str(number: int, wire_type: int, value: int | bytes) -> str:
    return _as_bytes(number, wire_type, value).decode("utf-8")


# --- messages --------------------------------------------------------------


@dataclass
class KeyValue:
    """A string property attached to a message."""

    key: str
    value: str

    def encode(self) -> bytes:
        return _string_field(1, self.key) + _string_field(2, self.value)

    @classmethod
    def decode(cls, data: bytes) -> KeyValue:
        key: str | None = None
        value: str | None = None
        for number, wire_type, raw in _fields(data):
            if number == 1:
                key = _as_str(number, wire_type, raw)
            elif number == 2:
                value = _as_str(number, wire_type, raw)
        if key is None or value is None:
            raise ValueError("key value is missing a required field")
        return cls(key, value)


@dataclass
class MessageMetadata:
    """Metadata of a whole frame, shared by every message of a batch."""

    producer_name: str = ""
    sequence_id: int = 0
    publish_time: int = 0
    properties: list[KeyValue] = field(default_factory=list)
    replicated_from: str | None = None
    partition_key: str | None = None
    replicate_to: list[str] = field(default_factory=list)
    compression: int | None = None
    uncompressed_size: int | None = None
    num_messages_in_batch: int | None = None
    event_time: int | None = None
    schema_version: bytes | None = None

    def encode(self) -> bytes:
        parts = [
            _string_field(1, self.producer_name),
            _varint_field(2, self.sequence_id),
            _varint_field(3, self.publish_time),
        ]
        parts.extend(_bytes_field(4, kv.encode()) for kv in self.properties)
        if self.replicated_from is not None:
            parts.append(_string_field(5, self.replicated_from))
        if self.partition_key is not None:
            parts.append(_string_field(6, self.partition_key))
        parts.extend(_string_field(7, cluster) for cluster in self.replicate_to)
        if self.compression is not None:
            parts.append(_varint_field(8, self.compression))
        if self.uncompressed_size is not None:
            parts.append(_varint_field(9, self.uncompressed_size))
        if self.num_messages_in_batch is not None:
            parts.append(_varint_field(11, self.num_messages_in_batch))
        if self.event_time is not None:
            parts.append(_varint_field(12, self.event_time))
        if self.schema_version is not None:
            parts.append(_bytes_field(16, self.schema_version))
        return b"".join(parts)

    @classmethod
    def decode(cls, data: bytes) -> MessageMetadata:
        """Decode metadata; raise ValueError if malformed or incomplete."""
        meta = cls()
        seen: set[int] = set()
        for number, wire_type, raw in _fields(data):
            seen.add(number)
            if number == 1:
                meta.producer_name = _as_str(number, wire_type, raw)
            elif number == 2:
                meta.sequence_id = _as_int(number, wire_type, raw)
            elif number == 3:
                meta.publish_time = _as_int(number, wire_type, raw)
            elif number == 4:
                meta.properties.append(KeyValue.decode(_as_bytes(number, wire_type, raw)))
            elif number == 5:
                meta.replicated_from = _as_str(number, wire_type, raw)
            elif number == 6:
                meta.partition_key = _as_str(number, wire_type, raw)
            elif number == 7:
                meta.replicate_to.append(_as_str(number, wire_type, raw))
            elif number == 8:
                meta.compression = _as_int32(number, wire_type, raw)
            elif number == 9:
                meta.uncompressed_size = _as_int(number, wire_type, raw) & 0xFFFFFFFF
            elif number == 11:
                meta.num_messages_in_batch = _as_int32(number, wire_type, raw)
            elif number == 12:
                meta.event_time = _as_int(number, wire_type, raw)
            elif number == 16:
                meta.schema_version = _as_bytes(number, wire_type, raw)
        missing = {1, 2, 3} - seen
        if missing:
            raise ValueError(f"message metadata is missing required fields {sorted(missing)}")
        return meta


@dataclass
class SingleMessageMetadata:
    """Metadata of one message inside a batch."""

    payload_size: int = 0
    properties: list[KeyValue] = field(default_factory=list)
    partition_key: str | None = None
    compacted_out: bool | None = None
    event_time: int | None = None
    partition_key_b64_encoded: bool | None = None
    ordering_key: bytes | None = None
    sequence_id: int | None = None

    def encode(self) -> bytes:
        parts = [_bytes_field(1, kv.encode()) for kv in self.properties]
        if self.partition_key is not None:
            parts.append(_string_field(2, self.partition_key))
        parts.append(_varint_field(3, self.payload_size))
        if self.compacted_out is not None:
            parts.append(_varint_field(4, int(self.compacted_out)))
        if self.event_time is not None:
            parts.append(_varint_field(5, self.event_time))
        if self.partition_key_b64_encoded is not None:
            parts.append(_varint_field(6, int(self.partition_key_b64_encoded)))
        if self.ordering_key is not None:
            parts.append(_bytes_field(7, self.ordering_key))
        if self.sequence_id is not None:
            parts.append(_varint_field(8, self.sequence_id))
        return b"".join(parts)

    @classmethod
    def decode(cls, data: bytes) -> SingleMessageMetadata:
        """Decode metadata; raise ValueError if malformed or incomplete."""
        meta = cls()
        has_payload_size = False
        for number, wire_type, raw in _fields(data):
            if number == 1:
                meta.properties.append(KeyValue.decode(_as_bytes(number, wire_type, raw)))
            elif number == 2:
                meta.partition_key = _as_str(number, wire_type, raw)
            elif number == 3:
                meta.payload_size = _as_int32(number, wire_type, raw)
                has_payload_size = True
            elif number == 4:
                meta.compacted_out = _as_int(number, wire_type, raw) != 0
            elif number == 5:
                meta.event_time = _as_int(number, wire_type, raw)
            elif number == 6:
                meta.partition_key_b64_encoded = _as_int(number, wire_type, raw) != 0
            elif number == 7:
                meta.ordering_key = _as_bytes(number, wire_type, raw)
            elif number == 8:
                meta.sequence_id = _as_int(number, wire_type, raw)
        if not has_payload_size:
            raise ValueError("single message metadata is missing payload_size")
        return meta


# --- reading ---------------------------------------------------------------


class MessageReader:
    """Parses the metadata and the messages of one frame."""

    def __init__(self, buffer: Buffer) -> None:
        self._buffer = buffer
        self._batched = False

    @classmethod
    def from_bytes(cls, data: bytes) -> MessageReader:
        return cls(wrap(data))

    @property
    def batched(self) -> bool:
        """Whether the metadata read so far describes a batch."""
        return self._batched

    def _read_checksum(self) -> int:
        if self._buffer.readable_bytes() < 6:
            raise ValueError("missing message header")
        if self._buffer.read_uint16() != MAGIC_CRC32C:
            raise CorruptedMessageError()
        return self._buffer.read_uint32()

    def read_message_metadata(self) -> MessageMetadata:
        """Check the header and checksum, then decode the frame metadata."""
        checksum = self._read_checksum()
        computed = crc32c(self._buffer.readable_slice())
        if checksum != computed:
            raise ValueError(
                f"checksum mismatch received: 0x{checksum:x} computed: 0x{computed:x}"
            )
        try:
            size = self._buffer.read_uint32()
            meta = MessageMetadata.decode(self._buffer.read(size))
        except (ValueError, IndexError) as exc:
            raise CorruptedMessageError() from exc
        if meta.num_messages_in_batch is not None:
            self._batched = True
        return meta

    def read_message(self) -> tuple[SingleMessageMetadata | None, bytes]:
        """Return the next message's own metadata (None if not batched) and payload.

        Raises EndOfMessages when nothing is left.
        """
        if self._buffer.readable_bytes() == 0:
            raise EndOfMessages()
        if not self._batched:
            return None, self._buffer.read(self._buffer.readable_bytes())
        try:
            size = self._buffer.read_uint32()
            meta = SingleMessageMetadata.decode(self._buffer.read(size))
            return meta, self._buffer.read(meta.payload_size)
        except IndexError as exc:
            raise CorruptedMessageError() from exc

    def __iter__(self) -> Iterator[tuple[SingleMessageMetadata | None, bytes]]:
        while self._buffer.readable_bytes() > 0:
            yield self.read_message()

    def reset_buffer(self, buffer: Buffer) -> None:
        self._buffer = buffer


# --- writing ---------------------------------------------------------------


def convert_from_string_map(m: Mapping[str, str]) -> list[KeyValue]:
    return [KeyValue(key, value) for key, value in m.items()]


def convert_to_string_map(kvs: Sequence[KeyValue]) -> dict[str, str]:
    return {kv.key: kv.value for kv in kvs}


def add_single_message_to_batch(
    buffer: Buffer, metadata: _Encodable, payload: bytes
) -> None:
    """Append ``[SIZE][METADATA][PAYLOAD]`` for one message to ``buffer``."""
    serialized = metadata.encode()
    buffer.write_uint32(len(serialized))
    buffer.write(serialized)
    buffer.write(payload)


def serialize_batch(
    buffer: Buffer, cmd_send: _Encodable, metadata: _Encodable, payload: bytes
) -> None:
    """Write a complete send frame to ``buffer``.

    Layout: ``[TOTAL_SIZE] [CMD_SIZE][CMD] [MAGIC][CHECKSUM]
    [METADATA_SIZE][METADATA] [PAYLOAD]``.
    """
    cmd = cmd_send.encode()
    meta = metadata.encode()
    header_content_size = 4 + len(cmd) + 2 + 4 + 4 + len(meta)
    buffer.write_uint32(header_content_size + len(payload))

    buffer.write_uint32(len(cmd))
    buffer.write(cmd)

    buffer.write_uint16(MAGIC_CRC32C)
    checksum_idx = buffer.writer_index
    buffer.write_uint32(0)

    metadata_start = buffer.writer_index
    buffer.write_uint32(len(meta))
    buffer.write(meta)
    buffer.write(payload)

    end = buffer.writer_index
    checksum = crc32c(buffer.get(metadata_start, end - metadata_start))
    buffer.put_uint32(checksum, checksum_idx)