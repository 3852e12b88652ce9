"""A growable byte buffer with separate reader and writer indexes."""

from __future__ import annotations

import struct

_UINT16 = struct.Struct(">H")
_UINT32 = struct.Struct(">I")


class Buffer:
    """Byte buffer that tracks a reader index and a writer index.

    Bytes between the reader and writer index are readable. Space after
    the writer index is writable. Writes grow the buffer when needed.
    """

    __slots__ = ("_data", "_reader", "_writer")

    def __init__(self, size: int = 4096) -> None:
        if size < 0:
            raise ValueError(f"buffer size must not be negative, got {size}")
        self._data = bytearray(size)
        self._reader = 0
        self._writer = 0

    @property
    def reader_index(self) -> int:
        """Position of the next byte to read."""
        return self._reader

    @property
    def writer_index(self) -> int:
        """Position where the next byte will be written."""
        return self._writer

    def readable_bytes(self) -> int:
        return self._writer - self._reader

    def writable_bytes(self) -> int:
        return len(self._data) - self._writer

    def capacity(self) -> int:
        """Total space allocated for the buffer's data."""
        return len(self._data)

    def is_writable(self) -> bool:
        return self.writable_bytes() > 0

    def read(self, size: int) -> bytes:
        """Consume and return the next ``size`` readable bytes."""
        if size < 0 or size > self.readable_bytes():
            raise IndexError(
                f"cannot read {size} bytes, only {self.readable_bytes()} readable"
            )
        start = self._reader
        self._reader += size
        return bytes(self._data[start:self._reader])

    def get(self, reader_index: int, size: int) -> bytes:
        """Return ``size`` bytes starting at ``reader_index`` without consuming them."""
        if reader_index < 0 or size < 0 or reader_index + size > len(self._data):
            raise IndexError(
                f"range [{reader_index}, {reader_index + size}) outside capacity "
                f"{len(self._data)}"
            )
        return bytes(self._data[reader_index:reader_index + size])

    def readable_slice(self) -> bytes:
        return bytes(self._data[self._reader:self._writer])

    def writable_slice(self) -> memoryview:
        """A writable view of the space after the writer index."""
        return memoryview(self._data)[self._writer:]

    def written_bytes(self, size: int) -> None:
        """Advance the writer index after data was written into the writable slice."""
        if size < 0 or size > self.writable_bytes():
            raise IndexError(
                f"cannot advance by {size}, only {self.writable_bytes()} writable"
            )
        self._writer += size

    def move_to_front(self) -> None:
        """Move the readable bytes to the start of the buffer."""
        size = self.readable_bytes()
        self._data[0:size] = self._data[self._reader:self._writer]
        self._reader = 0
        self._writer = size

    def resize(self, new_size: int) -> None:
        """Reallocate to ``new_size`` bytes, keeping the readable bytes at the front."""
        size = self.readable_bytes()
        if new_size < size:
            raise ValueError(
                f"new size {new_size} cannot hold {size} readable bytes"
            )
        new_data = bytearray(new_size)
        new_data[:size] = self._data[self._reader:self._writer]
        self._data = new_data
        self._reader = 0
        self._writer = size

    def _ensure_writable(self, needed: int) -> None:
        if self.writable_bytes() < needed:
            capacity = len(self._data)
            self.resize(max(capacity + needed, capacity * 3 // 2))

    def read_uint16(self) -> int:
        return _UINT16.unpack(self.read(2))[0]

    def read_uint32(self) -> int:
        return _UINT32.unpack(self.read(4))[0]

    def write_uint16(self, n: int) -> None:
        self._ensure_writable(2)
        _UINT16.pack_into(self._data, self._writer, n)
        self._writer += 2

    def write_uint32(self, n: int) -> None:
        self._ensure_writable(4)
        _UINT32.pack_into(self._data, self._writer, n)
        self._writer += 4

    def write(self, data: bytes) -> None:
        """Append ``data`` after the writer index, growing as needed."""
        size = len(data)
        self._ensure_writable(size)
        self._data[self._writer:self._writer + size] = data
        self._writer += size

    def put(self, writer_index: int, data: bytes) -> None:
        """Copy ``data`` at ``writer_index`` without moving the indexes.

        Bytes that would fall beyond the capacity are dropped.
        """
        if writer_index < 0 or writer_index > len(self._data):
            raise IndexError(
                f"index {writer_index} outside capacity {len(self._data)}"
            )
        size = min(len(data), len(self._data) - writer_index)
        self._data[writer_index:writer_index + size] = data[:size]

    def put_uint32(self, n: int, index: int) -> None:
        """Write ``n`` big-endian at ``index`` without moving the indexes."""
        if index < 0 or index + 4 > len(self._data):
            raise IndexError(f"index {index} outside capacity {len(self._data)}")
        _UINT32.pack_into(self._data, index, n)

    def clear(self) -> None:
        self._reader = 0
        self._writer = 0


def wrap(data: bytes) -> Buffer:
    """Create a buffer whose readable content is ``data``."""
    buf = Buffer(0)
    buf._data = bytearray(data)
    buf._writer = len(buf._data)
    return buf