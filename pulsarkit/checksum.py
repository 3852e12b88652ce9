"""CRC-32C (Castagnoli) checksums as used on the wire."""

from __future__ import annotations

_POLY = 0x82F63B78
_MASK = 0xFFFFFFFF


def _make_table() -> tuple[int, ...]:
    table = []
    for i in range(256):
        crc = i
        for _ in range(8):
            crc = (crc >> 1) ^ _POLY if crc & 1 else crc >> 1
        table.append(crc)
    return tuple(table)


_TABLE = _make_table()


def _update(crc: int, data: bytes) -> int:
    crc ^= _MASK
    for byte in data:
        crc = _TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ _MASK


def crc32c(data: bytes) -> int:
    """Return the CRC-32C checksum of ``data``."""
    return _update(0, data)


class CheckSum:
    """Incremental CRC-32C computation."""

    __slots__ = ("_crc",)

    def __init__(self) -> None:
        self._crc: int | None = None

    def write(self, data: bytes) -> int:
        """Feed ``data`` into the checksum and return the number of bytes taken."""
        self._crc = _update(0 if self._crc is None else self._crc, data)
        return len(data)

    def compute(self) -> bytes | None:
        """Return the big-endian checksum, or None if nothing was written."""
        if self._crc is None:
            return None
        return self._crc.to_bytes(4, "big")