"""Hash functions used to pick a partition for a message key."""

from __future__ import annotations

import struct

_MASK = 0xFFFFFFFF
_C1 = 0xCC9E2D51
_C2 = 0x1B873593


def java_string_hash(s: str) -> int:
    """Equivalent of Java's ``String.hashCode()`` over the UTF-8 bytes, unsigned."""
    h = 0
    for byte in s.encode("utf-8"):
        h = (31 * h + byte) & _MASK
    return h


def _rotl(x: int, r: int) -> int:
    return ((x << r) | (x >> (32 - r))) & _MASK


def murmur3_32_hash(s: str) -> int:
    """Murmur3 32-bit hash (seed 0) masked to a non-negative 31-bit value."""
    data = s.encode("utf-8")
    length = len(data)
    body_end = length - length % 4
    h = 0

    for (k,) in struct.iter_unpack("<I", data[:body_end]):
        k = (k * _C1) & _MASK
        k = _rotl(k, 15)
        k = (k * _C2) & _MASK
        h ^= k
        h = _rotl(h, 13)
        h = (h * 5 + 0xE6546B64) & _MASK

    tail = data[body_end:]
    if tail:
        k = int.from_bytes(tail, "little")
        k = (k * _C1) & _MASK
        k = _rotl(k, 15)
        k = (k * _C2) & _MASK
        h ^= k

    h ^= length
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & _MASK
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & _MASK
    h ^= h >> 16

    return h & 0x7FFFFFFF