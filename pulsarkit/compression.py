"""Payload compression providers: none, zlib, LZ4 (raw block) and Zstandard."""

from __future__ import annotations

import zlib
from abc import ABC, abstractmethod

import lz4.block
import zstandard


class CompressionProvider(ABC):
    """Compresses and decompresses message payloads."""

    def can_compress(self) -> bool:
        """Whether this provider can compress, not only decompress."""
        return True

    @abstractmethod
    def compress(self, data: bytes) -> bytes:
        """Return the compressed form of ``data``."""

    @abstractmethod
    def decompress(self, compressed_data: bytes, original_size: int) -> bytes:
        """Return ``original_size`` bytes decompressed from ``compressed_data``.

        Raises ValueError when the data cannot be decompressed.
        """


class NoopProvider(CompressionProvider):
    """Leaves payloads untouched."""

    def compress(self, data: bytes) -> bytes:
        return bytes(data)

    def decompress(self, compressed_data: bytes, original_size: int) -> bytes:
        return bytes(compressed_data)


class ZLibProvider(CompressionProvider):
    """zlib stream compression."""

    def compress(self, data: bytes) -> bytes:
        return zlib.compress(bytes(data))

    def decompress(self, compressed_data: bytes, original_size: int) -> bytes:
        decompressor = zlib.decompressobj()
        try:
            out = decompressor.decompress(bytes(compressed_data), max(original_size, 1))
        except zlib.error as exc:
            raise ValueError(f"zlib decompression failed: {exc}") from exc
        if len(out) < original_size:
            raise ValueError(
                f"zlib data holds {len(out)} bytes, expected {original_size}"
            )
        return out[:original_size]


class Lz4Provider(CompressionProvider):
    """LZ4 raw block compression, without a size prefix."""

    def compress(self, data: bytes) -> bytes:
        return lz4.block.compress(bytes(data), store_size=False)

    def decompress(self, compressed_data: bytes, original_size: int) -> bytes:
        try:
            out = lz4.block.decompress(
                bytes(compressed_data), uncompressed_size=original_size
            )
        except Exception as exc:
            raise ValueError(f"lz4 decompression failed: {exc}") from exc
        # The result always spans the declared original size.
        return out.ljust(original_size, b"\x00")[:original_size]


class ZStdProvider(CompressionProvider):
    """Zstandard frame compression."""

    def __init__(self) -> None:
        self._compressor = zstandard.ZstdCompressor()

    def compress(self, data: bytes) -> bytes:
        return self._compressor.compress(bytes(data))

    def decompress(self, compressed_data: bytes, original_size: int) -> bytes:
        decompressor = zstandard.ZstdDecompressor().decompressobj()
        try:
            out = decompressor.decompress(bytes(compressed_data))
        except zstandard.ZstdError as exc:
            raise ValueError(f"zstd decompression failed: {exc}") from exc
        if len(out) < original_size:
            raise ValueError("Invalid uncompressed size")
        return out[:original_size]