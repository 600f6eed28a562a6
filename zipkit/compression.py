"""Compression methods of ZIP entries and streaming decompression."""

from __future__ import annotations

import bz2
import io
import lzma
import zlib
from dataclasses import dataclass
from typing import BinaryIO, Callable

import zstandard

from .errors import InvalidArchive, UnsupportedArchive

_CHUNK_SIZE = 64 * 1024

# Methods this package recognises by name, keyed by their ZIP method number.
_VARIANT_NAMES = {
    0: "Stored",
    8: "Deflated",
    12: "Bzip2",
    99: "Aes",
    93: "Zstd",
    14: "Lzma",
    95: "Xz",
}


@dataclass(frozen=True, repr=False)
class CompressionMethod:
    """Identifies the storage format used to compress a file in a ZIP archive.

    Methods without a name here are shown as ``Unsupported(<number>)``.
    """

    code: int

    def __post_init__(self) -> None:
        if not isinstance(self.code, int) or not 0 <= self.code <= 0xFFFF:
            raise ValueError(f"compression method must be a 16-bit value: {self.code!r}")

    @classmethod
    def from_u16(cls, value: int) -> "CompressionMethod":
        """Return the method stored in a ZIP header as ``value``."""
        return cls(value)

    def to_u16(self) -> int:
        """Return the number written to a ZIP header for this method."""
        return self.code

    @classmethod
    def default(cls) -> "CompressionMethod":
        """The method used when none is chosen: Deflate."""
        return cls(8)

    @property
    def name(self) -> str | None:
        """The variant name, or ``None`` for an unsupported method."""
        return _VARIANT_NAMES.get(self.code)

    @property
    def is_supported(self) -> bool:
        """Whether entries using this method can be decompressed."""
        return self in SUPPORTED_COMPRESSION_METHODS

    def __repr__(self) -> str:
        name = self.name
        return name if name is not None else f"Unsupported({self.code})"

    __str__ = __repr__


CompressionMethod.Stored = CompressionMethod(0)
CompressionMethod.Deflated = CompressionMethod(8)
CompressionMethod.Bzip2 = CompressionMethod(12)
CompressionMethod.Lzma = CompressionMethod(14)
CompressionMethod.Zstd = CompressionMethod(93)
CompressionMethod.Xz = CompressionMethod(95)
CompressionMethod.Aes = CompressionMethod(99)

CompressionMethod.STORE = CompressionMethod(0)
CompressionMethod.SHRINK = CompressionMethod(1)
CompressionMethod.REDUCE_1 = CompressionMethod(2)
CompressionMethod.REDUCE_2 = CompressionMethod(3)
CompressionMethod.REDUCE_3 = CompressionMethod(4)
CompressionMethod.REDUCE_4 = CompressionMethod(5)
CompressionMethod.IMPLODE = CompressionMethod(6)
CompressionMethod.DEFLATE = CompressionMethod(8)
CompressionMethod.DEFLATE64 = CompressionMethod(9)
CompressionMethod.PKWARE_IMPLODE = CompressionMethod(10)
CompressionMethod.BZIP2 = CompressionMethod(12)
CompressionMethod.LZMA = CompressionMethod(14)
CompressionMethod.IBM_ZOS_CMPSC = CompressionMethod(16)
CompressionMethod.IBM_TERSE = CompressionMethod(18)
CompressionMethod.ZSTD_DEPRECATED = CompressionMethod(20)
CompressionMethod.ZSTD = CompressionMethod(93)
CompressionMethod.MP3 = CompressionMethod(94)
CompressionMethod.XZ = CompressionMethod(95)
CompressionMethod.JPEG = CompressionMethod(96)
CompressionMethod.WAVPACK = CompressionMethod(97)
CompressionMethod.PPMD = CompressionMethod(98)
CompressionMethod.AES = CompressionMethod(99)

SUPPORTED_COMPRESSION_METHODS: tuple[CompressionMethod, ...] = (
    CompressionMethod.Stored,
    CompressionMethod.Deflated,
    CompressionMethod.Bzip2,
    CompressionMethod.Zstd,
    CompressionMethod.Xz,
)

_CODECS: dict[int, Callable[[], object]] = {
    8: lambda: zlib.decompressobj(-zlib.MAX_WBITS),
    12: bz2.BZ2Decompressor,
    14: lambda: lzma.LZMADecompressor(format=lzma.FORMAT_ALONE),
    95: lambda: lzma.LZMADecompressor(format=lzma.FORMAT_XZ),
}


class _CodecReader:
    """Reader that feeds compressed input to a standard-library decompressor."""

    def __init__(self, reader: BinaryIO, codec) -> None:
        self._reader = reader
        self._codec = codec
        self._buffer = bytearray()

    def read(self, size: int) -> bytes:
        if size == 0:
            return b""
        while not self._buffer and not self._codec.eof:
            chunk = self._reader.read(_CHUNK_SIZE)
            if not chunk:
                raise EOFError(
                    "Compressed data ended before the end-of-stream marker was reached"
                )
            try:
                self._buffer += self._codec.decompress(chunk)
            except (zlib.error, lzma.LZMAError, OSError) as exc:
                raise InvalidArchive(f"corrupt compressed data: {exc}") from exc
        out = bytes(self._buffer[:size])
        del self._buffer[:size]
        return out

    def leftover(self) -> bytes:
        """Input that was read past the end of the compressed stream."""
        return self._codec.unused_data if self._codec.eof else b""


class Decompressor:
    """Reader that decompresses entry data read from ``reader``."""

    def __init__(self, reader: BinaryIO, compression_method: CompressionMethod) -> None:
        self._reader = reader
        self._method = compression_method
        code = compression_method.to_u16()
        if compression_method == CompressionMethod.Stored:
            self._source = reader
        elif code in _CODECS:
            self._source = _CodecReader(reader, _CODECS[code]())
        elif compression_method == CompressionMethod.Zstd:
            self._source = zstandard.ZstdDecompressor().stream_reader(
                reader, read_across_frames=True, closefd=False
            )
        else:
            raise UnsupportedArchive("Compression method not supported")

    @property
    def compression_method(self) -> CompressionMethod:
        return self._method

    def _read_some(self, size: int) -> bytes:
        try:
            return self._source.read(size)
        except zstandard.ZstdError as exc:
            raise InvalidArchive(f"corrupt compressed data: {exc}") from exc

    def read(self, size: int | None = -1) -> bytes:
        """Read up to ``size`` decompressed bytes, or everything when negative."""
        if size is not None and size >= 0:
            return self._read_some(size)
        parts = []
        while True:
            chunk = self._read_some(_CHUNK_SIZE)
            if not chunk:
                return b"".join(parts)
            parts.append(chunk)

    def readable(self) -> bool:
        return True

    def into_inner(self) -> BinaryIO:
        """Return the wrapped reader.

        Where the reader can seek, input read past the end of the compressed
        stream is given back so that the reader is left right after it.
        """
        if isinstance(self._source, _CodecReader):
            leftover = self._source.leftover()
            if leftover and self._reader.seekable():
                self._reader.seek(-len(leftover), io.SEEK_CUR)
        return self._reader