"""Decoding of IBM code page 437 text as used by legacy ZIP file names."""

from __future__ import annotations

_CODEC = "cp437"


def to_char(byte: int) -> str:
    """Return the character that a single code page 437 byte stands for."""
    if not 0 <= byte <= 0xFF:
        raise ValueError(f"byte value out of range: {byte}")
    return bytes((byte,)).decode(_CODEC)


def from_cp437(data: bytes) -> str:
    """Decode a byte string in code page 437 to text."""
    data = bytes(data)
    if data.isascii():
        return data.decode("ascii")
    return data.decode(_CODEC)