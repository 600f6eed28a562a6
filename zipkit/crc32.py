"""A reader that checks the CRC32 of the data it passes through."""

from __future__ import annotations

import zlib
from typing import BinaryIO

from .errors import InvalidChecksum


class Crc32Reader:
    """Wrap a binary reader and verify its CRC32 once the end is reached.

    The check is disabled for AE-2 encrypted data, which records no CRC.
    """

    def __init__(self, inner: BinaryIO, checksum: int, ae2_encrypted: bool = False) -> None:
        self._inner = inner
        self._crc = 0
        self._check = checksum
        self._enabled = not ae2_encrypted

    def _matches(self) -> bool:
        return self._crc == self._check

    def read(self, size: int | None = -1) -> bytes:
        """Read up to ``size`` bytes, or everything when ``size`` is negative."""
        if size is None or size < 0:
            data = self._inner.read()
            if self._enabled:
                self._crc = zlib.crc32(data, self._crc)
                if not self._matches():
                    raise InvalidChecksum()
            return data

        data = self._inner.read(size)
        if self._enabled:
            if not data and size > 0 and not self._matches():
                raise InvalidChecksum()
            self._crc = zlib.crc32(data, self._crc)
        return data

    def readable(self) -> bool:
        return True

    def into_inner(self) -> BinaryIO:
        """Return the wrapped reader."""
        return self._inner