"""Exceptions raised while reading or writing ZIP archives."""

from __future__ import annotations


class ZipError(Exception):
    """Base class for every error reported by this package."""


class InvalidArchive(ZipError):
    """The data is not a valid ZIP archive or contains inconsistent records."""


class UnsupportedArchive(ZipError):
    """The archive uses a feature that is not supported."""


class InvalidPassword(ZipError):
    """The password supplied for an encrypted entry is wrong."""

    def __init__(self, message: str = "invalid password for file in archive") -> None:
        super().__init__(message)


class InvalidChecksum(ZipError):
    """The CRC32 of the decompressed data does not match the recorded value."""

    def __init__(self, message: str = "Invalid checksum") -> None:
        super().__init__(message)