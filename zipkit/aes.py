"""WinZip AES encryption and decryption of ZIP entry data.

An AES encrypted entry starts with a salt whose length depends on the key
strength, followed by a 2 byte password verification value, the encrypted
data and finally a 10 byte authentication code (HMAC-SHA1-80).
"""

from __future__ import annotations

import enum
import hashlib
import hmac
import secrets
from typing import BinaryIO, Union

from .aes_ctr import AesCtrZipKeyStream
from .errors import InvalidArchive, InvalidPassword

PWD_VERIFY_LENGTH = 2
AUTH_CODE_LENGTH = 10
ITERATION_COUNT = 1000

Password = Union[bytes, bytearray, str]


class AesMode(enum.IntEnum):
    """AES key strength, valued as in the AES extra field."""

    Aes128 = 1
    Aes192 = 2
    Aes256 = 3

    def salt_length(self) -> int:
        """Length of the salt stored before the encrypted data."""
        return self.key_length() // 2

    def key_length(self) -> int:
        """Length of the AES key in bytes."""
        return {AesMode.Aes128: 16, AesMode.Aes192: 24, AesMode.Aes256: 32}[self]


def _password_bytes(password: Password) -> bytes:
    if isinstance(password, str):
        return password.encode("utf-8")
    return bytes(password)


def _read_exact(reader: BinaryIO, size: int) -> bytes:
    data = reader.read(size)
    if len(data) != size:
        raise EOFError(f"expected {size} bytes of AES data, got {len(data)}")
    return data


def _derive_keys(aes_mode: AesMode, password: Password, salt: bytes) -> tuple[bytes, bytes, bytes]:
    """Return the encryption key, HMAC key and password verification value."""
    key_length = aes_mode.key_length()
    derived = hashlib.pbkdf2_hmac(
        "sha1",
        _password_bytes(password),
        salt,
        ITERATION_COUNT,
        2 * key_length + PWD_VERIFY_LENGTH,
    )
    return (
        derived[:key_length],
        derived[key_length : 2 * key_length],
        derived[-PWD_VERIFY_LENGTH:],
    )


class AesReader:
    """Reader for AES encrypted entry data that has not been validated yet."""

    def __init__(self, reader: BinaryIO, aes_mode: AesMode, compressed_size: int) -> None:
        overhead = PWD_VERIFY_LENGTH + AUTH_CODE_LENGTH + aes_mode.salt_length()
        if compressed_size < overhead:
            raise InvalidArchive("AES encrypted data is shorter than its header and trailer")
        self._reader = reader
        self._aes_mode = aes_mode
        self._data_length = compressed_size - overhead

    def _read_header(self) -> tuple[bytes, bytes]:
        salt = _read_exact(self._reader, self._aes_mode.salt_length())
        verification = _read_exact(self._reader, PWD_VERIFY_LENGTH)
        return verification, salt

    def validate(self, password: Password) -> "AesReaderValid":
        """Read the header and check the password.

        A wrong password still passes this check with a chance of 1 in 65536;
        the authentication code checked at the end of the data catches it.
        """
        verification, salt = self._read_header()
        decrypt_key, hmac_key, pwd_verify = _derive_keys(self._aes_mode, password, salt)
        if verification != pwd_verify:
            raise InvalidPassword()
        return AesReaderValid(
            self._reader,
            self._data_length,
            AesCtrZipKeyStream(decrypt_key),
            hmac.new(hmac_key, digestmod=hashlib.sha1),
        )

    def get_verification_value_and_salt(self) -> tuple[bytes, bytes]:
        """Read the header and return the verification value and the salt."""
        return self._read_header()


class AesReaderValid:
    """Decrypting reader for AES data whose password passed the first check.

    Once all data has been read the authentication code is verified; a
    mismatch means a wrong password or corrupted data.
    """

    def __init__(
        self,
        reader: BinaryIO,
        data_remaining: int,
        cipher: AesCtrZipKeyStream,
        mac: "hmac.HMAC",
    ) -> None:
        self._reader = reader
        self._data_remaining = data_remaining
        self._cipher = cipher
        self._hmac = mac
        self._finalized = False

    def _read_chunk(self, size: int) -> bytes:
        if self._data_remaining == 0:
            return b""
        encrypted = self._reader.read(min(self._data_remaining, size))
        self._data_remaining -= len(encrypted)
        self._hmac.update(encrypted)
        plain = self._cipher.crypt(encrypted)

        if self._data_remaining == 0:
            if self._finalized:
                raise RuntimeError("authentication code was already checked")
            self._finalized = True
            read_auth_code = _read_exact(self._reader, AUTH_CODE_LENGTH)
            computed = self._hmac.digest()[:AUTH_CODE_LENGTH]
            if not hmac.compare_digest(computed, read_auth_code):
                raise InvalidArchive(
                    "Invalid authentication code, this could be due to an invalid "
                    "password or errors in the data"
                )
        return plain

    def read(self, size: int | None = -1) -> bytes:
        """Read and decrypt up to ``size`` bytes, or everything when negative."""
        if size is not None and size >= 0:
            return self._read_chunk(size)
        parts = []
        while self._data_remaining:
            chunk = self._read_chunk(self._data_remaining)
            if not chunk:
                break
            parts.append(chunk)
        return b"".join(parts)

    def readable(self) -> bool:
        return True

    def into_inner(self) -> BinaryIO:
        """Return the wrapped reader."""
        return self._reader


class AesWriter:
    """Encrypting writer producing WinZip AES entry data."""

    def __init__(self, writer: BinaryIO, aes_mode: AesMode, password: Password) -> None:
        salt = secrets.token_bytes(aes_mode.salt_length())
        encryption_key, hmac_key, pwd_verify = _derive_keys(aes_mode, password, salt)
        self._writer = writer
        self._cipher = AesCtrZipKeyStream(encryption_key)
        self._hmac = hmac.new(hmac_key, digestmod=hashlib.sha1)
        # The header is written lazily so that callers can finish other
        # metadata before the data section starts.
        self._header: bytes | None = salt + pwd_verify
        self._finished = False

    def _check_open(self) -> None:
        if self._finished:
            raise ValueError("AES writer has already been finished")

    def _write_header(self) -> None:
        if self._header is not None:
            self._writer.write(self._header)
            self._header = None

    def write(self, data: bytes) -> int:
        """Encrypt and write ``data``; return the number of bytes taken."""
        self._check_open()
        self._write_header()
        encrypted = self._cipher.crypt(data)
        self._hmac.update(encrypted)
        self._writer.write(encrypted)
        return len(data)

    def writable(self) -> bool:
        return not self._finished

    def flush(self) -> None:
        """Flush the wrapped writer."""
        self._writer.flush()

    def finish(self) -> BinaryIO:
        """Write the authentication code and return the wrapped writer."""
        self._check_open()
        self._write_header()
        self._writer.write(self._hmac.digest()[:AUTH_CODE_LENGTH])
        self._finished = True
        return self._writer