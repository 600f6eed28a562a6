import io

import pytest

from zipkit.aes import AesMode, AesReader, AesWriter
from zipkit.errors import InvalidArchive, InvalidPassword

PASSWORD = b"password"


def _encrypt(aes_mode, password, plaintext):
    buf = io.BytesIO()
    writer = AesWriter(buf, aes_mode, password)
    writer.write(plaintext)
    writer.finish()
    return buf.getvalue()


def _decrypt(aes_mode, password, encrypted):
    reader = AesReader(io.BytesIO(encrypted), aes_mode, len(encrypted)).validate(password)
    return reader.read()


def roundtrip(aes_mode, password, plaintext):
    encrypted = _encrypt(aes_mode, password, plaintext)
    return _decrypt(aes_mode, password, encrypted) == plaintext


@pytest.mark.parametrize(
    "aes_mode, plaintext",
    [
        (AesMode.Aes256, b""),
        (AesMode.Aes128, b"asdf\n"),
        (AesMode.Aes192, b"asdf\n"),
        (AesMode.Aes256, b"asdf\n"),
        (AesMode.Aes128, b"Lorem ipsum dolor sit amet, consectetur\n"),
        (AesMode.Aes192, b"Lorem ipsum dolor sit amet, consectetur\n"),
        (AesMode.Aes256, b"Lorem ipsum dolor sit amet, consectetur\n"),
    ],
)
def test_roundtrip(aes_mode, plaintext):
    assert roundtrip(aes_mode, PASSWORD, plaintext)


@pytest.mark.parametrize(
    "aes_mode, salt_length, key_length",
    [(AesMode.Aes128, 8, 16), (AesMode.Aes192, 12, 24), (AesMode.Aes256, 16, 32)],
)
def test_mode_lengths(aes_mode, salt_length, key_length):
    assert aes_mode.salt_length() == salt_length
    assert aes_mode.key_length() == key_length


@pytest.mark.parametrize("aes_mode", list(AesMode))
def test_encrypted_size(aes_mode):
    plaintext = b"x" * 37
    encrypted = _encrypt(aes_mode, PASSWORD, plaintext)
    assert len(encrypted) == aes_mode.salt_length() + 2 + len(plaintext) + 10


def test_ciphertext_differs_from_plaintext():
    plaintext = b"Lorem ipsum dolor sit amet, consectetur\n"
    encrypted = _encrypt(AesMode.Aes256, PASSWORD, plaintext)
    assert plaintext not in encrypted


def test_str_password_matches_bytes():
    password = "password"
    encrypted = _encrypt(AesMode.Aes128, password, b"hello")
    assert _decrypt(AesMode.Aes128, PASSWORD, encrypted) == b"hello"


def test_chunked_write_and_read():
    plaintext = bytes(range(256)) * 3
    buf = io.BytesIO()
    writer = AesWriter(buf, AesMode.Aes192, PASSWORD)
    for start in range(0, len(plaintext), 7):
        assert writer.write(plaintext[start : start + 7]) == len(plaintext[start : start + 7])
    writer.finish()
    encrypted = buf.getvalue()

    reader = AesReader(io.BytesIO(encrypted), AesMode.Aes192, len(encrypted)).validate(PASSWORD)
    parts = []
    while True:
        chunk = reader.read(5)
        if not chunk:
            break
        parts.append(chunk)
    assert b"".join(parts) == plaintext
    assert reader.read(5) == b""


def test_wrong_verification_value_raises_invalid_password():
    encrypted = bytearray(_encrypt(AesMode.Aes256, PASSWORD, b"asdf\n"))
    salt_length = AesMode.Aes256.salt_length()
    encrypted[salt_length] ^= 0xFF
    encrypted[salt_length + 1] ^= 0xFF
    with pytest.raises(InvalidPassword):
        _decrypt(AesMode.Aes256, PASSWORD, bytes(encrypted))


def test_tampered_data_fails_authentication():
    encrypted = bytearray(_encrypt(AesMode.Aes128, PASSWORD, b"Lorem ipsum dolor"))
    encrypted[AesMode.Aes128.salt_length() + 2] ^= 0x01
    with pytest.raises(InvalidArchive):
        _decrypt(AesMode.Aes128, PASSWORD, bytes(encrypted))


def test_tampered_auth_code_fails():
    encrypted = bytearray(_encrypt(AesMode.Aes256, PASSWORD, b"data"))
    encrypted[-1] ^= 0x80
    with pytest.raises(InvalidArchive):
        _decrypt(AesMode.Aes256, PASSWORD, bytes(encrypted))


def test_get_verification_value_and_salt():
    encrypted = _encrypt(AesMode.Aes192, PASSWORD, b"asdf")
    verification, salt = AesReader(
        io.BytesIO(encrypted), AesMode.Aes192, len(encrypted)
    ).get_verification_value_and_salt()
    assert salt == encrypted[:12]
    assert verification == encrypted[12:14]


def test_truncated_header_raises():
    with pytest.raises(EOFError):
        AesReader(io.BytesIO(b"\x00" * 5), AesMode.Aes256, 28).validate(PASSWORD)


def test_too_small_compressed_size():
    with pytest.raises(InvalidArchive):
        AesReader(io.BytesIO(b""), AesMode.Aes128, 5)


def test_into_inner_returns_reader():
    encrypted = _encrypt(AesMode.Aes128, PASSWORD, b"abc")
    source = io.BytesIO(encrypted)
    reader = AesReader(source, AesMode.Aes128, len(encrypted)).validate(PASSWORD)
    assert reader.read() == b"abc"
    assert reader.into_inner() is source
    assert source.tell() == len(encrypted)


def test_finish_returns_writer_and_blocks_further_use():
    buf = io.BytesIO()
    writer = AesWriter(buf, AesMode.Aes128, PASSWORD)
    writer.write(b"abc")
    writer.flush()
    assert writer.finish() is buf
    with pytest.raises(ValueError):
        writer.write(b"more")


def test_salt_is_random():
    first = _encrypt(AesMode.Aes256, PASSWORD, b"same")
    second = _encrypt(AesMode.Aes256, PASSWORD, b"same")
    assert first[:16] != second[:16]