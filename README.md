# zipkit

Low-level pieces for working with ZIP archives in Python.

- `zipkit.cp437`: `from_cp437` decodes IBM codepage 437 file names, and
  `to_char` decodes a single byte.
- `zipkit.crc32`: `Crc32Reader` wraps a binary reader and checks a CRC32 once
  the data ends. `into_inner()` gives back the wrapped reader. The check can be
  switched off for AE-2 encrypted data with `ae2_encrypted=True`.
- `zipkit.path`: `simplified_components` turns an entry name into its normal
  path parts and resolves `..`. It returns `None` for absolute names, names with
  a drive, or names whose `..` would climb above the start.
- `zipkit.extra_fields`: these classes parse extra fields, each with a
  `from_reader(reader, length)` class method.
  - `ExtendedTimestamp` holds `mod_time`, `ac_time` and `cr_time`, as UNIX
    seconds or `None`.
  - `Ntfs` holds `mtime`, `atime` and `ctime`, in 100 ns units since 1601.
  - `UnicodeExtraField` holds an Info-ZIP Unicode path or comment. Its
    `unwrap_valid(ascii_field)` method checks the field's CRC against the plain
    name.
- `zipkit.aes_ctr`: `AesCtrZipKeyStream` is the AES-CTR variant that WinZip AES
  uses. It has no nonce and a little-endian counter that starts at 1.
  `crypt(data)` both encrypts and decrypts.
- `zipkit.aes`: WinZip AES entry data.
  - `AesMode` has the members `Aes128`, `Aes192` and `Aes256`.
  - `AesReader` reads the header. Its `validate(password)` method returns an
    `AesReaderValid`, and `get_verification_value_and_salt()` returns the
    verification value and the salt.
  - `AesReaderValid` decrypts the data and checks the 10-byte authentication
    code at the end.
  - `AesWriter` encrypts. It has `write`, `flush` and `finish`.
- `zipkit.compression`: `CompressionMethod` has named constants such as
  `Stored`, `Deflated`, `Bzip2`, `Zstd`, `Lzma`, `Xz`, `Aes`, `DEFLATE64` and
  `PPMD`. It also has `from_u16`, `to_u16` and `default()`, where the default is
  Deflate. `Decompressor` reads stored, deflate, bzip2, zstd, LZMA and XZ data.
  Any other method raises `UnsupportedArchive`. The tuple
  `SUPPORTED_COMPRESSION_METHODS` lists Stored, Deflated, Bzip2, Zstd and Xz.
- `zipkit.errors`: `ZipError` and its subclasses `InvalidArchive`,
  `UnsupportedArchive`, `InvalidPassword` and `InvalidChecksum`.

## Install

```
pip install zipkit
```

## Examples

Decode a codepage 437 name:

```python
from zipkit.cp437 import from_cp437

assert from_cp437(b"Cura\x87ao") == "Curaçao"
```

Encrypt and decrypt with WinZip AES:

```python
import io
from zipkit.aes import AesMode, AesReader, AesWriter

password = b"password"
out = io.BytesIO()
writer = AesWriter(out, AesMode.Aes256, password)
writer.write(b"hello")
writer.finish()

out.seek(0)
reader = AesReader(out, AesMode.Aes256, len(out.getvalue())).validate(password)
assert reader.read() == b"hello"
```

A wrong password raises `zipkit.errors.InvalidPassword`. A 1 in 65536 chance
remains that a wrong password passes this check. Data whose authentication code
does not match raises `zipkit.errors.InvalidArchive`.

Check a CRC32 while reading:

```python
import io
from zipkit.crc32 import Crc32Reader

reader = Crc32Reader(io.BytesIO(b"1234"), 0x9BE3E0A3)
assert reader.read() == b"1234"
```

A mismatch raises `zipkit.errors.InvalidChecksum`.

Decompress deflate data:

```python
import io
import zlib
from zipkit.compression import CompressionMethod, Decompressor

packer = zlib.compressobj(wbits=-15)
raw = packer.compress(b"data") + packer.flush()
assert Decompressor(io.BytesIO(raw), CompressionMethod.Deflated).read() == b"data"
```

## What this package does not do

The package has no archive reader or writer. It does not find or parse the
central directory or local file headers, and it cannot list, extract, create,
append to or delete entries in a `.zip` file. It also has no command-line tool.

Compression is read-only: the package has no compressors. It cannot decode
Deflate64 or PPMd data.

## Running the tests

```
pip install -e ".[test]"
pytest
```