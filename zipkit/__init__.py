"""Building blocks for ZIP archives: names, checksums, extra fields, AES and decompression."""

__version__ = "4.3.0"

__all__ = [
    "aes",
    "aes_ctr",
    "compression",
    "cp437",
    "crc32",
    "errors",
    "extra_fields",
    "path",
]