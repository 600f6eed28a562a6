"""AES in the counter mode variant used by WinZip AES encryption.

The ZIP flavour of AES-CTR uses no nonce; the counter starts at 1 and is
encoded as a 128-bit little-endian integer rather than big-endian.
"""

from __future__ import annotations

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

AES_BLOCK_SIZE = 16
_KEY_SIZES = {16: "Aes128", 24: "Aes192", 32: "Aes256"}
_COUNTER_MASK = (1 << 128) - 1


class AesCtrZipKeyStream:
    """Key stream generator for ZIP AES-CTR.

    Encryption and decryption are the same operation: the data is XOR-ed with
    the key stream. State carries over between calls, so data may be fed in
    chunks of any size.
    """

    def __init__(self, key: bytes) -> None:
        key = bytes(key)
        if len(key) not in _KEY_SIZES:
            raise ValueError(
                f"invalid AES key length {len(key)}; expected 16, 24 or 32 bytes"
            )
        self._kind = _KEY_SIZES[len(key)]
        self._encryptor = Cipher(algorithms.AES(key), modes.ECB()).encryptor()
        self._counter = 1
        self._leftover = b""

    def __repr__(self) -> str:
        return f"AesCtrZipKeyStream<{self._kind}>(counter: {self._counter})"

    def _keystream(self, size: int) -> bytes:
        """Return the next ``size`` bytes of the key stream."""
        taken = self._leftover[:size]
        self._leftover = self._leftover[size:]
        missing = size - len(taken)
        if missing <= 0:
            return taken

        blocks = -(-missing // AES_BLOCK_SIZE)
        counters = b"".join(
            ((self._counter + i) & _COUNTER_MASK).to_bytes(AES_BLOCK_SIZE, "little")
            for i in range(blocks)
        )
        self._counter = (self._counter + blocks) & _COUNTER_MASK
        fresh = self._encryptor.update(counters)
        self._leftover = fresh[missing:]
        return taken + fresh[:missing]

    def crypt(self, data: bytes) -> bytes:
        """Encrypt or decrypt ``data`` and return the result."""
        data = bytes(data)
        if not data:
            return b""
        stream = self._keystream(len(data))
        mixed = int.from_bytes(data, "little") ^ int.from_bytes(stream, "little")
        return mixed.to_bytes(len(data), "little")