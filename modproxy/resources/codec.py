# modproxy/resources/codec.py
from __future__ import annotations

__all__ = ["XorCodec", "xorBytes"]



def _checkKey(key: int) -> int:
    if isinstance(key, bool) or not isinstance(key, int):
        raise TypeError(f"XOR key must be an int, got {type(key).__name__}")
    if not 0 <= key <= 255:
        raise ValueError(f"XOR key must fit in a single byte (0..255), got {key}")
    return key



def xorBytes(data: bytes | bytearray | memoryview, key: int) -> bytes:
    """
    XOR every byte of `data` against the single-byte `key`.

    Involutive: xorBytes(xorBytes(b, k), k) == b. Only defined on bytes;
    text must be encoded by the caller first, since XOR over a multi-byte
    text encoding mangles the characters.
    """
    return XorCodec(key).transform(data)



class XorCodec:
    """Reusable XOR transform with a precomputed translation table."""
    __slots__ = ("key", "_table")

    def __init__(self, key: int) -> None:
        self.key = _checkKey(key)
        self._table = bytes(value ^ self.key for value in range(256))

    def transform(self, data: bytes | bytearray | memoryview) -> bytes:
        if isinstance(data, str):
            raise TypeError("XorCodec works on bytes; encode text before transforming")
        return bytes(data).translate(self._table)

    def __repr__(self) -> str:
        return f"XorCodec(key={self.key})"
