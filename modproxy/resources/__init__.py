# modproxy/resources/__init__.py
from .codec import XorCodec, xorBytes
from .paths import escapesRoot, isObfuscated, isPathLike, mapToLocal

__all__ = [
    "XorCodec",
    "xorBytes",
    "isObfuscated",
    "isPathLike",
    "mapToLocal",
    "escapesRoot",
]
