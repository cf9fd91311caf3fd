# modproxy/core/dictpath.py
from __future__ import annotations
from typing import Any
from collections.abc import Mapping

__all__ = ["splitKey", "getByPath"]



def splitKey(key: str) -> list[str]:
    """
    "proxy.remoteDomain" -> ["proxy", "remoteDomain"].
    A backslash makes the next character literal: r"mods.skin\\.pack" -> ["mods", "skin.pack"].
    Raises ValueError for empty keys, empty segments or a trailing backslash.
    """
    if not isinstance(key, str) or not key:
        raise ValueError("Config key must be a non-empty string")

    segments: list[str] = []
    buf: list[str] = []
    chars = iter(key)
    for ch in chars:
        if ch == "\\":
            nxt = next(chars, None)
            if nxt is None:
                raise ValueError(f"Config key '{key}' ends with a lone backslash")
            buf.append(nxt)
        elif ch == ".":
            segments.append("".join(buf))
            buf.clear()
        else:
            buf.append(ch)
    segments.append("".join(buf))

    if "" in segments:
        raise ValueError(f"Config key '{key}' has an empty segment")
    return segments



def getByPath(obj: Any, key: str, default: Any | None = None) -> Any:
    """Value at dotted `key` in nested mappings; `default` if a hop is missing or the key is malformed."""
    try:
        segments = splitKey(key)
    except ValueError:
        return default

    node: Any = obj
    for segment in segments:
        if not isinstance(node, Mapping) or segment not in node:
            return default
        node = node[segment]
    return node
