# modproxy/core/jsonutils.py
from __future__ import annotations

import base64
import json
from collections.abc import Mapping, Iterable
from dataclasses import is_dataclass, asdict
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any

__all__ = ["safeJsonDumps", "tryJSONify"]



def safeJsonDumps(obj: object) -> str:
    """
    Compact JSON with UTF-8 kept as-is. Falls back to tryJSONify when the
    payload holds values json can't encode (bytes, Paths, exceptions...).
    """
    try:
        return json.dumps(obj, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    except (TypeError, ValueError):
        return json.dumps(tryJSONify(obj), ensure_ascii=False, allow_nan=False, separators=(",", ":"))



def tryJSONify(obj: Any, *, _seen: set[int] | None = None, _depth: int = 0, _maxDepth: int = 10) -> Any:
    """
    Best-effort conversion into JSON-safe values.

    Rules:
      • None, bool, int, str are preserved; non-finite floats become strings.
      • bytes → {"__b64__": "..."}; long payloads are truncated to 256 bytes.
      • Exceptions → {"type", "message"}.
      • date/datetime → ISO8601, Path → str, Enum → its value.
      • Mappings → dict with str keys, other iterables → list.
      • fallback → repr(obj)
    """
    if _seen is None:
        _seen = set()
    if _depth > _maxDepth:
        return f"<max_depth_exceeded {type(obj).__name__}>"

    if obj is None or isinstance(obj, (bool, int, str)):
        return obj
    if isinstance(obj, float):
        return obj if obj == obj and obj not in (float("inf"), float("-inf")) else str(obj)

    oid = id(obj)
    if oid in _seen:
        return f"<circular_ref {type(obj).__name__}>"
    _seen.add(oid)

    if isinstance(obj, BaseException):
        return {"type": type(obj).__name__, "message": str(obj)}
    if isinstance(obj, (bytes, bytearray, memoryview)):
        raw = bytes(obj)
        return {"__b64__": base64.b64encode(raw[:256]).decode("ascii"), "len": len(raw)}
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return tryJSONify(obj.value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth)
    if is_dataclass(obj) and not isinstance(obj, type):
        return tryJSONify(asdict(obj), _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth)
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, Mapping):
        return {
            str(key): tryJSONify(value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth) for key, value in obj.items()
        }
    if isinstance(obj, Iterable):
        return [tryJSONify(value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth) for value in obj]

    return repr(obj)
