# modproxy/resources/paths.py
from __future__ import annotations

import re
from os import PathLike
from pathlib import Path
from urllib.parse import unquote

__all__ = ["isPathLike", "isObfuscated", "stripQuery", "mapToLocal", "escapesRoot"]



def isPathLike(url: str) -> bool:
    """
    True when the request addresses a directory/listing rather than one asset:
    a trailing "/" or "\\", or any query string at all. A query-bearing file
    request therefore counts as path-like too.
    """
    return url.endswith("\\") or url.endswith("/") or "?" in url



def isObfuscated(url: str, marker: str) -> bool:
    """True when the request path contains the obfuscation marker."""
    return bool(marker) and marker in url



def stripQuery(url: str) -> str:
    idx = url.find("?")
    return url if idx == -1 else url[:idx]



def mapToLocal(url: str, baseDir: str | PathLike[str]) -> Path:
    """
    Map a remote-relative resource path onto `baseDir`.

    Everything from the first "?" onward is dropped and leading separators are
    removed so the remainder stays relative to `baseDir`. ".." is not
    handled here; callers refuse such URLs with escapesRoot() first.

        mapToLocal("/kcs/img/a.png?v=3", "cache") -> cache/kcs/img/a.png
    """
    relative = stripQuery(url).lstrip("/\\")
    return Path(baseDir).joinpath(relative) if relative else Path(baseDir)



def escapesRoot(url: str) -> bool:
    """
    True when the path part of `url` has a ".." segment, literally or
    percent-encoded ("%2e%2e", "..%2f"...). Such a request would leave the
    directory mapToLocal joins it onto.
    """
    path = stripQuery(url)
    for candidate in (path, unquote(path)):
        if ".." in re.split(r"[/\\]", candidate):
            return True
    return False
