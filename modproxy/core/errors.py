# modproxy/core/errors.py
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from modproxy.http.client import FetchOutcome

__all__ = [
    "ModProxyError",
    "ResourceNotFoundError",
    "RemoteFetchError",
    "ModConfigError",
    "CacheWriteError",
    "ReactorScramError",
]



class ModProxyError(Exception):
    """Base class for errors raised inside the resource proxy."""
    pass



class ResourceNotFoundError(ModProxyError):
    """A mod or cache file is absent or unreadable. Means "try the next step"."""
    def __init__(self, path: object, reason: str = "not found"):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason



class RemoteFetchError(ModProxyError):
    """Remote origin answered outside [200, 400) or could not be reached."""
    def __init__(self, outcome: FetchOutcome, url: str = ""):
        preview = outcome.data[:200].decode("utf-8", errors="replace")
        super().__init__(f"HTTP {outcome.statusCode} from {url or '<remote>'}: {preview}")
        self.outcome = outcome
        self.url = url

    @property
    def statusCode(self) -> int:
        return self.outcome.statusCode

    @property
    def data(self) -> bytes:
        return self.outcome.data



class ModConfigError(ModProxyError):
    """Mod registry file is unreadable or malformed."""
    pass



class CacheWriteError(ModProxyError):
    """Persisting a fetched resource into the local cache failed."""
    pass



class ReactorScramError(ModProxyError):
    """Raised when a required process-wide service was never booted."""
    pass
