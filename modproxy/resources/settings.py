# modproxy/resources/settings.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from modproxy.config.store import ConfigStore



@dataclass(frozen=True)
class ResourceSettings:
    """Snapshot of the config keys the resolution pipeline depends on."""
    xorKey: int
    obfuscationMarker: str
    remoteDomain: str
    userAgent: str
    localDir: Path
    modsConfigPath: Path
    timeoutMs: int = 30_000

    @classmethod
    def fromConfig(cls, store: ConfigStore) -> "ResourceSettings":
        return cls(
            xorKey=int(store.get("proxy.xorKey", 0)),
            obfuscationMarker=str(store.get("proxy.obfuscationMarker", "")),
            remoteDomain=str(store.get("proxy.remoteDomain", "")).rstrip("/"),
            userAgent=str(store.get("proxy.userAgent", "")),
            localDir=Path(store.get("proxy.localDir", "cache")),
            modsConfigPath=Path(store.get("mods.configPath", "mods.json")),
            timeoutMs=int(store.get("http.timeoutMs", 30_000)),
        )
