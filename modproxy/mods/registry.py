# modproxy/mods/registry.py
from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import json5
from pydantic import TypeAdapter, ValidationError

from modproxy.core.errors import ModConfigError
from modproxy.mods.manifest import ModDescriptor

logger = logging.getLogger(__name__)

__all__ = ["ModRegistry", "ModRegistryProvider", "loadMods"]

_MOD_LIST = TypeAdapter(list[ModDescriptor])



@dataclass(frozen=True)
class ModRegistry:
    """Installed mods in override priority order (first match wins)."""
    mods: tuple[ModDescriptor, ...] = ()
    source: Path | None = None

    def __iter__(self) -> Iterator[ModDescriptor]:
        return iter(self.mods)

    def __len__(self) -> int:
        return len(self.mods)

    def names(self) -> list[str]:
        return [mod.displayName for mod in self.mods]



def _readModList(configPath: Path) -> list[ModDescriptor]:
    try:
        text = configPath.read_text(encoding="utf-8")
    except OSError as err:
        raise ModConfigError(f"cannot read mods config '{configPath}': {err}") from err

    try:
        raw = json5.loads(text)
    except ValueError as err:
        raise ModConfigError(f"mods config '{configPath}' is not valid JSON: {err}") from err

    try:
        return _MOD_LIST.validate_python(raw)
    except ValidationError as err:
        raise ModConfigError(f"mods config '{configPath}' has invalid entries: {err}") from err



def loadMods(configPath: str | Path) -> ModRegistry:
    """
    Read and validate the mods config file.

    Never raises: a missing, unreadable or malformed file is logged and yields
    an empty registry, so the proxy keeps serving cache/remote content.
    """
    configPath = Path(configPath)
    try:
        mods = _readModList(configPath)
    except ModConfigError as err:
        logger.error("Loading mods failed, continuing without mods: %s", err)
        return ModRegistry(mods=(), source=configPath)

    logger.info("Loaded %d mod(s) from '%s': %s", len(mods), configPath, ", ".join(m.displayName for m in mods) or "-")
    return ModRegistry(mods=tuple(mods), source=configPath)



class ModRegistryProvider:
    """
    Lazily loads the registry once per process. Safe to call from concurrent
    requests; only the first caller reads the file. Changes on disk are picked
    up only through reload().
    """
    def __init__(self, configPath: str | Path) -> None:
        self.configPath = Path(configPath)
        self._registry: ModRegistry | None = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._registry is not None

    def get(self) -> ModRegistry:
        registry = self._registry
        if registry is not None:
            return registry
        with self._lock:
            if self._registry is None:
                self._registry = loadMods(self.configPath)
            return self._registry

    def reload(self) -> ModRegistry:
        with self._lock:
            self._registry = loadMods(self.configPath)
            return self._registry
