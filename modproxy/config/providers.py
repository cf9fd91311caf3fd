# modproxy/config/providers.py
from __future__ import annotations
import copy
from typing import Any
from collections.abc import Mapping
from pathlib import Path
import logging

import json5

from modproxy.core.dictpath import getByPath
from .types import ConfigProvider

logger = logging.getLogger(__name__)

__all__ = ["OverrideProvider", "DefaultsProvider", "FileProvider"]



def _parseObject(text: str, origin: str) -> dict[str, Any]:
    """json5 text → top-level object. Raises ValueError/TypeError."""
    parsed = json5.loads(text)
    if parsed is None:
        return {}
    if not isinstance(parsed, Mapping):
        raise TypeError(f"{origin}: config must be a JSON object, not '{type(parsed).__name__}'")
    return dict(parsed)



class _MappingProvider(ConfigProvider):
    """Layer backed by a private deep copy of a mapping."""
    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(data)) if data else {}

    def get(self, key: str) -> Any | None:
        return getByPath(self._data, key, None)

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)



# ----------------------------------------------
#       Topmost layer: overrides from the host
# ----------------------------------------------

class OverrideProvider(_MappingProvider):
    """
    Values handed to createApp()/initConfig() by the embedding host or tests.
    Never persisted.
    """



# ----------------------------------------------
#       Bottom layer: shipped defaults
# ----------------------------------------------

class DefaultsProvider(_MappingProvider):
    """
    Shipped defaults, from `modproxy/assets/settings_default.json5` or a mapping.

        DefaultsProvider(path=DEFAULTS_FILE)
        DefaultsProvider(data={"proxy": {"xorKey": 98}})

    Broken defaults are a packaging bug, so every problem raises:
    ValueError for bad arguments or json5 syntax, FileNotFoundError for a
    missing file, TypeError for a non-object document.
    """
    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        path: Path | str | None = None,
    ) -> None:
        if (data is None) == (path is None):
            raise ValueError(f"{type(self).__name__}: pass exactly one of 'data' or 'path'")

        if path is not None:
            path = Path(path)
            if not path.is_file():
                raise FileNotFoundError(f"{type(self).__name__}: defaults file '{path}' not found")
            data = _parseObject(path.read_text("utf-8"), str(path))
        elif not isinstance(data, Mapping):
            raise TypeError(f"{type(self).__name__}: 'data' must be a Mapping, not '{type(data).__name__}'")

        super().__init__(data)



# ----------------------------------------------
#       Middle layer: the user's config file
# ----------------------------------------------

class FileProvider(_MappingProvider):
    """
    The user's .json/.json5 file (remote domain, cache dir, mods file...).

    A missing or unreadable file, or one that fails to parse, is logged and
    contributes nothing. A file holding anything but an object raises TypeError.
    """
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(self._read())

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            logger.debug("No user config at '%s', using defaults", self.path)
            return {}
        if not self.path.is_file():
            raise IsADirectoryError(f"{type(self).__name__}: '{self.path}' is not a file")

        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as err:
            logger.error("Reading user config '%s' failed: %s", self.path, err)
            return {}

        try:
            return _parseObject(text, str(self.path))
        except ValueError as err:
            logger.warning("User config '%s' parse failed, ignoring it: %s", self.path, err)
            return {}
