# modproxy/config/types.py
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Callable

__all__ = ["ConfigProvider", "Validator"]

Validator = Callable[[dict[str, Any]], Any]



class ConfigProvider(ABC):
    """One read-only layer of the config stack. Layers are fixed at boot."""

    @abstractmethod
    def get(self, key: str) -> Any | None: ...

    @abstractmethod
    def to_dict(self) -> Mapping[str, Any]: ...
