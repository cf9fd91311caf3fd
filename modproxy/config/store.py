# modproxy/config/store.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .types import ConfigProvider, Validator



def _deepMerge(base: dict[str, Any], top: Mapping[str, Any]) -> dict[str, Any]:
    for key, value in top.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            _deepMerge(base[key], value)
        else:
            base[key] = value
    return base



class ConfigStore:
    """
    Read-only view over a fixed stack of providers, lowest priority first.

    `get` answers from the topmost layer holding a non-None value; `validate`
    checks the merged document once, at boot.
    """

    def __init__(self, *, namespace: str, validator: Validator, providers: list[ConfigProvider]):
        self.namespace = namespace
        self._validator = validator
        self._providers = list(providers)

    def merged(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for provider in self._providers:
            _deepMerge(result, provider.to_dict())
        return result

    def validate(self) -> None:
        self._validator(self.merged())

    def get(self, key: str, default: Any = None) -> Any:
        for provider in reversed(self._providers):
            value = provider.get(key)
            if value is not None:
                return value
        return default
