# modproxy/app/globals.py
from __future__ import annotations
from typing import Any, cast, TYPE_CHECKING

from modproxy.app.context import PROCESS_REGISTRY
from modproxy.core.errors import ReactorScramError

if TYPE_CHECKING:
    from modproxy.config.service import ConfigService
    from modproxy.mods.registry import ModRegistryProvider
    from modproxy.resources.pipeline import ResourceResolver



def getConfigService() -> ConfigService:
    cfg = PROCESS_REGISTRY.get("config.service")
    if cfg is None:
        raise ReactorScramError(
            "ConfigService is None. Call initConfig() before reading settings."
        )
    return cast("ConfigService", cfg)



def getModRegistryProvider() -> ModRegistryProvider:
    provider = PROCESS_REGISTRY.get("mods.registry")
    if provider is None:
        raise ReactorScramError(
            "Mod registry provider is None. The app lifespan registers it on startup."
        )
    return cast("ModRegistryProvider", provider)



def getResolver() -> ResourceResolver:
    resolver = PROCESS_REGISTRY.get("resources.resolver")
    if resolver is None:
        raise ReactorScramError(
            "ResourceResolver is None. The app lifespan registers it on startup."
        )
    return cast("ResourceResolver", resolver)



def config(key: str, default: Any = None) -> Any:
    """Read a dotted key from the global store, or `default` before config is booted."""
    service = PROCESS_REGISTRY.get("config.service")
    if service is None:
        return default
    return cast("ConfigService", service).globalStore.get(key, default)



def configBool(key: str, default: bool = False) -> bool:
    value = config(key, default)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)
