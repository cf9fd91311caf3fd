# modproxy/app/config.py
from __future__ import annotations
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from modproxy.app.context import PROCESS_REGISTRY
from modproxy.config.service import ConfigService
from modproxy.config.store import ConfigStore

logger = logging.getLogger(__name__)

__all__ = ["initConfig", "resetConfig", "getGlobalConfig"]

# ------------------------------------------------------------------ #
# Module singletons
# ------------------------------------------------------------------ #

_CONFIG_SERVICE: ConfigService | None = None

# ------------------------------------------------------------------ #
# Core initialization
# ------------------------------------------------------------------ #

def initConfig(
    *,
    userConfigPath: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ConfigService:
    """
    Initialize config subsystem (idempotent).

    Arguments only take effect on the first call; use resetConfig() to rebuild.
    """
    global _CONFIG_SERVICE
    if _CONFIG_SERVICE is not None:
        return _CONFIG_SERVICE
    _CONFIG_SERVICE = ConfigService.bootstrap(userConfigPath=userConfigPath, overrides=overrides)
    PROCESS_REGISTRY.register("config.service", _CONFIG_SERVICE, overwrite=True)
    logger.info("Config initialized")
    return _CONFIG_SERVICE



def resetConfig() -> None:
    """Forget the booted config service (tests and embedding hosts)."""
    global _CONFIG_SERVICE
    _CONFIG_SERVICE = None
    PROCESS_REGISTRY.unregister("config.service")



def getGlobalConfig() -> ConfigStore:
    """
    Returns the global ConfigStore, booting config with defaults if needed.
    """
    return initConfig().globalStore
