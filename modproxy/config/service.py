# modproxy/config/service.py
from __future__ import annotations
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from modproxy.config.providers import DefaultsProvider, FileProvider, OverrideProvider
from modproxy.config.schema import getGlobalValidator
from modproxy.config.store import ConfigStore

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent.parent
DEFAULTS_FILE = PACKAGE_DIR / "assets" / "settings_default.json5"
USER_CONFIG_ENV = "MODPROXY_CONFIG"
USER_CONFIG_DEFAULT = Path("userdata") / "config" / "global.json5"



@dataclass
class ConfigService:
    globalStore: ConfigStore

    @classmethod
    def bootstrap(
        cls,
        *,
        userConfigPath: str | Path | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> "ConfigService":
        """
        Build the global store: shipped defaults < user file < runtime overrides.
        The user file comes from `userConfigPath`, then $MODPROXY_CONFIG, then
        ./userdata/config/global.json5. A missing user file is fine.
        """
        if userConfigPath is None:
            userConfigPath = os.environ.get(USER_CONFIG_ENV) or USER_CONFIG_DEFAULT

        globalStore = ConfigStore(
            namespace="config:global",
            validator=getGlobalValidator(),
            providers=[
                DefaultsProvider(path=DEFAULTS_FILE),
                FileProvider(path=userConfigPath),
                OverrideProvider(overrides),
            ],
        )
        # Fail at boot rather than on the first request
        globalStore.validate()
        logger.debug("Config bootstrapped (user file '%s')", userConfigPath)
        return cls(globalStore=globalStore)
