# modproxy/config/schema.py
from __future__ import annotations

from typing import Any, Callable

import fastjsonschema

__all__ = ["GLOBAL_CONFIG_SCHEMA", "getGlobalValidator"]



GLOBAL_CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "config:global",
    "type": "object",
    "properties": {
        "proxy": {
            "type": "object",
            "properties": {
                "xorKey": {"type": "integer", "minimum": 0, "maximum": 255},
                "obfuscationMarker": {"type": "string"},
                "remoteDomain": {"type": "string", "pattern": "^https?://"},
                "userAgent": {"type": "string"},
                "localDir": {"type": "string", "minLength": 1},
            },
        },
        "mods": {
            "type": "object",
            "properties": {
                "configPath": {"type": "string", "minLength": 1},
            },
        },
        "http": {
            "type": "object",
            "properties": {
                "timeoutMs": {"type": "integer", "minimum": 1},
            },
        },
        "server": {
            "type": "object",
            "properties": {
                "host": {"type": "string"},
                "port": {"type": "integer", "minimum": 1, "maximum": 65535},
            },
        },
        "debug": {
            "type": "object",
            "properties": {
                "devModeEnabled": {"type": "boolean"},
                "logFile": {"type": ["string", "null"]},
                "suppressRecurringMessages": {
                    "type": "object",
                    "properties": {
                        "enabled": {"type": "boolean"},
                        "windowSeconds": {"type": "integer", "minimum": 1},
                        "maxPerWindow": {"type": "integer", "minimum": 1},
                        "summaryLevel": {"type": "string"},
                    },
                },
            },
        },
    },
}

_VALIDATOR: Callable[[Any], Any] | None = None



def getGlobalValidator() -> Callable[[Any], Any]:
    """
    Compiled validator for the effective global config document.
    Raises fastjsonschema.JsonSchemaValueException on invalid input.
    """
    global _VALIDATOR
    if _VALIDATOR is None:
        _VALIDATOR = fastjsonschema.compile(GLOBAL_CONFIG_SCHEMA)
    return _VALIDATOR
