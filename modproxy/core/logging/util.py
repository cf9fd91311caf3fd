# modproxy/core/logging/util.py
from __future__ import annotations

import logging



def getModLogger(modName: str) -> logging.Logger:
    """Logger for messages about one mod; records land under "mod.<name>"."""
    return logging.getLogger(f"mod.{modName}")
