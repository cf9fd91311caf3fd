# modproxy/core/logging/setup.py
from __future__ import annotations
import logging
import logging.handlers

from modproxy.app.globals import config, configBool
from .formatters import DevFormatter, JsonFormatter
from .filters import RecurringSuppressFilter

__all__ = ["NO_PROPAGATE", "configureLogging"]



# Disable propagation from chatty libraries
NO_PROPAGATE = [
    "uvicorn.access",
    "httpcore.connection", "httpcore.http11",
    "httpx",
]



def configureLogging() -> None:
    """
    Initiate the global logging configuration.

    Dev (debug.devModeEnabled):
      - Console pretty logs (DEBUG)
      - JSON file log (DEBUG)

    Prod:
      - Console INFO
      - JSON file log INFO with rotation
      - Optional recurring suppression (toggle)
    """
    devMode = configBool("debug.devModeEnabled", False)
    rootLevel = logging.DEBUG if devMode else logging.INFO

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(rootLevel)

    for name in NO_PROPAGATE:
        logging.getLogger(name).propagate = False

    consoleHandler = logging.StreamHandler()
    consoleHandler.setLevel(rootLevel)
    consoleHandler.setFormatter(DevFormatter())
    handlers: list[logging.Handler] = [consoleHandler]

    logFile = config("debug.logFile", "modproxy.log")
    if logFile:
        fileHandler = logging.handlers.RotatingFileHandler(
            str(logFile),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        fileHandler.setLevel(rootLevel)
        fileHandler.setFormatter(JsonFormatter())
        handlers.append(fileHandler)

    if configBool("debug.suppressRecurringMessages.enabled", True):
        levelName = str(config("debug.suppressRecurringMessages.summaryLevel", "INFO")).upper()
        summaryLevel = getattr(logging, levelName, logging.INFO)

        suppressFilter = RecurringSuppressFilter(
            windowSeconds=int(config("debug.suppressRecurringMessages.windowSeconds", 60)),
            maxPerWindow=int(config("debug.suppressRecurringMessages.maxPerWindow", 5)),
            summaryLevel=summaryLevel,
        )
        # Console only: one filter shared by several handlers would count each record twice
        consoleHandler.addFilter(suppressFilter)

    for handler in handlers:
        root.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
