# modproxy/app/factory.py
from __future__ import annotations
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import httpx
from fastapi import FastAPI

from modproxy.app.lifecycle import life



def createApp(
    *,
    userConfigPath: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    httpClient: httpx.AsyncClient | None = None,
    configureLogs: bool = True,
) -> FastAPI:
    """
    Build the proxy application.

    `httpClient` replaces the fetcher's own client (tests, custom transports);
    the caller keeps ownership of it.
    """
    from modproxy.app.config import initConfig
    initConfig(userConfigPath=userConfigPath, overrides=overrides)
    if configureLogs:
        from modproxy.core.logging import configureLogging
        configureLogging()

    logger = logging.getLogger(__name__)

    app = FastAPI(title="modproxy", lifespan=life)
    app.state.httpClient = httpClient

    from modproxy.app.web import router as proxyRouter, resourceRouter
    app.include_router(proxyRouter)
    # ----- Catch-all comes last so it doesn't shadow routes -----
    app.include_router(resourceRouter)

    logger.info("Application created")
    return app
