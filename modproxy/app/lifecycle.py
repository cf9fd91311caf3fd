# modproxy/app/lifecycle.py
from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from modproxy.app.config import getGlobalConfig
from modproxy.app.context import PROCESS_REGISTRY
from modproxy.http.client import RemoteFetcher
from modproxy.mods.registry import ModRegistryProvider
from modproxy.resources.cache import LocalCache
from modproxy.resources.codec import XorCodec
from modproxy.resources.pipeline import ResourceResolver
from modproxy.resources.settings import ResourceSettings

logger = logging.getLogger(__name__)



def buildResolver(settings: ResourceSettings, *, httpClient: httpx.AsyncClient | None = None) -> ResourceResolver:
    codec = XorCodec(settings.xorKey)
    return ResourceResolver(
        registryProvider=ModRegistryProvider(settings.modsConfigPath),
        fetcher=RemoteFetcher(
            remoteDomain=settings.remoteDomain,
            userAgent=settings.userAgent,
            codec=codec,
            timeoutMs=settings.timeoutMs,
            client=httpClient,
        ),
        cache=LocalCache(settings.localDir),
        codec=codec,
        obfuscationMarker=settings.obfuscationMarker,
    )



@asynccontextmanager
async def life(app: FastAPI) -> AsyncIterator[None]:
    # --------------- Startup ---------------
    settings = ResourceSettings.fromConfig(getGlobalConfig())
    resolver = buildResolver(settings, httpClient=getattr(app.state, "httpClient", None))

    # Populate eagerly so the first request doesn't pay for it
    registry = resolver.registryProvider.get()

    PROCESS_REGISTRY.register("mods.registry", resolver.registryProvider, overwrite=True)
    PROCESS_REGISTRY.register("resources.resolver", resolver, overwrite=True)
    logger.info(
        "Proxy ready: remote=%s cache='%s' mods=%d",
        settings.remoteDomain,
        settings.localDir,
        len(registry),
    )

    try:
        yield
    finally:
        # --------------- Shutdown ---------------
        try:
            await resolver.cache.drain()
        finally:
            await resolver.fetcher.aclose()
            PROCESS_REGISTRY.unregister("resources.resolver")
            PROCESS_REGISTRY.unregister("mods.registry")
            logger.info("Proxy stopped")
