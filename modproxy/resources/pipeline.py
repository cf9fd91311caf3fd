# modproxy/resources/pipeline.py
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from modproxy.core.errors import RemoteFetchError, ResourceNotFoundError
from modproxy.core.logging import getModLogger
from modproxy.http.client import RemoteFetcher
from modproxy.mods.manifest import ModDescriptor
from modproxy.mods.registry import ModRegistry, ModRegistryProvider
from modproxy.resources.cache import LocalCache, readLocalFile
from modproxy.resources.codec import XorCodec
from modproxy.resources.paths import escapesRoot, isObfuscated, isPathLike, mapToLocal

logger = logging.getLogger(__name__)

__all__ = [
    "StepStatus",
    "StepResult",
    "ResolutionStep",
    "ResolvedResource",
    "ResourceResolver",
    "firstFound",
]



class StepStatus(Enum):
    FOUND = "found"
    NOT_FOUND = "notFound"
    FAILED = "failed"



@dataclass(frozen=True)
class StepResult:
    status: StepStatus
    source: str
    data: bytes = b""
    statusCode: int | None = None

    @classmethod
    def found(cls, source: str, data: bytes, statusCode: int = 200) -> "StepResult":
        return cls(StepStatus.FOUND, source, data, statusCode)

    @classmethod
    def notFound(cls, source: str) -> "StepResult":
        return cls(StepStatus.NOT_FOUND, source)

    @classmethod
    def failed(cls, source: str, data: bytes, statusCode: int) -> "StepResult":
        return cls(StepStatus.FAILED, source, data, statusCode)



@dataclass(frozen=True)
class ResolutionStep:
    source: str
    run: Callable[[], Awaitable[StepResult]]



@dataclass(frozen=True)
class ResolvedResource:
    """What the HTTP layer sends back: body plus the suggested status code."""
    body: bytes | str
    statusCode: int
    source: str

    @property
    def isText(self) -> bool:
        return isinstance(self.body, str)



async def firstFound(steps: Iterable[ResolutionStep]) -> StepResult:
    """
    Run `steps` strictly one after another and return the first FOUND result.
    Later steps never start once one is found. When none is found, the last
    FAILED result is returned (or the last NOT_FOUND if nothing failed).
    """
    last: StepResult | None = None
    lastFailure: StepResult | None = None
    for step in steps:
        result = await step.run()
        if result.status is StepStatus.FOUND:
            return result
        last = result
        if result.status is StepStatus.FAILED:
            lastFailure = result
    if lastFailure is not None:
        return lastFailure
    return last if last is not None else StepResult.notFound("none")



class ResourceResolver:
    """
    Serves one resource request through the fallback chain
    mods → local cache → remote origin.

    Mods are tried in registry order. Within a mod, each matching replace
    rule's rewritten path comes first (rule order), then the unrewritten path,
    all under the mod's files root. Remote hits for non path-like requests are
    persisted into the cache in the background.

    Resources under the obfuscation marker are stored de-obfuscated (mods and
    cache hold plain bytes) and obfuscated again on the way out.
    """
    def __init__(
        self,
        *,
        registryProvider: ModRegistryProvider,
        fetcher: RemoteFetcher,
        cache: LocalCache,
        codec: XorCodec,
        obfuscationMarker: str,
    ) -> None:
        self.registryProvider = registryProvider
        self.fetcher = fetcher
        self.cache = cache
        self.codec = codec
        self.obfuscationMarker = obfuscationMarker

    # ----- Steps -----

    def _fileStep(self, source: str, path: Path, *, modName: str | None = None) -> ResolutionStep:
        async def run() -> StepResult:
            try:
                data = await readLocalFile(path)
            except ResourceNotFoundError as err:
                logger.debug("%s miss: %s", source, err)
                return StepResult.notFound(source)
            if modName is not None:
                getModLogger(modName).debug("Serving '%s'", path)
            return StepResult.found(source, data)
        return ResolutionStep(source, run)

    def _remoteStep(self, url: str, *, obfuscate: bool, persistTo: Path | None) -> ResolutionStep:
        async def run() -> StepResult:
            try:
                outcome = await self.fetcher.fetch(url, obfuscate)
            except RemoteFetchError as err:
                return StepResult.failed("remote", err.data, err.statusCode)
            if persistTo is not None:
                self.cache.scheduleWrite(persistTo, outcome.data)
            return StepResult.found("remote", outcome.data, outcome.statusCode)
        return ResolutionStep("remote", run)

    def _modSteps(self, mod: ModDescriptor, url: str) -> list[ResolutionStep]:
        source = f"mod:{mod.displayName}"
        root = mod.filesRoot
        steps = [
            self._fileStep(source, mapToLocal(rewritten, root), modName=mod.displayName)
            for rewritten in mod.rewrites(url)
            if not escapesRoot(rewritten)
        ]
        steps.append(self._fileStep(source, mapToLocal(url, root), modName=mod.displayName))
        return steps

    def buildSteps(self, url: str, registry: ModRegistry, *, encrypt: bool, pathLike: bool) -> list[ResolutionStep]:
        cachePath = self.cache.pathFor(url)
        steps: list[ResolutionStep] = []
        for mod in registry:
            steps.extend(self._modSteps(mod, url))
        steps.append(self._fileStep("cache", cachePath))
        # Directory-like requests are listings/text: never de-obfuscated, never cached
        steps.append(self._remoteStep(
            url,
            obfuscate=encrypt and not pathLike,
            persistTo=None if pathLike else cachePath,
        ))
        return steps

    # ----- Entry point -----

    async def resolve(self, originalUrl: str) -> ResolvedResource:
        """
        Never raises (apart from cancellation). Unexpected errors are logged
        and reported as an empty 500 response.
        URLs with a ".." segment are answered 404 before any step runs.
        """
        try:
            return await self._resolve(originalUrl)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Resolving '%s' failed unexpectedly", originalUrl)
            return ResolvedResource(body=b"", statusCode=500, source="error")

    async def _resolve(self, originalUrl: str) -> ResolvedResource:
        if escapesRoot(originalUrl):
            logger.warning("Refusing '%s': path leaves the resource root", originalUrl)
            return ResolvedResource(body=b"", statusCode=404, source="rejected")

        registry = self.registryProvider.get()
        encrypt = isObfuscated(originalUrl, self.obfuscationMarker)
        pathLike = isPathLike(originalUrl)

        result = await firstFound(self.buildSteps(originalUrl, registry, encrypt=encrypt, pathLike=pathLike))

        if result.status is not StepStatus.FOUND:
            # Last resort: hand the origin's error body back as text
            statusCode = result.statusCode if result.statusCode is not None else 404
            logger.info("No source for '%s', answering %d", originalUrl, statusCode)
            return ResolvedResource(
                body=result.data.decode("utf-8", errors="replace"),
                statusCode=statusCode,
                source="remote-error",
            )

        body: bytes | str
        if pathLike:
            body = result.data.decode("utf-8", errors="replace")
        elif encrypt:
            body = self.codec.transform(result.data)
        else:
            body = result.data

        return ResolvedResource(body=body, statusCode=result.statusCode or 200, source=result.source)
