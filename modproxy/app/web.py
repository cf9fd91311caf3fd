# modproxy/app/web.py
from __future__ import annotations

import mimetypes
import secrets
import time

from fastapi import APIRouter, Request
from fastapi.responses import Response

from modproxy.app.globals import getModRegistryProvider, getResolver
from modproxy.core.logging import setLogContext, clearLogContext
from modproxy.resources.paths import stripQuery
from modproxy.semver.semver import compareVersion

# Management endpoints live under a prefix the asset server never uses
router = APIRouter(prefix="/_proxy")
# Catch-all, must be included last
resourceRouter = APIRouter()



@router.get("/health")
async def health():
    return {"ok": True, "ts": int(time.time() * 1000)}



@router.get("/mods")
async def listMods():
    registry = getModRegistryProvider().get()
    return {
        "source": str(registry.source) if registry.source else None,
        "mods": [
            {"name": mod.displayName, "filesRoot": str(mod.filesRoot), "rules": len(mod.replace)}
            for mod in registry
        ],
    }



@router.post("/mods/reload")
async def reloadMods():
    registry = getModRegistryProvider().reload()
    return {"count": len(registry), "mods": registry.names()}



@router.get("/update-level")
async def updateLevel(current: str, latest: str):
    level = compareVersion(latest, current)
    return {
        "level": level if isinstance(level, bool) else int(level),
        "releaseOfPrerelease": isinstance(level, bool),
    }



def _mediaTypeFor(url: str, isText: bool) -> str:
    if isText:
        return "text/html; charset=utf-8"
    guessed, _encoding = mimetypes.guess_type(stripQuery(url))
    return guessed or "application/octet-stream"



def _originalUrl(request: Request) -> str:
    """Request target as the client sent it: percent-escapes in the path stay encoded."""
    rawPath = request.scope.get("raw_path")
    path = rawPath.split(b"?", 1)[0].decode("latin-1") if rawPath else request.url.path
    query = request.url.query
    return f"{path}?{query}" if query else path



@resourceRouter.get("/{resourcePath:path}")
async def serveResource(request: Request, resourcePath: str):
    originalUrl = _originalUrl(request)

    setLogContext(requestId=secrets.token_hex(4), resource=originalUrl)
    try:
        resolved = await getResolver().resolve(originalUrl)
    finally:
        clearLogContext()

    content = resolved.body.encode("utf-8") if isinstance(resolved.body, str) else resolved.body
    return Response(
        content=content,
        status_code=resolved.statusCode,
        media_type=_mediaTypeFor(originalUrl, resolved.isText),
        headers={"X-Modproxy-Source": resolved.source},
    )
