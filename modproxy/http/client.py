# modproxy/http/client.py
from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass

import httpx

from modproxy.core.errors import RemoteFetchError
from modproxy.resources.codec import XorCodec

__all__ = ["FetchOutcome", "RemoteFetcher"]

logger = logging.getLogger(__name__)

# Status codes reported for failures that never produced an HTTP response
TRANSPORT_ERROR_STATUS = 502
TIMEOUT_STATUS = 504



@dataclass(frozen=True)
class FetchOutcome:
    statusCode: int
    data: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.statusCode < 400



class RemoteFetcher:
    """
    Single-attempt GET against the remote asset origin.

    - The absolute URL is `remoteDomain + url` (the request path keeps its query).
    - 3xx responses count as success and are not followed.
    - No retries. The whole request, body included, is cut off after `timeoutMs`.
    - With `obfuscate`, the body goes through the codec for success and
      failure alike.
    """
    def __init__(
        self,
        *,
        remoteDomain: str,
        userAgent: str,
        codec: XorCodec,
        timeoutMs: int = 30_000,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.remoteDomain = remoteDomain.rstrip("/")
        self.userAgent = userAgent
        self.codec = codec
        self.timeoutMs = max(1, int(timeoutMs))
        self._client = client
        self._ownsClient = client is None

    def remoteUrl(self, url: str) -> str:
        return self.remoteDomain + url

    def _getClient(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeoutMs / 1_000),
                follow_redirects=False,
            )
        return self._client

    async def fetch(self, url: str, obfuscate: bool) -> FetchOutcome:
        """
        Returns FetchOutcome for status in [200, 400).
        Raises RemoteFetchError carrying the same shape otherwise, including
        transport errors (502) and timeouts (504) with an empty body.
        """
        remoteUrl = self.remoteUrl(url)
        try:
            # Total deadline, body included
            async with asyncio.timeout(self.timeoutMs / 1_000):
                resp = await self._getClient().get(remoteUrl, headers={"User-Agent": self.userAgent})
            statusCode = resp.status_code
            data = resp.content
        except asyncio.CancelledError:
            raise
        except (httpx.TimeoutException, TimeoutError) as err:
            logger.warning("Fetching %s from remote timed out after %d ms: %s", remoteUrl, self.timeoutMs, err)
            statusCode, data = TIMEOUT_STATUS, b""
        except (httpx.HTTPError, httpx.InvalidURL) as err:
            logger.warning("Fetching %s from remote failed: %s", remoteUrl, err)
            statusCode, data = TRANSPORT_ERROR_STATUS, b""

        if obfuscate:
            data = self.codec.transform(data)
        outcome = FetchOutcome(statusCode=statusCode, data=data)

        if not outcome.ok:
            logger.warning("Fetching %s from remote failed, statusCode = %d", remoteUrl, statusCode)
            raise RemoteFetchError(outcome, remoteUrl)

        logger.debug("Fetched %s (%d, %d bytes)", remoteUrl, statusCode, len(data))
        return outcome

    async def aclose(self) -> None:
        if self._client is not None and self._ownsClient:
            await self._client.aclose()
            self._client = None
