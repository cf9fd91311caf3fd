import asyncio

import httpx
import pytest

from modproxy.core.errors import RemoteFetchError
from modproxy.http.client import FetchOutcome, RemoteFetcher
from modproxy.resources.codec import XorCodec

DOMAIN = "https://assets.example.com"
UA = "modproxy-test/1.0"


def _makeFetcher(handler, *, key: int = 0x62) -> RemoteFetcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RemoteFetcher(remoteDomain=DOMAIN, userAgent=UA, codec=XorCodec(key), client=client)


def test_fetchOutcome_ok_range():
    assert FetchOutcome(200, b"").ok
    assert FetchOutcome(399, b"").ok
    assert not FetchOutcome(199, b"").ok
    assert not FetchOutcome(400, b"").ok


@pytest.mark.asyncio
async def test_fetch_prefixes_domain_and_sends_user_agent():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"\x89PNG")

    fetcher = _makeFetcher(handler)
    outcome = await fetcher.fetch("/kcs/img/a.png?v=2", obfuscate=False)

    assert outcome == FetchOutcome(statusCode=200, data=b"\x89PNG")
    assert len(seen) == 1
    assert str(seen[0].url) == f"{DOMAIN}/kcs/img/a.png?v=2"
    assert seen[0].headers["User-Agent"] == UA


@pytest.mark.asyncio
async def test_fetch_treats_redirect_as_success_without_following():
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(302, headers={"Location": f"{DOMAIN}/elsewhere"}, content=b"moved")

    outcome = await _makeFetcher(handler).fetch("/old", obfuscate=False)

    assert calls == 1
    assert outcome.statusCode == 302
    assert outcome.data == b"moved"


@pytest.mark.asyncio
async def test_fetch_raises_with_status_and_body_on_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, content=b"no such file")

    with pytest.raises(RemoteFetchError) as excInfo:
        await _makeFetcher(handler).fetch("/missing.png", obfuscate=False)

    assert excInfo.value.statusCode == 404
    assert excInfo.value.data == b"no such file"
    assert excInfo.value.url == f"{DOMAIN}/missing.png"


@pytest.mark.asyncio
async def test_fetch_is_single_attempt():
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(503, content=b"busy")

    with pytest.raises(RemoteFetchError):
        await _makeFetcher(handler).fetch("/a", obfuscate=False)
    assert calls == 1


@pytest.mark.asyncio
async def test_fetch_applies_codec_to_success_and_failure_bodies():
    codec = XorCodec(0x62)
    scrambled = codec.transform(b"secret")

    def okHandler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=scrambled)

    def failHandler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, content=scrambled)

    outcome = await _makeFetcher(okHandler).fetch("/x", obfuscate=True)
    assert outcome.data == b"secret"

    with pytest.raises(RemoteFetchError) as excInfo:
        await _makeFetcher(failHandler).fetch("/x", obfuscate=True)
    assert excInfo.value.data == b"secret"


@pytest.mark.asyncio
async def test_fetch_maps_timeout_to_504(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    with pytest.raises(RemoteFetchError) as excInfo:
        await _makeFetcher(handler).fetch("/slow", obfuscate=False)
    assert excInfo.value.statusCode == 504
    assert excInfo.value.data == b""
    assert "timed out" in caplog.text


@pytest.mark.asyncio
async def test_fetch_enforces_total_deadline_on_stalled_origin():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, content=b"late")

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    fetcher = RemoteFetcher(remoteDomain=DOMAIN, userAgent=UA, codec=XorCodec(1), timeoutMs=50, client=client)

    with pytest.raises(RemoteFetchError) as excInfo:
        await fetcher.fetch("/kcs/stalled.png", obfuscate=False)
    assert excInfo.value.statusCode == 504
    assert excInfo.value.data == b""


@pytest.mark.asyncio
async def test_fetch_maps_transport_error_to_502():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(RemoteFetchError) as excInfo:
        await _makeFetcher(handler).fetch("/down", obfuscate=False)
    assert excInfo.value.statusCode == 502


@pytest.mark.asyncio
async def test_aclose_leaves_injected_client_open():
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    fetcher = RemoteFetcher(remoteDomain=DOMAIN, userAgent=UA, codec=XorCodec(1), client=client)

    await fetcher.aclose()

    assert not client.is_closed
    await client.aclose()


@pytest.mark.asyncio
async def test_aclose_closes_own_client():
    fetcher = RemoteFetcher(remoteDomain=DOMAIN + "/", userAgent=UA, codec=XorCodec(1))
    assert fetcher.remoteUrl("/a") == f"{DOMAIN}/a"
    client = fetcher._getClient()

    await fetcher.aclose()

    assert client.is_closed
