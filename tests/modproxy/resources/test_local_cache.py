import pytest

from modproxy.core.errors import CacheWriteError, ResourceNotFoundError
from modproxy.resources.cache import LocalCache, readLocalFile


@pytest.mark.asyncio
async def test_readLocalFile_missing_raises_not_found(tmp_path):
    with pytest.raises(ResourceNotFoundError):
        await readLocalFile(tmp_path / "nope.bin")


@pytest.mark.asyncio
async def test_readLocalFile_directory_counts_as_not_found(tmp_path):
    with pytest.raises(ResourceNotFoundError):
        await readLocalFile(tmp_path)


@pytest.mark.asyncio
async def test_write_creates_parents_and_leaves_no_temp_files(tmp_path):
    cache = LocalCache(tmp_path / "cache")
    target = cache.pathFor("/kcs/sound/a.mp3?v=1")

    await cache.write(target, b"\x00\x01")

    assert target == tmp_path / "cache" / "kcs" / "sound" / "a.mp3"
    assert target.read_bytes() == b"\x00\x01"
    assert [p.name for p in target.parent.iterdir()] == ["a.mp3"]


@pytest.mark.asyncio
async def test_write_failure_raises_cache_write_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_bytes(b"")
    cache = LocalCache(blocker)

    with pytest.raises(CacheWriteError):
        await cache.write(cache.pathFor("/a/b.bin"), b"x")


@pytest.mark.asyncio
async def test_scheduleWrite_runs_in_background_and_drains(tmp_path):
    cache = LocalCache(tmp_path)
    target = cache.pathFor("/a/b.bin")

    cache.scheduleWrite(target, b"one")
    cache.scheduleWrite(cache.pathFor("/a/c.bin"), b"two")
    await cache.drain()

    assert cache.pendingWrites == 0
    assert target.read_bytes() == b"one"
    assert await cache.read(cache.pathFor("/a/c.bin")) == b"two"


@pytest.mark.asyncio
async def test_concurrent_writes_of_same_path_end_with_full_content(tmp_path):
    cache = LocalCache(tmp_path)
    target = cache.pathFor("/same.bin")
    payload = b"z" * 100_000

    for _ in range(5):
        cache.scheduleWrite(target, payload)
    await cache.drain()

    assert target.read_bytes() == payload
