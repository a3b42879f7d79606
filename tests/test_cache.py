import asyncio

import pytest

from pagesmith.cache import PageCache, hash_content
from pagesmith.content import Page


def test_hash_content_is_stable_across_str_and_bytes() -> None:
    assert hash_content("abc") == hash_content(b"abc")
    assert hash_content("abc") != hash_content("abd")


def test_store_keeps_first_page_for_digest() -> None:
    cache = PageCache()
    first = Page(file_path="a.md")
    second = Page(file_path="b.md")

    assert cache.store("digest", first) is first
    assert cache.store("digest", second) is first
    assert cache.get("digest") is first
    assert len(cache) == 1


async def test_concurrent_requests_build_once() -> None:
    cache = PageCache()
    calls = 0

    async def factory() -> Page:
        nonlocal calls
        calls += 1
        await asyncio.sleep(0.01)
        return Page(file_path="same.md")

    results = await asyncio.gather(*(cache.get_or_build("d", factory) for _ in range(4)))

    assert calls == 1
    pages = {id(page) for page, _ in results}
    assert len(pages) == 1
    assert [hit for _, hit in results].count(False) == 1
    assert "d" in cache


async def test_skipped_result_is_not_cached() -> None:
    cache = PageCache()

    async def factory() -> None:
        return None

    page, hit = await cache.get_or_build("d", factory)

    assert page is None
    assert hit is False
    assert "d" not in cache


async def test_failures_propagate_to_waiters() -> None:
    cache = PageCache()

    async def factory() -> Page:
        await asyncio.sleep(0.01)
        raise RuntimeError("boom")

    results = await asyncio.gather(
        cache.get_or_build("d", factory),
        cache.get_or_build("d", factory),
        return_exceptions=True,
    )

    assert all(isinstance(result, RuntimeError) for result in results)
    assert "d" not in cache

    with pytest.raises(RuntimeError):
        await cache.get_or_build("d", factory)
