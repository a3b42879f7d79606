"""Content-addressed store of built pages."""

from __future__ import annotations

import asyncio
import hashlib
from typing import Awaitable, Callable

from .content import Page

PageFactory = Callable[[], Awaitable["Page | None"]]


def hash_content(raw: bytes | str) -> str:
    """Digest used as the cache key for a file's raw contents."""
    data = raw.encode("utf-8") if isinstance(raw, str) else raw
    return hashlib.sha256(data).hexdigest()


class PageCache:
    """Map content digests to completed pages.

    Entries are never invalidated. Two files with byte-identical content
    resolve to the same page object. Builds for a digest that is already
    in flight wait for that build instead of starting a second one, which
    keeps stores insert-if-absent when many pages run concurrently on the
    event loop.
    """

    def __init__(self) -> None:
        self._pages: dict[str, Page] = {}
        self._pending: dict[str, asyncio.Future[Page | None]] = {}

    def __len__(self) -> int:
        return len(self._pages)

    def __contains__(self, digest: object) -> bool:
        return digest in self._pages

    def get(self, digest: str) -> Page | None:
        return self._pages.get(digest)

    def store(self, digest: str, page: Page) -> Page:
        """Store ``page`` unless the digest is already cached; return the cached page."""
        return self._pages.setdefault(digest, page)

    async def get_or_build(self, digest: str, factory: PageFactory) -> tuple[Page | None, bool]:
        """Return ``(page, cache_hit)`` for ``digest``, building it at most once at a time.

        ``factory`` is awaited only when no page is cached and no build for the
        digest is running. Its ``None`` result (a skipped page) is shared with
        concurrent waiters but not cached.
        """
        cached = self._pages.get(digest)
        if cached is not None:
            return cached, True

        pending = self._pending.get(digest)
        if pending is not None:
            return await asyncio.shield(pending), True

        future: asyncio.Future[Page | None] = asyncio.get_running_loop().create_future()
        self._pending[digest] = future
        try:
            page = await factory()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            # Waiters re-raise it; retrieve here so an unwatched future stays quiet.
            future.exception()
            raise
        else:
            future.set_result(page)
            if page is not None:
                page = self.store(digest, page)
            return page, False
        finally:
            self._pending.pop(digest, None)
