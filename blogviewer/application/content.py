"""Manifest caching and document content loading."""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable

from blogviewer.core.manifest import ManifestFormatError, parse_manifest
from blogviewer.core.settings import DEFAULT_REVALIDATE_SECONDS
from blogviewer.domain import DocumentContent, DocumentMeta, ManifestSnapshot
from blogviewer.infrastructure import DocumentSource, SourceError

logger = logging.getLogger(__name__)


class ConfigCache:
    """Single-slot cache for the latest manifest snapshot.

    In production the first successful snapshot is kept for the lifetime of
    the process. In development a snapshot older than ``revalidate_after``
    seconds is fetched again on the next access. Concurrent callers share one
    in-flight fetch.
    """

    def __init__(
        self,
        source: DocumentSource,
        *,
        development: bool = False,
        revalidate_after: float = DEFAULT_REVALIDATE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = source
        self._development = development
        self._revalidate_after = revalidate_after
        self._clock = clock
        self._snapshot: ManifestSnapshot | None = None
        self._inflight: asyncio.Task[ManifestSnapshot] | None = None

    @property
    def snapshot(self) -> ManifestSnapshot | None:
        return self._snapshot

    def is_fresh(self, snapshot: ManifestSnapshot) -> bool:
        if not self._development or snapshot.fetched_at is None:
            return True
        return self._clock() - snapshot.fetched_at < self._revalidate_after

    async def get_manifest(self) -> ManifestSnapshot:
        snapshot = self._snapshot
        if snapshot is not None and self.is_fresh(snapshot):
            return snapshot

        task = self._inflight
        if task is None:
            task = asyncio.get_running_loop().create_task(self._refresh())
            self._inflight = task
            task.add_done_callback(self._release)
        return await asyncio.shield(task)

    def invalidate(self) -> None:
        self._snapshot = None

    def _release(self, task: asyncio.Task[ManifestSnapshot]) -> None:
        if self._inflight is task:
            self._inflight = None

    async def _refresh(self) -> ManifestSnapshot:
        try:
            payload = await self._source.fetch_manifest()
            snapshot = parse_manifest(payload, fetched_at=self._clock())
        except (SourceError, ManifestFormatError) as exc:
            logger.warning("Failed to load manifest: %s", exc)
            if self._snapshot is not None:
                return self._snapshot
            return ManifestSnapshot.empty()

        self._snapshot = snapshot
        logger.debug("Loaded manifest with %d post(s)", len(snapshot.posts))
        return snapshot


@dataclass(frozen=True, slots=True)
class LoadTicket:
    """Identifies one content request and the generation it was issued in."""

    post_id: str
    generation: int


@dataclass(frozen=True, slots=True)
class LoadResult:
    ticket: LoadTicket
    content: DocumentContent | None
    stale: bool = False


class ContentLoader:
    """Resolves document metadata and bodies.

    Callers obtain a :class:`LoadTicket` for every selection change; a result
    whose ticket is no longer the latest one is flagged ``stale`` and must not
    replace what is displayed.
    """

    def __init__(self, cache: ConfigCache, source: DocumentSource) -> None:
        self._cache = cache
        self._source = source
        self._generation = 0
        self._current: LoadTicket | None = None

    @property
    def current(self) -> LoadTicket | None:
        return self._current

    def issue(self, post_id: str) -> LoadTicket:
        self._generation += 1
        self._current = LoadTicket(post_id=post_id, generation=self._generation)
        return self._current

    def invalidate(self) -> None:
        """Retire every outstanding ticket without issuing a new one."""

        self._generation += 1
        self._current = None

    def is_current(self, ticket: LoadTicket) -> bool:
        return self._current is not None and self._current.generation == ticket.generation

    async def get_post_meta(self, post_id: str) -> DocumentMeta | None:
        manifest = await self._cache.get_manifest()
        return manifest.get(post_id)

    async def get_post_with_content(self, post_id: str) -> DocumentContent | None:
        meta = await self.get_post_meta(post_id)
        if meta is None:
            return None
        try:
            body = await self._source.fetch_text(meta.path)
        except SourceError as exc:
            logger.warning("Failed to load content for %s: %s", post_id, exc)
            return None
        return DocumentContent.from_meta(meta, body)

    async def load(self, ticket: LoadTicket) -> LoadResult:
        content = await self.get_post_with_content(ticket.post_id)
        if not self.is_current(ticket):
            logger.debug("Discarding stale content for %s", ticket.post_id)
            return LoadResult(ticket=ticket, content=None, stale=True)
        return LoadResult(ticket=ticket, content=content)
