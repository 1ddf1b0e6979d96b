"""Wiring of the application services from settings."""
from __future__ import annotations

import httpx

from blogviewer.application.content import ConfigCache, ContentLoader
from blogviewer.application.orchestrator import Orchestrator
from blogviewer.application.sessions import TabSessionStore
from blogviewer.core.settings import Settings
from blogviewer.infrastructure import (
    DocumentSource,
    FileKVStore,
    HttpDocumentSource,
    LocalDocumentSource,
    PersistentKVStore,
)


def build_source(settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> DocumentSource:
    if settings.site_root is not None:
        return LocalDocumentSource(settings.site_root, manifest_path=settings.manifest_path)
    return HttpDocumentSource(
        settings.site_url,
        manifest_path=settings.manifest_path,
        timeout=settings.fetch_timeout,
        transport=transport,
    )


def build_orchestrator(
    settings: Settings,
    *,
    source: DocumentSource | None = None,
    storage: PersistentKVStore | None = None,
) -> Orchestrator:
    """Assemble an isolated orchestrator; nothing here is shared process-wide."""

    source = source or build_source(settings)
    cache = ConfigCache(
        source,
        development=settings.is_development,
        revalidate_after=settings.revalidate_seconds,
    )
    sessions = TabSessionStore(storage or FileKVStore(settings.session_root), key=settings.session_key)
    return Orchestrator(cache, sessions, ContentLoader(cache, source))
