"""Page-level controller tying the session, manifest and content together."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from blogviewer.application.content import ConfigCache, ContentLoader
from blogviewer.application.sessions import TabSessionStore
from blogviewer.domain import DocumentContent, ManifestSnapshot, SessionState, TabRecord

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    INITIALIZING = "initializing"
    READY = "ready"
    LOADING = "loading"
    IDLE = "idle"


@dataclass(frozen=True, slots=True)
class ViewState:
    """What the shell should display right now."""

    phase: Phase
    session: SessionState
    content: DocumentContent | None = None

    @property
    def active_tab_id(self) -> str | None:
        return self.session.active_tab_id

    def to_record(self) -> dict[str, object]:
        record: dict[str, object] = dict(self.session.to_record())
        record["phase"] = self.phase.value
        record["loading"] = self.phase is Phase.LOADING
        record["content"] = self.content.to_record() if self.content is not None else None
        return record


Listener = Callable[[ViewState], None]


class Orchestrator:
    """Drives content loading from session changes.

    Phases move ``INITIALIZING -> READY`` once, then alternate between
    ``LOADING`` and ``IDLE``. While loading no content is exposed, and a load
    only lands if its ticket is still the latest one.
    """

    def __init__(self, cache: ConfigCache, sessions: TabSessionStore, loader: ContentLoader) -> None:
        self._cache = cache
        self._sessions = sessions
        self._loader = loader
        self._phase = Phase.INITIALIZING
        self._content: DocumentContent | None = None
        self._listeners: list[Listener] = []

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def content(self) -> DocumentContent | None:
        return self._content

    @property
    def cache(self) -> ConfigCache:
        return self._cache

    @property
    def sessions(self) -> TabSessionStore:
        return self._sessions

    @property
    def loader(self) -> ContentLoader:
        return self._loader

    def view(self) -> ViewState:
        return ViewState(phase=self._phase, session=self._sessions.state, content=self._content)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    async def start(self) -> ViewState:
        self._phase = Phase.INITIALIZING
        self._notify()
        manifest, _ = await asyncio.gather(
            self._cache.get_manifest(),
            asyncio.to_thread(self._sessions.load),
        )
        self.reconcile(manifest)
        self._phase = Phase.READY
        self._notify()
        return await self._sync_content()

    def reconcile(self, manifest: ManifestSnapshot) -> list[str]:
        """Close tabs whose documents are missing from ``manifest``.

        A fallback manifest (the fetch failed) carries no information about
        which documents exist, so the session is left untouched.
        """

        if manifest.is_fallback:
            logger.info("Manifest unavailable, keeping %d persisted tab(s)", len(self._sessions.tabs))
            return []
        missing = [tab.id for tab in self._sessions.tabs if tab.id not in manifest]
        for tab_id in missing:
            self._sessions.remove_tab(tab_id)
        if missing:
            logger.info("Closed %d tab(s) missing from manifest: %s", len(missing), ", ".join(missing))
        return missing

    async def refresh_manifest(self) -> ViewState:
        self._cache.invalidate()
        manifest = await self._cache.get_manifest()
        self.reconcile(manifest)
        return await self._sync_content()

    # ------------------------------------------------------------------
    # user actions
    # ------------------------------------------------------------------
    async def open_document(self, post_id: str) -> ViewState:
        meta = await self._loader.get_post_meta(post_id)
        if meta is None:
            logger.info("Ignoring request to open unknown document %s", post_id)
            return self.view()
        self._sessions.add_tab(TabRecord(id=meta.id, name=meta.name))
        return await self._sync_content()

    async def select_tab(self, tab_id: str) -> ViewState:
        self._sessions.set_active_tab(tab_id)
        return await self._sync_content()

    async def close_tab(self, tab_id: str) -> ViewState:
        self._sessions.remove_tab(tab_id)
        return await self._sync_content()

    async def close_all(self) -> ViewState:
        self._sessions.clear()
        return await self._sync_content()

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------
    def _is_settled_on(self, active_id: str) -> bool:
        if self._content is not None and self._content.id == active_id:
            return True
        current = self._loader.current
        return self._phase is Phase.LOADING and current is not None and current.post_id == active_id

    async def _sync_content(self) -> ViewState:
        # An active id without a matching open tab displays nothing.
        active = self._sessions.active_tab()
        active_id = active.id if active is not None else None
        if active_id is None:
            self._loader.invalidate()
            self._content = None
            self._phase = Phase.IDLE
            self._notify()
            return self.view()

        if self._is_settled_on(active_id):
            self._notify()
            return self.view()

        ticket = self._loader.issue(active_id)
        self._content = None
        self._phase = Phase.LOADING
        self._notify()

        try:
            result = await self._loader.load(ticket)
        except Exception:
            logger.exception("Loading %s failed", active_id)
            if self._loader.is_current(ticket):
                self._loader.invalidate()
                self._content = None
                self._phase = Phase.IDLE
                self._notify()
            return self.view()
        if result.stale:
            return self.view()

        self._content = result.content
        self._phase = Phase.IDLE
        self._notify()
        return self.view()

    def _notify(self) -> None:
        state = self.view()
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("View listener failed")
