"""Durable store for the open-tab session."""
from __future__ import annotations

import json
import logging

from blogviewer.core.settings import DEFAULT_SESSION_KEY
from blogviewer.core.validation import InvalidSession, validate_session_record
from blogviewer.domain import SessionState, TabRecord
from blogviewer.infrastructure import PersistentKVStore, StorageError

logger = logging.getLogger(__name__)


class TabSessionStore:
    """Owns the ordered open tabs and the active pointer.

    Every mutation installs the new in-memory state first and then writes it
    through to the key/value store. Write failures are logged and remembered
    in :attr:`last_persist_error`, but the in-memory state remains the source
    of truth for the running process.
    """

    def __init__(self, storage: PersistentKVStore, *, key: str = DEFAULT_SESSION_KEY) -> None:
        self._storage = storage
        self._key = key
        self._state = SessionState.empty()
        self.last_persist_error: StorageError | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def tabs(self) -> tuple[TabRecord, ...]:
        return self._state.tabs

    @property
    def active_tab_id(self) -> str | None:
        return self._state.active_tab_id

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    def load(self) -> SessionState:
        try:
            raw = self._storage.read(self._key)
        except StorageError as exc:
            logger.warning("Failed to read persisted tabs: %s", exc)
            raw = None

        result = validate_session_record(raw)
        if isinstance(result, InvalidSession):
            if raw is not None:
                logger.warning("Ignoring persisted tabs: %s", result.reason)
            self._state = SessionState.empty()
        else:
            self._state = result.state
        return self._state

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------
    def add_tab(self, record: TabRecord) -> SessionState:
        return self._commit(self._state.with_tab_added(record))

    def remove_tab(self, tab_id: str) -> SessionState:
        return self._commit(self._state.with_tab_removed(tab_id))

    def set_active_tab(self, tab_id: str) -> SessionState:
        return self._commit(self._state.with_active_tab(tab_id))

    def clear(self) -> SessionState:
        return self._commit(SessionState.empty())

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------
    def has_tab(self, tab_id: str) -> bool:
        return self._state.has_tab(tab_id)

    def active_tab(self) -> TabRecord | None:
        return self._state.active_tab()

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------
    def _commit(self, state: SessionState) -> SessionState:
        self._state = state
        self._persist(state)
        return state

    def _persist(self, state: SessionState) -> None:
        payload = json.dumps(state.to_record(), ensure_ascii=False).encode("utf-8")
        try:
            self._storage.write(self._key, payload)
        except StorageError as exc:
            logger.warning("Failed to save persisted tabs: %s", exc)
            self.last_persist_error = exc
        else:
            self.last_persist_error = None
