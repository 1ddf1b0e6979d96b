"""Domain entities for the open-tab session."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class TabRecord:
    """A document the session keeps open for quick switching."""

    id: str
    name: str


@dataclass(frozen=True, slots=True)
class SessionState:
    """Ordered open tabs plus the active tab pointer.

    Instances are never mutated; every transition returns a new state so the
    previous value stays valid for whoever still holds it.
    """

    tabs: tuple[TabRecord, ...] = ()
    active_tab_id: str | None = None

    @classmethod
    def empty(cls) -> "SessionState":
        return cls()

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------
    def has_tab(self, tab_id: str) -> bool:
        return any(tab.id == tab_id for tab in self.tabs)

    def index_of(self, tab_id: str) -> int | None:
        for index, tab in enumerate(self.tabs):
            if tab.id == tab_id:
                return index
        return None

    def active_tab(self) -> TabRecord | None:
        if self.active_tab_id is None:
            return None
        for tab in self.tabs:
            if tab.id == self.active_tab_id:
                return tab
        return None

    @property
    def tab_ids(self) -> list[str]:
        return [tab.id for tab in self.tabs]

    # ------------------------------------------------------------------
    # transitions
    # ------------------------------------------------------------------
    def with_tab_added(self, record: TabRecord) -> "SessionState":
        """Open ``record`` (appending it when new) and make it active."""

        tabs = self.tabs if self.has_tab(record.id) else (*self.tabs, record)
        return SessionState(tabs=tabs, active_tab_id=record.id)

    def with_tab_removed(self, tab_id: str) -> "SessionState":
        """Close ``tab_id``.

        When the closed tab was active the focus moves to the tab that sat
        before it, or to the new first tab when it was the first one, or to
        nothing when no tabs remain.
        """

        position = self.index_of(tab_id)
        if position is None:
            return self

        tabs = self.tabs[:position] + self.tabs[position + 1 :]
        active = self.active_tab_id
        if active == tab_id:
            if not tabs:
                active = None
            elif position > 0:
                active = tabs[position - 1].id
            else:
                active = tabs[0].id
        if not tabs:
            active = None
        return SessionState(tabs=tabs, active_tab_id=active)

    def with_active_tab(self, tab_id: str | None) -> "SessionState":
        return replace(self, active_tab_id=tab_id)

    # ------------------------------------------------------------------
    # serialisation
    # ------------------------------------------------------------------
    def to_record(self) -> dict[str, Any]:
        return {
            "tabs": [{"id": tab.id, "name": tab.name} for tab in self.tabs],
            "activeTabId": self.active_tab_id,
        }
