"""Application services."""

from .content import ConfigCache, ContentLoader, LoadResult, LoadTicket
from .factory import build_orchestrator, build_source
from .orchestrator import Orchestrator, Phase, ViewState
from .sessions import TabSessionStore

__all__ = [
    "ConfigCache",
    "ContentLoader",
    "LoadResult",
    "LoadTicket",
    "Orchestrator",
    "Phase",
    "TabSessionStore",
    "ViewState",
    "build_orchestrator",
    "build_source",
]
