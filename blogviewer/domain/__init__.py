"""Domain layer definitions."""

from .documents import DocumentContent, DocumentMeta, ManifestSnapshot, MenuItem, SearchHit, SidebarItem
from .sessions import SessionState, TabRecord

__all__ = [
    "DocumentContent",
    "DocumentMeta",
    "ManifestSnapshot",
    "MenuItem",
    "SearchHit",
    "SessionState",
    "SidebarItem",
    "TabRecord",
]
