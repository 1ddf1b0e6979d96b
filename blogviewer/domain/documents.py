"""Domain entities describing published documents and the manifest."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Mapping


@dataclass(frozen=True, slots=True)
class DocumentMeta:
    """Manifest entry for a single document."""

    id: str
    name: str
    title: str
    description: str
    category: str
    path: str
    last_modified: str

    def to_record(self) -> dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "path": self.path,
            "lastModified": self.last_modified,
        }


@dataclass(frozen=True, slots=True)
class DocumentContent(DocumentMeta):
    """Document metadata together with its raw text body."""

    body: str = ""

    @classmethod
    def from_meta(cls, meta: DocumentMeta, body: str) -> "DocumentContent":
        return cls(
            id=meta.id,
            name=meta.name,
            title=meta.title,
            description=meta.description,
            category=meta.category,
            path=meta.path,
            last_modified=meta.last_modified,
            body=body,
        )

    def to_record(self) -> dict[str, str]:
        record = DocumentMeta.to_record(self)
        record["content"] = self.body
        return record


@dataclass(frozen=True, slots=True)
class MenuItem:
    id: str
    title: str
    category: str
    description: str

    def to_record(self) -> dict[str, str]:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "description": self.description,
        }


def _frozen(mapping: Mapping | None) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True, slots=True)
class ManifestSnapshot:
    """One generation of the document manifest.

    Snapshots are replaced wholesale, never edited. ``fetched_at`` is ``None``
    only for the empty fallback handed out when loading failed.
    """

    posts: Mapping[str, DocumentMeta] = field(default_factory=dict)
    categories: tuple[str, ...] = ()
    items: tuple[MenuItem, ...] = ()
    grouped_by_category: Mapping[str, tuple[MenuItem, ...]] = field(default_factory=dict)
    last_updated: str | None = None
    fetched_at: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "posts", _frozen(self.posts))
        object.__setattr__(self, "grouped_by_category", _frozen(self.grouped_by_category))

    @classmethod
    def empty(cls) -> "ManifestSnapshot":
        return cls()

    @property
    def is_fallback(self) -> bool:
        return self.fetched_at is None

    def get(self, post_id: str) -> DocumentMeta | None:
        return self.posts.get(post_id)

    def __contains__(self, post_id: object) -> bool:
        return post_id in self.posts


@dataclass(frozen=True, slots=True)
class SidebarItem:
    """Node of the explorer tree derived from the manifest."""

    id: str
    name: str
    type: Literal["file", "folder"]
    children: tuple["SidebarItem", ...] = ()
    is_open: bool = False

    def to_record(self) -> dict[str, object]:
        record: dict[str, object] = {"id": self.id, "name": self.name, "type": self.type}
        if self.type == "folder":
            record["isOpen"] = self.is_open
            record["children"] = [child.to_record() for child in self.children]
        return record


@dataclass(frozen=True, slots=True)
class SearchHit:
    item: SidebarItem
    match_reason: Literal["filename", "title", "content"]
    query: str

    def to_record(self) -> dict[str, object]:
        record = self.item.to_record()
        record.pop("children", None)
        record["matchReason"] = self.match_reason
        record["matchQuery"] = self.query
        return record
