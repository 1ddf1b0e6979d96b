"""Read-only views over a manifest snapshot used by the explorer panes."""
from __future__ import annotations

from blogviewer.domain import DocumentMeta, ManifestSnapshot, SearchHit, SidebarItem

ROOT_FOLDER_ID = "posts"


def sidebar_tree(snapshot: ManifestSnapshot) -> list[SidebarItem]:
    """Build the explorer tree: one root folder, one folder per category."""

    folders: list[SidebarItem] = []
    for category in snapshot.categories:
        files = tuple(
            SidebarItem(
                id=item.id,
                name=meta.name if (meta := snapshot.get(item.id)) is not None else f"{item.id}.md",
                type="file",
            )
            for item in snapshot.grouped_by_category.get(category, ())
        )
        folders.append(
            SidebarItem(id=f"category-{category.lower()}", name=category, type="folder", children=files)
        )
    return [SidebarItem(id=ROOT_FOLDER_ID, name=ROOT_FOLDER_ID, type="folder", children=tuple(folders), is_open=True)]


def search(snapshot: ManifestSnapshot, query: str) -> list[SearchHit]:
    """Case-insensitive search over names, titles and descriptions.

    Every node of the explorer tree is matched by name first; files that do
    not match by name are then matched against their title and finally their
    description.
    """

    needle = query.strip().lower()
    if not needle:
        return []

    hits: list[SearchHit] = []

    def walk(item: SidebarItem) -> None:
        if needle in item.name.lower():
            hits.append(SearchHit(item=item, match_reason="filename", query=query))
        elif item.type == "file":
            meta = snapshot.get(item.id)
            if meta is not None:
                if meta.title and needle in meta.title.lower():
                    hits.append(SearchHit(item=item, match_reason="title", query=query))
                elif meta.description and needle in meta.description.lower():
                    hits.append(SearchHit(item=item, match_reason="content", query=query))
        for child in item.children:
            walk(child)

    for root in sidebar_tree(snapshot):
        walk(root)
    return hits


def recent_posts(snapshot: ManifestSnapshot, limit: int = 6) -> list[DocumentMeta]:
    ordered = sorted(snapshot.posts.values(), key=lambda meta: meta.last_modified, reverse=True)
    return ordered[: max(limit, 0)]


def default_post_ids(snapshot: ManifestSnapshot, count: int = 2) -> list[str]:
    return list(snapshot.posts)[: max(count, 0)]


def menu(snapshot: ManifestSnapshot) -> dict[str, object]:
    return {
        "categories": list(snapshot.categories),
        "items": [item.to_record() for item in snapshot.items],
        "groupedItems": {
            category: [item.to_record() for item in items]
            for category, items in snapshot.grouped_by_category.items()
        },
        "lastUpdated": snapshot.last_updated,
    }
