"""Conversion of manifest payloads into immutable snapshots."""
from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from blogviewer.core.schema import ManifestModel, MenuItemModel
from blogviewer.domain import DocumentMeta, ManifestSnapshot, MenuItem


class ManifestFormatError(ValueError):
    """Raised when a manifest payload does not have the expected shape."""


def _menu_item(model: MenuItemModel) -> MenuItem:
    return MenuItem(id=model.id, title=model.title, category=model.category, description=model.description)


def parse_manifest(payload: Any, *, fetched_at: float) -> ManifestSnapshot:
    """Validate ``payload`` and build a :class:`ManifestSnapshot` from it."""

    if not isinstance(payload, dict):
        raise ManifestFormatError("manifest must be a JSON object")
    try:
        model = ManifestModel.model_validate(payload)
    except ValidationError as exc:
        raise ManifestFormatError(f"invalid manifest: {exc.error_count()} error(s)") from exc

    posts: dict[str, DocumentMeta] = {}
    for key, entry in model.posts.items():
        post_id = entry.id or key
        posts[post_id] = DocumentMeta(
            id=post_id,
            name=entry.name,
            title=entry.title,
            description=entry.description,
            category=entry.category,
            path=entry.path,
            last_modified=entry.last_modified,
        )

    items = tuple(_menu_item(item) for item in model.menu.items)
    categories = tuple(model.menu.categories)
    if not categories:
        seen: dict[str, None] = {}
        for meta in posts.values():
            if meta.category:
                seen.setdefault(meta.category, None)
        categories = tuple(seen)

    if model.menu.grouped_items is not None:
        grouped = {
            category: tuple(_menu_item(item) for item in entries)
            for category, entries in model.menu.grouped_items.items()
        }
    else:
        grouped = {
            category: tuple(
                sorted((item for item in items if item.category == category), key=lambda item: item.title)
            )
            for category in categories
        }

    return ManifestSnapshot(
        posts=posts,
        categories=categories,
        items=items,
        grouped_by_category=grouped,
        last_updated=model.last_updated,
        fetched_at=fetched_at,
    )
