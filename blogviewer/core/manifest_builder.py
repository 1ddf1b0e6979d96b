"""Build the document manifest from a tree of category folders."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

DESCRIPTION_LINES = 3
DESCRIPTION_LIMIT = 200


def extract_title(content: str) -> str:
    for line in content.split("\n"):
        if line.startswith("# "):
            return line[2:].strip()
    return "Untitled"


def extract_description(content: str) -> str:
    """Join the first few body lines that precede any list or subheading."""

    collected: list[str] = []
    for line in content.split("\n"):
        if line.startswith("# ") or line.startswith("## "):
            continue
        if not line.strip():
            continue
        if line.startswith("- ") or line.startswith("##"):
            break
        collected.append(line)
        if len(collected) >= DESCRIPTION_LINES:
            break
    return " ".join(collected)[:DESCRIPTION_LIMIT] + "..."


def _category_title(folder: str) -> str:
    return folder[:1].upper() + folder[1:]


def _isoformat(timestamp: float) -> str:
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_manifest(posts_dir: Path, *, url_prefix: str = "/data/posts") -> dict[str, Any]:
    """Scan ``posts_dir/<category>/*.md`` and return the manifest payload."""

    posts_dir = Path(posts_dir)
    posts: dict[str, dict[str, str]] = {}
    items: list[dict[str, str]] = []

    folders = sorted(entry.name for entry in posts_dir.iterdir() if entry.is_dir())
    for folder in folders:
        category = _category_title(folder)
        for path in sorted((posts_dir / folder).glob("*.md")):
            content = path.read_text(encoding="utf-8")
            post_id = path.stem
            title = extract_title(content)
            description = extract_description(content)
            posts[post_id] = {
                "id": post_id,
                "name": path.name,
                "title": title,
                "description": description,
                "category": category,
                "path": f"{url_prefix.rstrip('/')}/{folder}/{path.name}",
                "lastModified": _isoformat(path.stat().st_mtime),
            }
            items.append({"id": post_id, "title": title, "category": category, "description": description})

    categories = [_category_title(folder) for folder in folders]
    grouped = {
        category: sorted((item for item in items if item["category"] == category), key=lambda item: item["title"])
        for category in categories
    }
    return {
        "posts": posts,
        "menu": {"categories": categories, "items": items, "groupedItems": grouped},
        "lastUpdated": _isoformat(datetime.now(timezone.utc).timestamp()),
    }
