from __future__ import annotations

import asyncio
import copy
import sys
from pathlib import Path


sys.path.append(str(Path(__file__).resolve().parents[1]))

from blogviewer.infrastructure import SourceError


POSTS = [
    ("react-hooks", "Tech", "React Hooks Guide", "Hooks let function components hold state.", "2025-03-01T10:00:00.000Z"),
    ("typescript-tips", "Tech", "TypeScript Tips", "Assertions, unions and generics.", "2025-03-05T10:00:00.000Z"),
    ("about", "Life", "About Me", "A full-stack developer who writes about the web.", "2025-01-10T10:00:00.000Z"),
]


def post_path(post_id: str, category: str) -> str:
    return f"/data/posts/{category.lower()}/{post_id}.md"


def make_manifest(posts=POSTS) -> dict:
    payload_posts: dict[str, dict] = {}
    items: list[dict] = []
    for post_id, category, title, description, modified in posts:
        payload_posts[post_id] = {
            "id": post_id,
            "name": f"{post_id}.md",
            "title": title,
            "description": description,
            "category": category,
            "path": post_path(post_id, category),
            "lastModified": modified,
        }
        items.append({"id": post_id, "title": title, "category": category, "description": description})
    categories = sorted({category for _, category, *_ in posts})
    grouped = {
        category: sorted((item for item in items if item["category"] == category), key=lambda item: item["title"])
        for category in categories
    }
    return {
        "posts": payload_posts,
        "menu": {"categories": categories, "items": items, "groupedItems": grouped},
        "lastUpdated": "2025-03-06T00:00:00.000Z",
    }


def make_bodies(posts=POSTS) -> dict[str, str]:
    return {post_path(post_id, category): f"# {title}\n\nBody of {post_id}." for post_id, category, title, *_ in posts}


class FakeSource:
    """In-process document source whose fetches can be held open by tests."""

    def __init__(self, manifest: dict | None = None, bodies: dict[str, str] | None = None) -> None:
        self.manifest = manifest if manifest is not None else make_manifest()
        self.bodies = dict(bodies if bodies is not None else make_bodies())
        self.manifest_error: Exception | None = None
        self.manifest_calls = 0
        self.text_calls: list[str] = []
        self._gates: dict[str, asyncio.Event] = {}
        self._started: dict[str, asyncio.Event] = {}

    def hold(self, path: str) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[path] = gate
        return gate

    async def started(self, path: str) -> None:
        await self._started.setdefault(path, asyncio.Event()).wait()

    async def fetch_manifest(self):
        self.manifest_calls += 1
        await asyncio.sleep(0)
        if self.manifest_error is not None:
            raise self.manifest_error
        return copy.deepcopy(self.manifest)

    async def fetch_text(self, path: str) -> str:
        self.text_calls.append(path)
        self._started.setdefault(path, asyncio.Event()).set()
        gate = self._gates.get(path)
        if gate is not None:
            await gate.wait()
        if path not in self.bodies:
            raise SourceError(f"{path} returned HTTP 404")
        return self.bodies[path]

    async def aclose(self) -> None:
        return None
