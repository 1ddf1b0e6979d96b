from __future__ import annotations

import asyncio
import json
import logging

import httpx

from blogviewer.application import ConfigCache, ContentLoader
from blogviewer.infrastructure import HttpDocumentSource, LocalDocumentSource

from helpers import FakeSource, make_manifest


def _loader(source: FakeSource) -> ContentLoader:
    return ContentLoader(ConfigCache(source), source)


def test_get_post_meta_uses_manifest(fake_source):
    loader = _loader(fake_source)

    async def scenario():
        return await loader.get_post_meta("about"), await loader.get_post_meta("missing")

    meta, missing = asyncio.run(scenario())

    assert meta is not None
    assert meta.title == "About Me"
    assert meta.category == "Life"
    assert missing is None
    assert fake_source.manifest_calls == 1


def test_get_post_with_content_attaches_body(fake_source):
    content = asyncio.run(_loader(fake_source).get_post_with_content("react-hooks"))

    assert content is not None
    assert content.id == "react-hooks"
    assert content.name == "react-hooks.md"
    assert content.body == "# React Hooks Guide\n\nBody of react-hooks."
    assert content.to_record()["content"] == content.body
    assert content.to_record()["lastModified"] == "2025-03-01T10:00:00.000Z"


def test_unknown_id_returns_none_without_fetching_body(fake_source):
    content = asyncio.run(_loader(fake_source).get_post_with_content("nope"))

    assert content is None
    assert fake_source.text_calls == []


def test_body_failure_is_logged_and_returns_none(fake_source, caplog):
    fake_source.bodies.pop("/data/posts/tech/typescript-tips.md")

    with caplog.at_level(logging.WARNING):
        content = asyncio.run(_loader(fake_source).get_post_with_content("typescript-tips"))

    assert content is None
    assert "Failed to load content for typescript-tips" in caplog.text


def test_tickets_are_monotonic_and_only_latest_is_current(fake_source):
    loader = _loader(fake_source)
    first = loader.issue("about")
    second = loader.issue("react-hooks")

    assert second.generation > first.generation
    assert not loader.is_current(first)
    assert loader.is_current(second)

    loader.invalidate()
    assert loader.current is None
    assert not loader.is_current(second)


def test_load_marks_superseded_ticket_stale(fake_source):
    loader = _loader(fake_source)

    async def scenario():
        gate = fake_source.hold("/data/posts/life/about.md")
        slow = asyncio.create_task(loader.load(loader.issue("about")))
        await fake_source.started("/data/posts/life/about.md")
        fast = await loader.load(loader.issue("react-hooks"))
        gate.set()
        return await slow, fast

    slow, fast = asyncio.run(scenario())

    assert slow.stale
    assert slow.content is None
    assert not fast.stale
    assert fast.content is not None and fast.content.id == "react-hooks"


def test_malformed_http_path_is_reported_as_missing_content(caplog):
    payload = make_manifest()
    payload["posts"]["about"]["path"] = "/data/posts/life/ab\x01out.md"

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/data/pageconfig.json":
            return httpx.Response(200, json=payload)
        return httpx.Response(200, text="body")

    source = HttpDocumentSource("http://blog.test", transport=httpx.MockTransport(handler))
    loader = ContentLoader(ConfigCache(source), source)

    with caplog.at_level(logging.WARNING):
        content = asyncio.run(loader.get_post_with_content("about"))

    assert content is None
    assert "Failed to load content for about" in caplog.text


def test_local_path_with_nul_byte_is_reported_as_missing_content(tmp_path):
    payload = make_manifest()
    payload["posts"]["about"]["path"] = "/data/posts/life/ab\x00out.md"
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "pageconfig.json").write_text(json.dumps(payload), encoding="utf-8")
    source = LocalDocumentSource(tmp_path)

    content = asyncio.run(ContentLoader(ConfigCache(source), source).get_post_with_content("about"))

    assert content is None
