from __future__ import annotations

import asyncio
import json
import logging

import httpx

from blogviewer.application import ConfigCache
from blogviewer.infrastructure import HttpDocumentSource, LocalDocumentSource

from helpers import make_manifest


class FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _http_source(handler, *, timeout: float = 10.0) -> HttpDocumentSource:
    return HttpDocumentSource(
        "http://blog.test",
        timeout=timeout,
        transport=httpx.MockTransport(handler),
    )


def _counting_handler(payload: dict, calls: list[str]):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        return httpx.Response(200, json=payload)

    return handler


def test_production_mode_fetches_once(manifest_payload):
    calls: list[str] = []
    clock = FakeClock()
    cache = ConfigCache(_http_source(_counting_handler(manifest_payload, calls)), clock=clock)

    async def scenario():
        first = await cache.get_manifest()
        clock.now += 3600
        second = await cache.get_manifest()
        return first, second

    first, second = asyncio.run(scenario())

    assert calls == ["/data/pageconfig.json"]
    assert first is second
    assert set(first.posts) == {"react-hooks", "typescript-tips", "about"}
    assert first.posts["about"].path == "/data/posts/life/about.md"
    assert not first.is_fallback


def test_development_mode_revalidates_after_window(manifest_payload):
    calls: list[str] = []
    clock = FakeClock()
    cache = ConfigCache(
        _http_source(_counting_handler(manifest_payload, calls)),
        development=True,
        revalidate_after=5.0,
        clock=clock,
    )

    async def scenario():
        first = await cache.get_manifest()
        clock.now += 4.9
        second = await cache.get_manifest()
        clock.now += 0.2
        third = await cache.get_manifest()
        return first, second, third

    first, second, third = asyncio.run(scenario())

    assert len(calls) == 2
    assert first is second
    assert third is not first
    assert third.posts == first.posts


def test_failed_fetch_returns_empty_manifest_and_is_not_cached(manifest_payload, caplog):
    responses = [httpx.Response(503), httpx.Response(200, json=manifest_payload)]

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.pop(0)

    cache = ConfigCache(_http_source(handler))

    async def scenario():
        with caplog.at_level(logging.WARNING):
            failed = await cache.get_manifest()
        assert cache.snapshot is None
        recovered = await cache.get_manifest()
        return failed, recovered

    failed, recovered = asyncio.run(scenario())

    assert failed.is_fallback
    assert dict(failed.posts) == {}
    assert failed.categories == ()
    assert dict(failed.grouped_by_category) == {}
    assert "Failed to load manifest" in caplog.text
    assert len(recovered.posts) == 3
    assert cache.snapshot is recovered


def test_malformed_manifest_bodies_degrade_to_empty():
    bodies = [
        httpx.Response(200, content=b"{not json", headers={"content-type": "application/json"}),
        httpx.Response(200, json=["not", "an", "object"]),
        httpx.Response(200, json={"posts": {"x": {"id": "x"}}}),
        httpx.Response(200, json={"menu": {}}),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return bodies.pop(0)

    cache = ConfigCache(_http_source(handler))

    async def scenario():
        return [await cache.get_manifest() for _ in range(4)]

    results = asyncio.run(scenario())

    assert all(result.is_fallback for result in results)
    assert cache.snapshot is None


def test_concurrent_callers_share_one_fetch(manifest_payload):
    calls: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        await asyncio.sleep(0.01)
        return httpx.Response(200, json=manifest_payload)

    cache = ConfigCache(_http_source(handler))

    async def scenario():
        return await asyncio.gather(*(cache.get_manifest() for _ in range(5)))

    results = asyncio.run(scenario())

    assert len(calls) == 1
    assert all(result is results[0] for result in results)


def test_timeout_counts_as_failure(manifest_payload):
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1)
        return httpx.Response(200, json=manifest_payload)

    cache = ConfigCache(_http_source(handler, timeout=0.05))

    result = asyncio.run(cache.get_manifest())

    assert result.is_fallback
    assert cache.snapshot is None


def test_failed_revalidation_keeps_previous_snapshot(manifest_payload):
    responses = [httpx.Response(200, json=manifest_payload), httpx.Response(500)]

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.pop(0)

    clock = FakeClock()
    cache = ConfigCache(_http_source(handler), development=True, revalidate_after=5.0, clock=clock)

    async def scenario():
        first = await cache.get_manifest()
        clock.now += 10
        second = await cache.get_manifest()
        return first, second

    first, second = asyncio.run(scenario())

    assert second is first


def test_invalidate_forces_refetch(manifest_payload):
    calls: list[str] = []
    cache = ConfigCache(_http_source(_counting_handler(manifest_payload, calls)))

    async def scenario():
        await cache.get_manifest()
        cache.invalidate()
        await cache.get_manifest()

    asyncio.run(scenario())

    assert len(calls) == 2


def test_missing_grouped_items_are_derived():
    payload = make_manifest()
    del payload["menu"]["groupedItems"]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    snapshot = asyncio.run(ConfigCache(_http_source(handler)).get_manifest())

    assert [item.id for item in snapshot.grouped_by_category["Tech"]] == ["react-hooks", "typescript-tips"]
    assert [item.id for item in snapshot.grouped_by_category["Life"]] == ["about"]


def test_local_source_reads_public_directory(tmp_path, manifest_payload):
    data_dir = tmp_path / "data"
    (data_dir / "posts" / "life").mkdir(parents=True)
    (data_dir / "pageconfig.json").write_text(json.dumps(manifest_payload), encoding="utf-8")
    (data_dir / "posts" / "life" / "about.md").write_text("# About Me\n", encoding="utf-8")
    source = LocalDocumentSource(tmp_path)

    async def scenario():
        snapshot = await ConfigCache(source).get_manifest()
        body = await source.fetch_text(snapshot.posts["about"].path)
        return snapshot, body

    snapshot, body = asyncio.run(scenario())

    assert len(snapshot.posts) == 3
    assert body == "# About Me\n"
