"""Remote sources for the manifest and document bodies."""
from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Protocol

import httpx


class SourceError(RuntimeError):
    """Raised when a manifest or document body cannot be fetched."""


class DocumentSource(Protocol):
    """Contract for anything able to serve the manifest and document bodies."""

    async def fetch_manifest(self) -> Any:
        """Return the decoded manifest JSON."""

    async def fetch_text(self, path: str) -> str:
        """Return the raw text stored at ``path``."""

    async def aclose(self) -> None: ...


class HttpDocumentSource:
    """Fetches the manifest and document bodies from the published site."""

    def __init__(
        self,
        base_url: str,
        *,
        manifest_path: str = "/data/pageconfig.json",
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        parsed = httpx.URL(base_url)
        if not parsed.scheme or not parsed.host:
            raise ValueError("base_url must include scheme and host")

        self._manifest_path = manifest_path
        self._timeout = timeout
        self._client = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
        self._owns_client = http_client is None

    async def _get(self, path: str) -> httpx.Response:
        try:
            response = await asyncio.wait_for(self._client.get(path), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise SourceError(f"timed out after {self._timeout}s fetching {path}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise SourceError(f"request for {path} failed: {exc}") from exc
        if response.status_code >= 400:
            raise SourceError(f"{path} returned HTTP {response.status_code}")
        return response

    async def fetch_manifest(self) -> Any:
        response = await self._get(self._manifest_path)
        try:
            return response.json()
        except ValueError as exc:
            raise SourceError(f"{self._manifest_path} is not valid JSON") from exc

    async def fetch_text(self, path: str) -> str:
        response = await self._get(path)
        return response.text

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


class LocalDocumentSource:
    """Serves files from a local copy of the site's public directory."""

    def __init__(self, root: Path, *, manifest_path: str = "/data/pageconfig.json") -> None:
        self._root = Path(root).resolve()
        self._manifest_path = manifest_path

    def _resolve(self, path: str) -> Path:
        try:
            candidate = (self._root / path.lstrip("/")).resolve()
        except (OSError, ValueError) as exc:
            raise SourceError(f"invalid path {path!r}: {exc}") from exc
        if not candidate.is_relative_to(self._root):
            raise SourceError(f"{path} escapes the site root")
        return candidate

    async def _read(self, path: str) -> str:
        target = self._resolve(path)
        try:
            return await asyncio.to_thread(target.read_text, encoding="utf-8")
        except (OSError, ValueError) as exc:
            raise SourceError(f"cannot read {path}: {exc}") from exc

    async def fetch_manifest(self) -> Any:
        text = await self._read(self._manifest_path)
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise SourceError(f"{self._manifest_path} is not valid JSON") from exc

    async def fetch_text(self, path: str) -> str:
        return await self._read(path)

    async def aclose(self) -> None:
        return None
