"""Infrastructure layer exports."""

from .sources import DocumentSource, HttpDocumentSource, LocalDocumentSource, SourceError
from .storage import FileKVStore, InMemoryKVStore, PersistentKVStore, StorageError

__all__ = [
    "DocumentSource",
    "FileKVStore",
    "HttpDocumentSource",
    "InMemoryKVStore",
    "LocalDocumentSource",
    "PersistentKVStore",
    "SourceError",
    "StorageError",
]
