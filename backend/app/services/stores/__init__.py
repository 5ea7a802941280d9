from .base import ResponseStore, StoreUnavailableError
from .document_store import HttpDocumentStore
from .fallback import FallbackStore, FallbackWriteError, FileStorageMedium, StorageMedium
from .memory import MemoryResponseStore
from .sql import SqlResponseStore

__all__ = [
    "FallbackStore",
    "FallbackWriteError",
    "FileStorageMedium",
    "HttpDocumentStore",
    "MemoryResponseStore",
    "ResponseStore",
    "SqlResponseStore",
    "StorageMedium",
    "StoreUnavailableError",
]
