"""Record stores for LineageHub."""

from .base import RecordStore
from .duckdb_store import DuckDBRecordStore
from .memory import InMemoryRecordStore

__all__ = ["RecordStore", "DuckDBRecordStore", "InMemoryRecordStore"]
