"""
Persistence adapters.

These modules encapsulate how records are stored/retrieved (today one JSON
file per collection). Services depend on the RecordStore interface rather than
touching the JSON files.
"""

from .json_storage import (
    CollectionNotFoundError,
    DuplicateRecordError,
    PersistenceError,
    RecordNotFoundError,
    RecordStore,
    RecordStoreError,
)

__all__ = [
    "CollectionNotFoundError",
    "DuplicateRecordError",
    "PersistenceError",
    "RecordNotFoundError",
    "RecordStore",
    "RecordStoreError",
]
