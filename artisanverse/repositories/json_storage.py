"""
JSON-file persistence adapter.

Each collection lives in memory as a list of dicts and is mirrored to
`<data_dir>/<collection>.json`. Every mutation rewrites the whole file before
returning. Mutations on the same collection are serialized by a per-collection
lock so concurrent requests cannot lose each other's writes.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional

from artisanverse.core.utils import generate_id, parse_timestamp, utc_now_iso
from artisanverse.domain.patch import apply_patch
from artisanverse.domain.query import matches
from artisanverse.domain.records import COLLECTIONS
from artisanverse.domain.seeds import SeedProvider, initial_data

logger = logging.getLogger(__name__)


class RecordStoreError(Exception):
    """Base class for record store failures."""


class CollectionNotFoundError(RecordStoreError):
    def __init__(self, collection: str):
        super().__init__(f"Collection {collection} not found")
        self.collection = collection


class RecordNotFoundError(RecordStoreError):
    def __init__(self, collection: str, record_id: str):
        super().__init__(f"Item {record_id} not found in {collection}")
        self.collection = collection
        self.record_id = record_id


class DuplicateRecordError(RecordStoreError):
    def __init__(self, collection: str, record_id: str):
        super().__init__(f"Item {record_id} already exists in {collection}")
        self.collection = collection
        self.record_id = record_id


class PersistenceError(RecordStoreError):
    """Raised when a collection file could not be written."""


class RecordStore:
    """CRUD helpers over the in-memory collections and their JSON files."""

    def __init__(
        self,
        data_dir: Path | str,
        collections: Iterable[str] = COLLECTIONS,
        seeds: SeedProvider = initial_data,
    ) -> None:
        self.data_dir = Path(data_dir)
        self._names = tuple(collections)
        self._seeds = seeds
        self._data: Dict[str, List[dict]] = {}
        self._locks: Dict[str, threading.RLock] = {name: threading.RLock() for name in self._names}

    # -------------------------- lifecycle --------------------------
    @property
    def collections(self) -> tuple[str, ...]:
        return tuple(name for name in self._names if name in self._data)

    def path_for(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    def initialize(self) -> None:
        """Load every collection from disk, seeding (and writing) the ones that are missing or corrupt."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            logger.exception("Data directory %s could not be created; starting with empty collections", self.data_dir)
            for name in self._names:
                self._data[name] = []
            return

        for name in self._names:
            with self._locks[name]:
                self._ensure_collection(name)
        logger.info("Record store initialized with %d collections in %s", len(self._names), self.data_dir)

    def _ensure_collection(self, name: str) -> None:
        records = self._read_file(name)
        if records is not None:
            self._data[name] = records
            logger.debug("Loaded %d records into %s", len(records), name)
            return
        self._data[name] = [dict(record) for record in self._seeds(name)]
        logger.info("Seeded collection %s with %d records", name, len(self._data[name]))
        try:
            self._persist(name)
        except PersistenceError:
            # keep serving the seeded data from memory; the next write retries the file
            logger.warning("Seed data for %s kept in memory only", name)

    def _read_file(self, name: str) -> Optional[List[dict]]:
        path = self.path_for(name)
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %s (%s); reseeding", path, exc)
            return None
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            logger.warning("%s does not hold a JSON array of records; reseeding", path)
            return None
        return data

    def _persist(self, name: str) -> None:
        path = self.path_for(name)
        try:
            payload = json.dumps(self._data[name], ensure_ascii=False, indent=2)
            path.write_text(payload, encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to persist %s to %s: %s", name, path, exc)
            raise PersistenceError(f"Could not write collection {name} to {path}") from exc

    def _lock_for(self, collection: str) -> threading.RLock:
        if collection not in self._data:
            raise CollectionNotFoundError(collection)
        return self._locks[collection]

    @staticmethod
    def _index_of(records: List[dict], record_id: str) -> int:
        for index, record in enumerate(records):
            if record.get("id") == record_id:
                return index
        return -1

    @staticmethod
    def _next_timestamp(previous: Any) -> str:
        now = utc_now_iso()
        last = parse_timestamp(previous)
        current = parse_timestamp(now)
        if last is not None and current is not None and last > current:
            return previous
        return now

    # -------------------------- reads --------------------------
    def find_all(self, collection: str, filters: Optional[Mapping[str, Any]] = None) -> Iterator[dict]:
        """
        Matching records as independent copies.

        The collection is snapshotted when called; matching and copying happen
        lazily while iterating. Unknown collections yield nothing.
        """
        if collection not in self._data:
            return iter(())
        with self._locks[collection]:
            snapshot = list(self._data[collection])
        criteria = dict(filters or {})
        return (copy.deepcopy(record) for record in snapshot if matches(record, criteria))

    def find_one(self, collection: str, filters: Optional[Mapping[str, Any]] = None) -> Optional[dict]:
        return next(self.find_all(collection, filters), None)

    def find_by_id(self, collection: str, record_id: str) -> Optional[dict]:
        if collection not in self._data or not record_id:
            return None
        with self._locks[collection]:
            records = self._data[collection]
            index = self._index_of(records, record_id)
            return copy.deepcopy(records[index]) if index >= 0 else None

    def count(self, collection: str, filters: Optional[Mapping[str, Any]] = None) -> int:
        return sum(1 for _ in self.find_all(collection, filters))

    # -------------------------- writes --------------------------
    def create(self, collection: str, fields: Mapping[str, Any]) -> dict:
        with self._lock_for(collection):
            records = self._data[collection]
            record = copy.deepcopy(dict(fields))
            record_id = record.get("id") or generate_id()
            if self._index_of(records, record_id) >= 0:
                raise DuplicateRecordError(collection, record_id)
            now = utc_now_iso()
            record.update({"id": record_id, "createdAt": now, "updatedAt": now})
            records.append(record)
            self._persist(collection)
            return copy.deepcopy(record)

    def update(
        self,
        collection: str,
        record_id: str,
        patch: Mapping[str, Any],
        *,
        expand_dotted: bool = False,
    ) -> dict:
        return self.modify(collection, record_id, lambda current: patch, expand_dotted=expand_dotted)

    def modify(
        self,
        collection: str,
        record_id: str,
        fn: Callable[[dict], Mapping[str, Any]],
        *,
        expand_dotted: bool = False,
    ) -> dict:
        """
        Read-modify-write under the collection lock.

        `fn` gets a copy of the current record and returns the patch to apply.
        Anything it raises propagates and leaves the record untouched.
        """
        with self._lock_for(collection):
            records = self._data[collection]
            index = self._index_of(records, record_id)
            if index < 0:
                raise RecordNotFoundError(collection, record_id)
            current = records[index]
            patch = fn(copy.deepcopy(current))
            updated = apply_patch(current, copy.deepcopy(dict(patch or {})), expand_dotted=expand_dotted)
            updated["updatedAt"] = self._next_timestamp(current.get("updatedAt"))
            records[index] = updated
            self._persist(collection)
            return copy.deepcopy(updated)

    def delete(self, collection: str, record_id: str) -> dict:
        with self._lock_for(collection):
            records = self._data[collection]
            index = self._index_of(records, record_id)
            if index < 0:
                raise RecordNotFoundError(collection, record_id)
            removed = records.pop(index)
            self._persist(collection)
            return copy.deepcopy(removed)
