"""Exact-match lookups on top of RecordStore.find_all."""
from __future__ import annotations

from typing import Any, List

from artisanverse.repositories.json_storage import RecordStore


def find_exact(store: RecordStore, collection: str, **criteria: Any) -> List[dict]:
    """
    Like find_all but every given field must be equal, not just contain the value.
    Store string filters are substring matches, which is wrong for ids and e-mails.
    """
    wanted = {key: value for key, value in criteria.items() if value is not None}
    return [
        record
        for record in store.find_all(collection, wanted)
        if all(record.get(key) == value for key, value in wanted.items())
    ]

