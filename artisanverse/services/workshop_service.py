"""Workshop listings."""
from __future__ import annotations

from artisanverse.domain.records import WORKSHOPS, Workshop
from artisanverse.repositories.json_storage import RecordStore


class WorkshopService:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def list_workshops(self) -> list[Workshop]:
        """Every workshop in stored order."""
        return list(self.store.find_all(WORKSHOPS))
