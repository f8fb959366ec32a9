from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable

from ..exceptions import DatasetNotLoadedError
from .models import SpeciesProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetSnapshot:
    """The complete set of species from one successful ingestion."""

    profiles: tuple[SpeciesProfile, ...]
    loaded_at: datetime
    source: str = ""
    raw_row_count: int = 0

    def __len__(self) -> int:
        return len(self.profiles)


class DatasetStore:
    """
    Holds the current dataset snapshot.

    Reloads build a fresh snapshot and swap the reference, so a reader that
    grabbed a snapshot keeps working on it in full while a reload happens.
    """

    def __init__(self) -> None:
        self._snapshot: DatasetSnapshot | None = None
        self._lock = threading.Lock()
        self._listeners: list[Callable[[DatasetSnapshot | None], None]] = []

    def subscribe(self, listener: Callable[[DatasetSnapshot | None], None]) -> None:
        """Register a callback invoked after every swap or clear."""
        self._listeners.append(listener)

    def replace(
        self,
        profiles: Iterable[SpeciesProfile],
        source: str = "",
        raw_row_count: int | None = None,
    ) -> DatasetSnapshot:
        profiles = tuple(profiles)
        snapshot = DatasetSnapshot(
            profiles=profiles,
            loaded_at=datetime.now(timezone.utc),
            source=source,
            raw_row_count=len(profiles) if raw_row_count is None else raw_row_count,
        )
        with self._lock:
            self._snapshot = snapshot
        logger.info("Dataset snapshot replaced: %d species from %s", len(profiles), source or "memory")
        self._notify(snapshot)
        return snapshot

    def clear(self) -> None:
        with self._lock:
            self._snapshot = None
        logger.info("Dataset snapshot cleared")
        self._notify(None)

    def current(self) -> DatasetSnapshot | None:
        return self._snapshot

    def snapshot(self) -> DatasetSnapshot:
        """Return the current snapshot, raising if nothing has been loaded."""
        snapshot = self._snapshot
        if snapshot is None:
            raise DatasetNotLoadedError()
        return snapshot

    def get_profiles(self) -> tuple[SpeciesProfile, ...]:
        return self.snapshot().profiles

    def is_loaded(self) -> bool:
        snapshot = self._snapshot
        return snapshot is not None and len(snapshot) > 0

    def get_last_update_time(self) -> datetime | None:
        snapshot = self._snapshot
        return snapshot.loaded_at if snapshot is not None else None

    def _notify(self, snapshot: DatasetSnapshot | None) -> None:
        for listener in self._listeners:
            listener(snapshot)
