import threading
from typing import Callable, Iterable, List, Tuple

from logshield.models.record import Record
from logshield.utils.logger import log

Listener = Callable[[Tuple[Record, ...]], None]


class HistoryStore:
    """
    Bounded in-memory record history, newest first.

    The only writers are the ingestion service and the live feed; both go through
    append/merge/replace/clear. Once capacity is exceeded the oldest records are dropped.
    """

    def __init__(self, capacity: int = 2000):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._records: List[Record] = []
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []
        self._version = 0

    @property
    def version(self) -> int:
        return self._version

    def __len__(self) -> int:
        return len(self._records)

    def snapshot(self) -> Tuple[Record, ...]:
        with self._lock:
            return tuple(self._records)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def append(self, record: Record) -> None:
        """Push one record on top (live feed)."""
        with self._lock:
            records = [record] + self._records
        self._commit(records)

    def merge(self, batch: Iterable[Record]) -> None:
        """Merge a whole ingested batch and re-sort by timestamp, newest first."""
        batch = list(batch)
        with self._lock:
            merged = batch + self._records
        merged.sort(key=lambda r: r.timestamp, reverse=True)
        self._commit(merged)

    def replace(self, records: Iterable[Record]) -> None:
        self._commit(list(records))

    def clear(self) -> None:
        self._commit([])

    def _commit(self, records: List[Record]) -> None:
        """
        Swap in the new contents and notify listeners.
        If a listener fails the previous contents are restored and the error is re-raised.
        """
        with self._lock:
            previous = self._records
            self._records = records[: self.capacity]
        try:
            self._notify()
        except Exception:
            log.warning("[history] listener failed, change rolled back")
            with self._lock:
                self._records = previous
            raise
        self._version += 1

    def _notify(self) -> None:
        records = self.snapshot()
        for listener in list(self._listeners):
            listener(records)
