from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from logshield.analytics.aggregator import hourly_series, metric_stats, vector_distribution
from logshield.core.history_store import HistoryStore
from logshield.models.record import Record
from logshield.models.series import MetricStats, TrafficPoint, VectorPoint


@dataclass
class DashboardSnapshot:
    stats: MetricStats = field(default_factory=MetricStats)
    vectors: List[VectorPoint] = field(default_factory=list)
    traffic: List[TrafficPoint] = field(default_factory=list)


class DashboardView:
    """Derived series kept in sync with the history store; recomputed on every change."""

    def __init__(self, store: HistoryStore, hourly_buckets: int = 12, volume_buckets: int = 20,
                 clock: Optional[Callable[[], datetime]] = None):
        self.hourly_buckets = hourly_buckets
        self.volume_buckets = volume_buckets
        self.clock = clock
        self.snapshot = DashboardSnapshot()
        self.refresh(store.snapshot())
        store.subscribe(self.refresh)

    def refresh(self, records: Tuple[Record, ...]) -> None:
        now = self.clock() if self.clock else None
        self.snapshot = DashboardSnapshot(
            stats=metric_stats(records, self.volume_buckets),
            vectors=vector_distribution(records),
            traffic=hourly_series(records, now=now, buckets=self.hourly_buckets),
        )
