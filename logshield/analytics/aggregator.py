"""
Chart series over the full record history.
"""
from collections import Counter, OrderedDict
from datetime import datetime
from typing import Iterable, List, Optional

from logshield.models.record import AttackType, ImpactLevel, Record
from logshield.models.series import MetricStats, TrafficPoint, VectorPoint, VolumePoint
from logshield.utils.time_utils import now as local_now

VECTOR_ORDER = (AttackType.SQLI, AttackType.XSS, AttackType.RCE, AttackType.DDOS)


def _local(ts: datetime) -> datetime:
    return ts.astimezone()


def vector_distribution(records: Iterable[Record]) -> List[VectorPoint]:
    """
    Count per attack type, only types with at least one hit.
    An empty list means "no attack data", which callers render differently from zeros.
    """
    counts = Counter(r.attack_type for r in records if r.attack_type != AttackType.NONE)
    if not counts:
        return []
    return [VectorPoint(name=t.value, value=counts[t]) for t in VECTOR_ORDER if counts[t] > 0]


def hourly_series(records: Iterable[Record], now: Optional[datetime] = None,
                  buckets: int = 12) -> List[TrafficPoint]:
    """
    `buckets` hourly points ending at the current hour, oldest first.
    Keyed by hour of day only, so records from different days share a bucket.
    """
    current_hour = _local(now or local_now()).hour
    series: "OrderedDict[str, TrafficPoint]" = OrderedDict()
    for back in range(buckets - 1, -1, -1):
        key = f"{(current_hour - back) % 24:02d}:00"
        series[key] = TrafficPoint(time=key)

    for rec in records:
        point = series.get(f"{_local(rec.timestamp).hour:02d}:00")
        if point is None:
            continue
        point.traffic += 1
        if rec.attack_type != AttackType.NONE:
            point.threats += 1
    return list(series.values())


def volume_histogram(records: Iterable[Record], limit: int = 20) -> List[VolumePoint]:
    """Per "HH:MM" counts, sorted by label (plain string order), last `limit` kept."""
    counts = Counter(_local(r.timestamp).strftime("%H:%M") for r in records)
    points = [VolumePoint(time=k, value=v) for k, v in sorted(counts.items())]
    return points[-limit:] if limit > 0 else []


def metric_stats(records: Iterable[Record], volume_buckets: int = 20) -> MetricStats:
    records = list(records)
    if not records:
        return MetricStats()
    volume = volume_histogram(records, volume_buckets)
    return MetricStats(
        total_requests=len(records),
        threats_blocked=sum(1 for r in records if r.impact == ImpactLevel.ATTEMPT),
        critical_breaches=sum(1 for r in records if r.impact == ImpactLevel.BREACH),
        traffic_volume=volume or [VolumePoint(time="Now", value=0)],
    )


def filter_records(records: Iterable[Record], breach_only: bool = False,
                   search_term: str = "") -> List[Record]:
    term = (search_term or "").lower()
    out: List[Record] = []
    for rec in records:
        if breach_only and rec.impact != ImpactLevel.BREACH:
            continue
        if term and not (
            term in rec.source_ip
            or term in rec.url.lower()
            or term in rec.attack_type.value.lower()
        ):
            continue
        out.append(rec)
    return out
