"""
Tabular (CSV-like) adapter: header-driven column mapping.
"""
import re
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from logshield.adapters.base import LogAdapter
from logshield.detection.impact import classify_impact
from logshield.detection.rule_engine import classify_threat
from logshield.models.record import HttpMethod, Record, RecordDetails
from logshield.utils.time_utils import parse_timestamp

# field -> header keywords; each field takes the first header containing any keyword
COLUMN_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("timestamp", ("time", "date", "created", "timestamp")),
    ("source_ip", ("ip", "source", "host", "origin", "client")),
    ("method", ("method", "verb", "type", "req")),
    ("url", ("url", "path", "uri", "request", "target")),
    ("status_code", ("status", "code", "sc", "resp")),
    ("payload", ("payload", "body", "data", "content")),
    ("user_agent", ("agent", "browser", "ua")),
)

DEFAULT_USER_AGENT = "CSV Import"
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_METHODS = {m.value for m in HttpMethod}


def _strip_quotes(value: str) -> str:
    value = value.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def parse_header(line: str, separator: str = ",") -> List[str]:
    return [_strip_quotes(h).lower() for h in line.split(separator)]


def map_columns(headers: Sequence[str]) -> Dict[str, Optional[int]]:
    """Resolve each semantic field to a column index (None when unmapped)."""
    mapping: Dict[str, Optional[int]] = {}
    for field, keywords in COLUMN_KEYWORDS:
        mapping[field] = next(
            (i for i, h in enumerate(headers) if any(k in h for k in keywords)),
            None,
        )
    return mapping


def split_row(line: str, separator: str = ",") -> List[str]:
    """Split on the separator, ignoring separators inside double-quoted spans."""
    sep = re.escape(separator)
    pattern = re.compile(sep + r'(?=(?:(?:[^"]*"){2})*[^"]*$)')
    return [_strip_quotes(c) for c in pattern.split(line)]


def parse_status(value: Optional[str], default: int = 200) -> int:
    if not value:
        return default
    m = _LEADING_INT.match(value)
    if not m:
        return default
    return int(m.group(1)) or default


class TabularAdapter(LogAdapter):
    name = "tabular"
    id_prefix = "csv"

    def __init__(self, separator: str = ","):
        self.separator = separator

    def parse(self, source: Sequence[str], ingested_at: Optional[datetime] = None) -> List[Record]:
        """`source` is the list of non-blank lines, header first."""
        ingested_at, token = self._batch_context(ingested_at)
        columns = map_columns(parse_header(source[0], self.separator))
        return [
            self._row_to_record(line, columns, i, ingested_at, token)
            for i, line in enumerate(source[1:])
        ]

    def _row_to_record(self, line: str, columns: Dict[str, Optional[int]], index: int,
                       ingested_at: datetime, token: str) -> Record:
        cols = split_row(line, self.separator)

        def col(field: str) -> Optional[str]:
            idx = columns.get(field)
            if idx is None or idx >= len(cols):
                return None
            return cols[idx]

        url = col("url") or "/"
        payload = col("payload") or ""
        method = (col("method") or "GET").upper()
        if method not in _METHODS:
            method = "GET"
        status = parse_status(col("status_code"))
        source_ip = col("source_ip") or "0.0.0.0"
        timestamp = parse_timestamp(col("timestamp")) or ingested_at

        attack_type = classify_threat(url + payload)
        user_agent = col("user_agent")

        return Record(
            id=self._record_id(index, token),
            timestamp=timestamp,
            source_ip=source_ip,
            method=method,
            url=url,
            status_code=status,
            attack_type=attack_type,
            impact=classify_impact(attack_type, status),
            details=RecordDetails(
                headers={},
                payload=payload or None,
                user_agent=user_agent if user_agent is not None else DEFAULT_USER_AGENT,
            ),
        )
