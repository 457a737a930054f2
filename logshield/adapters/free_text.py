"""
Free-text adapter: one record per line, fields pulled out by pattern.
"""
import re
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from logshield.adapters.base import LogAdapter
from logshield.detection.impact import classify_impact
from logshield.detection.rule_engine import classify_threat
from logshield.models.record import AttackType, Record, RecordDetails
from logshield.utils.time_utils import parse_timestamp

IP_RX = re.compile(r"\b\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}\b")
METHOD_RX = re.compile(r"\b(GET|POST|PUT|DELETE|PATCH|HEAD|OPTIONS)\b", re.I)
STATUS_RX = re.compile(r"\s([2-5]\d{2})\s")
URL_AFTER_METHOD_RX = re.compile(r"(?:GET|POST|PUT|DELETE|PATCH)\s+((?:/|http)[\w\-./?=&%#+':]+)", re.I)
URL_TOKEN_RX = re.compile(r"(?:\s)((?:/|http)[\w\-./?=&%#+':]+)(?:\s|$)")
CLF_RX = re.compile(r"\[(\d{1,2}/[A-Za-z]{3}/\d{4}:\d{2}:\d{2}:\d{2}(?:\s+[+-]\d{4})?)\]")
ISO_RX = re.compile(r"(\d{4}-\d{2}-\d{2}[T ]?\d{2}:\d{2}:\d{2})")

RAW_USER_AGENT = "Raw Log Import"
RAW_PAYLOAD_NOTE = "Detected via Raw Log Analysis"


def extract_timestamp(line: str) -> Optional[datetime]:
    """CLF bracket first (first ':' becomes a space), then an ISO-looking substring."""
    clf = CLF_RX.search(line)
    if clf:
        parsed = parse_timestamp(clf.group(1).replace(":", " ", 1))
        if parsed:
            return parsed
    iso = ISO_RX.search(line)
    if iso:
        return parse_timestamp(iso.group(1))
    return None


def extract_url(line: str) -> str:
    m = URL_AFTER_METHOD_RX.search(line) or URL_TOKEN_RX.search(line)
    return m.group(1) if m else "/"


class FreeTextAdapter(LogAdapter):
    name = "free_text"
    id_prefix = "txt"

    def parse(self, source: Sequence[str], ingested_at: Optional[datetime] = None) -> List[Record]:
        ingested_at, token = self._batch_context(ingested_at)
        return [self._line_to_record(line, i, ingested_at, token) for i, line in enumerate(source)]

    def _line_to_record(self, line: str, index: int, ingested_at: datetime, token: str) -> Record:
        ip = IP_RX.search(line)
        method = METHOD_RX.search(line)
        status_m = STATUS_RX.search(line)
        status = int(status_m.group(1)) if status_m else 200

        # no timestamp in the line: step back one second per line to keep order
        timestamp = extract_timestamp(line) or (ingested_at - timedelta(seconds=index))

        attack_type = classify_threat(line)

        return Record(
            id=self._record_id(index, token),
            timestamp=timestamp,
            source_ip=ip.group(0) if ip else "0.0.0.0",
            method=method.group(1).upper() if method else "GET",
            url=extract_url(line),
            status_code=status,
            attack_type=attack_type,
            impact=classify_impact(attack_type, status),
            details=RecordDetails(
                headers={},
                payload=RAW_PAYLOAD_NOTE if attack_type != AttackType.NONE else None,
                user_agent=RAW_USER_AGENT,
            ),
        )
