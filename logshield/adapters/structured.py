"""
Structured (JSON) adapter.

Input is assumed to be pre-classified: attack type and impact are copied, not detected.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError
from pydantic.alias_generators import to_camel, to_snake

from logshield.adapters.base import LogAdapter
from logshield.detection.impact import classify_impact
from logshield.models.record import Record
from logshield.utils.logger import log

WRAPPER_KEYS = ("logs", "records", "events", "entries")


def extract_record_list(document: Any) -> Optional[List[Dict[str, Any]]]:
    """
    Return the record-like list held by a decoded JSON document, or None.
    Accepts a top-level list or an object wrapping one under WRAPPER_KEYS.
    """
    candidate = document
    if isinstance(document, dict):
        candidate = next((document[k] for k in WRAPPER_KEYS if k in document), None)
    if isinstance(candidate, list) and candidate and all(isinstance(x, dict) for x in candidate):
        return candidate
    return None


class StructuredAdapter(LogAdapter):
    name = "structured"
    id_prefix = "json"

    def parse(self, source: Sequence[Dict[str, Any]], ingested_at: Optional[datetime] = None) -> List[Record]:
        ingested_at, token = self._batch_context(ingested_at)
        return [self._to_record(item, i, ingested_at, token) for i, item in enumerate(source)]

    def _to_record(self, item: Dict[str, Any], index: int, ingested_at: datetime, token: str) -> Record:
        data = dict(item)
        data.setdefault("id", self._record_id(index, token))
        if data.get("timestamp") is None:
            data["timestamp"] = ingested_at

        try:
            record = Record.model_validate(data)
        except ValidationError as e:
            bad = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
            log.warning(f"[structured] item {index}: defaulting invalid fields {bad}")
            for key in bad:
                for alias in (key, to_camel(key), to_snake(key)):
                    data.pop(alias, None)
            if "timestamp" in bad:
                data["timestamp"] = ingested_at
            if "id" in bad:
                data["id"] = self._record_id(index, token)
            record = Record.model_validate(data)

        if "impact" not in data:
            record = record.model_copy(
                update={"impact": classify_impact(record.attack_type, record.status_code)}
            )
        return record
