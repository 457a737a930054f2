"""
Format detection and adapter dispatch
"""
import json
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from logshield.adapters.base import LogAdapter
from logshield.adapters.free_text import FreeTextAdapter
from logshield.adapters.structured import StructuredAdapter, extract_record_list
from logshield.adapters.tabular import TabularAdapter
from logshield.core.errors import NoParseableDataError
from logshield.models.record import Record
from logshield.utils.logger import log

_LINE_SPLIT = re.compile(r"\r?\n")


class Strategy(str, Enum):
    STRUCTURED = "structured"
    TABULAR = "tabular"
    FREE_TEXT = "free_text"


@dataclass
class DetectedFormat:
    strategy: Strategy
    source: Any  # record dicts for STRUCTURED, non-blank lines otherwise


@dataclass
class ParseOutcome:
    strategy: Strategy
    records: List[Record] = field(default_factory=list)


def non_blank_lines(text: str) -> List[str]:
    return [line for line in _LINE_SPLIT.split(text) if line.strip() != ""]


class FormatDetector:
    """
    Picks exactly one strategy for a raw document:
    1) the whole text decodes as JSON holding record-like objects -> structured
    2) no non-blank lines -> NoParseableDataError
    3) header line contains the separator and there is more than one line -> tabular
    4) otherwise -> free text
    """

    def __init__(self, separator: str = ","):
        self.separator = separator

    def _try_structured(self, text: str) -> Optional[List[Dict[str, Any]]]:
        try:
            document = json.loads(text)
        except ValueError as e:
            # not JSON, fall through to the line based strategies
            log.debug(f"[detect] structured parse skipped: {e}")
            return None
        return extract_record_list(document)

    def detect(self, text: str) -> DetectedFormat:
        items = self._try_structured(text)
        if items is not None:
            return DetectedFormat(Strategy.STRUCTURED, items)

        lines = non_blank_lines(text)
        if not lines:
            raise NoParseableDataError()

        if self.separator in lines[0] and len(lines) > 1:
            return DetectedFormat(Strategy.TABULAR, lines)
        return DetectedFormat(Strategy.FREE_TEXT, lines)


class Dispatcher:
    """Runs the adapter chosen by the detector. No fallback between strategies."""

    def __init__(self, separator: str = ","):
        self.detector = FormatDetector(separator)
        self.adapters: Dict[Strategy, LogAdapter] = {
            Strategy.STRUCTURED: StructuredAdapter(),
            Strategy.TABULAR: TabularAdapter(separator),
            Strategy.FREE_TEXT: FreeTextAdapter(),
        }

    def parse(self, text: str, ingested_at: Optional[datetime] = None) -> ParseOutcome:
        detected = self.detector.detect(text)
        log.info(f"[dispatch] strategy={detected.strategy.value} items={len(detected.source)}")

        records = self.adapters[detected.strategy].parse(detected.source, ingested_at)
        if not records:
            raise NoParseableDataError()

        log.info(f"[dispatch] strategy={detected.strategy.value} records={len(records)}")
        return ParseOutcome(strategy=detected.strategy, records=records)
