"""
Ingestion service - one upload at a time, merged into history atomically.
"""
import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from logshield.core.dispatcher import Dispatcher, Strategy
from logshield.core.errors import IngestionBusyError, LogShieldError, PARSE_FAILED_MESSAGE
from logshield.core.history_store import HistoryStore
from logshield.core.scheduler import Scheduler, TaskHandle
from logshield.core.traffic_simulator import LiveFeed
from logshield.detection.risk_scorer import RiskScorer
from logshield.models.analysis_result import AnalysisResult
from logshield.models.record import Record
from logshield.utils.logger import log


class IngestionState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass
class IngestionOutcome:
    strategy: Strategy
    records: List[Record] = field(default_factory=list)
    analysis: Optional[AnalysisResult] = None


def decode_upload(raw: bytes) -> str:
    """Decode uploaded bytes, tolerating a BOM and non-UTF-8 input."""
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("latin-1", errors="ignore")


class IngestionService:
    def __init__(self, store: HistoryStore, scheduler: Scheduler,
                 live_feed: Optional[LiveFeed] = None,
                 dispatcher: Optional[Dispatcher] = None,
                 scorer: Optional[RiskScorer] = None,
                 delay: float = 1.5, error_display: float = 4.0):
        self.store = store
        self.scheduler = scheduler
        self.live_feed = live_feed
        self.dispatcher = dispatcher or Dispatcher()
        self.scorer = scorer or RiskScorer()
        self.delay = delay
        self.error_display = error_display

        self.state = IngestionState.IDLE
        self.error_message = ""
        self.last_result: Optional[AnalysisResult] = None
        self._reset_handle: Optional[TaskHandle] = None

    @property
    def busy(self) -> bool:
        return self.state == IngestionState.SCANNING

    async def ingest(self, raw: Union[bytes, str], filename: Optional[str] = None) -> IngestionOutcome:
        if self.busy:
            raise IngestionBusyError()

        self._cancel_reset()
        self.state = IngestionState.SCANNING
        self.error_message = ""
        self.last_result = None
        if self.live_feed is not None:
            self.live_feed.suspend()

        log.info(f"[ingest] start file={filename} size={len(raw)}")
        try:
            await asyncio.sleep(self.delay)
            text = decode_upload(raw) if isinstance(raw, bytes) else raw
            parsed = self.dispatcher.parse(text)
            analysis = self.scorer.score(parsed.records)
            # rolled back by the store if a listener rejects the batch
            self.store.merge(parsed.records)
        except LogShieldError as e:
            self._fail(e)
            raise
        except Exception as e:
            log.exception(f"[ingest][EXCEPTION] file={filename} err={e}")
            self._fail(e)
            raise
        finally:
            if self.live_feed is not None:
                self.live_feed.resume()

        if self.live_feed is not None:
            # uploaded data should not be pushed down by synthetic traffic
            self.live_feed.stop()

        self.state = IngestionState.COMPLETE
        self.last_result = analysis
        log.info(
            f"[ingest] done file={filename} strategy={parsed.strategy.value} records={len(parsed.records)} "
            f"score={analysis.score} risk={analysis.risk.value}"
        )
        return IngestionOutcome(strategy=parsed.strategy, records=parsed.records, analysis=analysis)

    def reset(self) -> None:
        """Dismiss the current result or error."""
        self._cancel_reset()
        self.state = IngestionState.IDLE
        self.error_message = ""
        self.last_result = None

    def _fail(self, error: Exception) -> None:
        log.warning(f"[ingest] failed: {error}")
        self.state = IngestionState.ERROR
        self.error_message = PARSE_FAILED_MESSAGE
        self._reset_handle = self.scheduler.call_later(self.error_display, self._auto_reset)

    def _auto_reset(self) -> None:
        if self.state == IngestionState.ERROR:
            self.state = IngestionState.IDLE
            self.error_message = ""
        self._reset_handle = None

    def _cancel_reset(self) -> None:
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None
