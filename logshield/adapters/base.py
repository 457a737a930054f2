from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, List, Optional
import uuid

from logshield.models.record import Record
from logshield.utils.time_utils import now


class LogAdapter(ABC):
    """Turns one input format into canonical records."""

    name: str = "base"
    id_prefix: str = "rec"

    @abstractmethod
    def parse(self, source: Any, ingested_at: Optional[datetime] = None) -> List[Record]:
        ...

    def _batch_context(self, ingested_at: Optional[datetime]):
        # one token per batch keeps ids unique across repeated uploads
        return (ingested_at or now()), uuid.uuid4().hex[:8]

    def _record_id(self, index: int, token: str) -> str:
        return f"{self.id_prefix}-{index}-{token}"
