"""
Synthetic traffic for the live feed.
"""
import random
import uuid
from typing import List, Optional

from logshield.core.history_store import HistoryStore
from logshield.core.scheduler import Scheduler, TaskHandle
from logshield.detection.impact import classify_impact
from logshield.detection.rule_engine import classify_threat
from logshield.models.record import HttpMethod, Record, RecordDetails
from logshield.utils.logger import log
from logshield.utils.time_utils import now

_BENIGN_URLS = [
    "/", "/index.html", "/api/v1/users", "/api/v1/orders?page=2", "/login",
    "/static/app.js", "/static/style.css", "/health", "/products/42", "/search?q=shoes",
]

_MALICIOUS_URLS = [
    "/products?id=1 UNION SELECT username,password FROM users",
    "/login?user=admin' or '1'='1",
    "/api/search?q=information_schema.tables",
    "/comment?text=<script>alert(1)</script>",
    "/profile?img=x onerror=alert(document.cookie)",
    "/redirect?to=javascript:alert(1)",
    "/download?file=../../etc/passwd",
    "/cgi-bin/run?cmd=whoami",
    "/api/exec?c=exec(base64)",
    "/api/ping?flood=1",
]

_USER_AGENTS = [
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 Chrome/120.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_2) Safari/605.1.15",
    "curl/8.4.0",
    "sqlmap/1.7.11#stable",
    "python-requests/2.31.0",
]

_BENIGN_STATUS = [200, 200, 200, 201, 204, 301, 304, 404]
_ATTACK_STATUS = [200, 403, 403, 406, 500]


def _random_ip(rng: random.Random) -> str:
    return ".".join(str(rng.randint(1, 254)) for _ in range(4))


def generate_mock_records(count: int = 1, rng: Optional[random.Random] = None,
                          attack_ratio: float = 0.3) -> List[Record]:
    """Build `count` synthetic records, classified with the production classifiers."""
    rng = rng or random.Random()
    records: List[Record] = []
    for _ in range(count):
        malicious = rng.random() < attack_ratio
        url = rng.choice(_MALICIOUS_URLS if malicious else _BENIGN_URLS)
        status = rng.choice(_ATTACK_STATUS if malicious else _BENIGN_STATUS)
        attack_type = classify_threat(url)
        records.append(Record(
            id=f"mock-{uuid.uuid4().hex[:12]}",
            timestamp=now(),
            source_ip=_random_ip(rng),
            method=rng.choice([HttpMethod.GET, HttpMethod.GET, HttpMethod.POST, HttpMethod.PUT]),
            url=url,
            status_code=status,
            attack_type=attack_type,
            impact=classify_impact(attack_type, status),
            details=RecordDetails(
                headers={"Host": "shop.example.com", "Accept": "*/*"},
                payload=url.split("?", 1)[1] if malicious and "?" in url else None,
                user_agent=rng.choice(_USER_AGENTS),
            ),
        ))
    return records


class LiveFeed:
    """
    Repeating task that pushes one synthetic record into the history.

    `live` is the user-facing toggle. `suspend()` is used while an upload is being
    processed; ticks that fire while suspended are dropped.
    """

    def __init__(self, store: HistoryStore, scheduler: Scheduler, interval: float = 2.0,
                 rng: Optional[random.Random] = None):
        self.store = store
        self.scheduler = scheduler
        self.interval = interval
        self.rng = rng or random.Random()
        self._handle: Optional[TaskHandle] = None
        self._suspended = 0

    @property
    def live(self) -> bool:
        return self._handle is not None and not self._handle.cancelled

    @property
    def suspended(self) -> bool:
        return self._suspended > 0

    def start(self) -> None:
        if self.live:
            return
        self._handle = self.scheduler.call_every(self.interval, self.tick)
        log.info(f"[live] feed started interval={self.interval}s")

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            log.info("[live] feed paused")

    def set_live(self, enabled: bool) -> None:
        if enabled:
            self.start()
        else:
            self.stop()

    def suspend(self) -> None:
        self._suspended += 1

    def resume(self) -> None:
        self._suspended = max(0, self._suspended - 1)

    def tick(self) -> None:
        if self.suspended:
            return
        record = generate_mock_records(1, self.rng)[0]
        record = record.model_copy(update={"id": f"live-{uuid.uuid4().hex[:12]}", "timestamp": now()})
        self.store.append(record)
