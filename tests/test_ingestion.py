"""
Ingestion service tests (async pass, busy guard, atomic merge, error reset)
"""
import asyncio
import json

import pytest

from logshield.core.errors import IngestionBusyError, NoParseableDataError, PARSE_FAILED_MESSAGE
from logshield.core.history_store import HistoryStore
from logshield.core.ingestion import IngestionService, IngestionState, decode_upload
from logshield.analytics.dashboard import DashboardView
from logshield.core.dispatcher import Strategy
from logshield.core.scheduler import ManualScheduler
from logshield.core.traffic_simulator import LiveFeed
from logshield.models.analysis_result import RiskTier
from logshield.models.record import Record

CLF = '10.0.0.5 - - [10/Oct/2020:13:55:36 -0700] "GET /etc/passwd HTTP/1.1" 200 1234\n'


def _service(delay=0.0, with_feed=False):
    store = HistoryStore(capacity=100)
    sched = ManualScheduler()
    feed = LiveFeed(store, sched, interval=1.0) if with_feed else None
    svc = IngestionService(store, sched, live_feed=feed, delay=delay, error_display=4.0)
    return svc, store, sched, feed


def test_decode_upload():
    assert decode_upload("﻿a,b".encode("utf-8")) == "a,b"
    assert decode_upload("caf\xe9".encode("latin-1")) == "caf\xe9"


def test_successful_pass_merges_batch():
    svc, store, _, _ = _service()
    outcome = asyncio.run(svc.ingest(CLF.encode(), filename="access.log"))
    assert outcome.strategy == Strategy.FREE_TEXT
    assert outcome.analysis.score == 75
    assert outcome.analysis.risk == RiskTier.CRITICAL
    assert svc.state == IngestionState.COMPLETE
    assert svc.last_result == outcome.analysis
    assert list(store.snapshot()) == outcome.records


def test_failed_pass_leaves_history_untouched_and_auto_resets():
    svc, store, sched, _ = _service()
    store.append(Record(id="keep"))
    before = store.snapshot()

    with pytest.raises(NoParseableDataError):
        asyncio.run(svc.ingest(b"  \n\n "))

    assert store.snapshot() == before
    assert svc.state == IngestionState.ERROR
    assert svc.error_message == PARSE_FAILED_MESSAGE

    sched.advance(3.9)
    assert svc.state == IngestionState.ERROR
    sched.advance(0.2)
    assert svc.state == IngestionState.IDLE
    assert svc.error_message == ""


def test_only_one_pass_at_a_time():
    svc, store, _, _ = _service(delay=0.05)

    async def run():
        first = asyncio.create_task(svc.ingest(CLF))
        await asyncio.sleep(0)
        assert svc.busy
        with pytest.raises(IngestionBusyError):
            await svc.ingest(CLF)
        return await first

    outcome = asyncio.run(run())
    assert len(store) == len(outcome.records) == 1
    assert not svc.busy


def test_new_upload_allowed_after_complete_and_reset():
    svc, store, _, _ = _service()
    asyncio.run(svc.ingest(json.dumps([{"url": "/a"}, {"url": "/b"}])))
    asyncio.run(svc.ingest(CLF))
    assert len(store) == 3
    svc.reset()
    assert svc.state == IngestionState.IDLE and svc.last_result is None


def test_live_feed_quiesced_during_pass_and_paused_after():
    svc, store, sched, feed = _service(with_feed=True)
    feed.start()

    async def run():
        task = asyncio.create_task(svc.ingest(CLF))
        await asyncio.sleep(0)
        # ticks that fire mid-pass are dropped
        assert feed.suspended
        sched.advance(3)
        return await task

    outcome = asyncio.run(run())
    assert [r.id for r in store.snapshot()] == [r.id for r in outcome.records]
    assert not feed.suspended
    assert not feed.live


def test_live_feed_keeps_running_after_failed_pass():
    svc, store, sched, feed = _service(with_feed=True)
    feed.start()
    with pytest.raises(NoParseableDataError):
        asyncio.run(svc.ingest(""))
    assert feed.live and not feed.suspended
    sched.advance(1)
    assert len(store) == 1


def test_out_of_range_timestamp_does_not_jam_the_service():
    """A CLF date past the datetime range falls back to a synthesized time"""
    svc, store, _, _ = _service()
    DashboardView(store)
    line = '10.0.0.5 - - [31/Dec/9999:23:00:00 -0500] "GET /etc/passwd HTTP/1.1" 200 1\n'

    outcome = asyncio.run(svc.ingest(line))
    [rec] = outcome.records
    assert rec.timestamp.year < 9999
    assert svc.state == IngestionState.COMPLETE

    asyncio.run(svc.ingest(CLF))
    assert len(store) == 2


def test_failed_merge_leaves_history_untouched():
    svc, store, sched, _ = _service()
    store.append(Record(id="keep"))

    def reject_batches(records):
        if len(records) > 1:
            raise RuntimeError("listener rejected batch")

    store.subscribe(reject_batches)
    with pytest.raises(RuntimeError):
        asyncio.run(svc.ingest(CLF))

    assert [r.id for r in store.snapshot()] == ["keep"]
    assert store.version == 1
    assert svc.state == IngestionState.ERROR
    assert not svc.busy
    sched.advance(4.0)
    assert svc.state == IngestionState.IDLE
