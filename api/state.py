"""
Process-wide pipeline objects shared by the routers.
"""
from config.settings import get_settings
from logshield.analytics.dashboard import DashboardView
from logshield.core.dispatcher import Dispatcher
from logshield.core.history_store import HistoryStore
from logshield.core.ingestion import IngestionService
from logshield.core.scheduler import AsyncioScheduler
from logshield.core.traffic_simulator import LiveFeed

settings = get_settings()

scheduler = AsyncioScheduler()
history = HistoryStore(capacity=settings.HISTORY_CAPACITY)
live_feed = LiveFeed(history, scheduler, interval=settings.LIVE_FEED_INTERVAL_SECONDS)
dashboard = DashboardView(
    history,
    hourly_buckets=settings.HOURLY_BUCKETS,
    volume_buckets=settings.VOLUME_BUCKETS,
)
ingestion = IngestionService(
    history,
    scheduler,
    live_feed=live_feed,
    dispatcher=Dispatcher(separator=settings.TABULAR_SEPARATOR),
    delay=settings.INGEST_DELAY_SECONDS,
    error_display=settings.ERROR_DISPLAY_SECONDS,
)
