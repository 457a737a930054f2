import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# settings are cached on first use, so these must be set before any project import
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LIVE_FEED_ENABLED", "false")
os.environ.setdefault("INGEST_DELAY_SECONDS", "0")
