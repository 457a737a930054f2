"""
Offline analysis of a single log file (no server needed).

    python scripts/analyze_log.py access.log
    python scripts/analyze_log.py export.json --records
"""
import argparse
import json
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import get_settings
from logshield.analytics.aggregator import metric_stats, vector_distribution
from logshield.core.dispatcher import Dispatcher
from logshield.core.errors import NoParseableDataError
from logshield.core.ingestion import decode_upload
from logshield.detection.risk_scorer import RiskScorer


def main():
    parser = argparse.ArgumentParser(description="Classify a security log file and score its risk")
    parser.add_argument("logfile", help="JSON, CSV or plain-text log file")
    parser.add_argument("--records", action="store_true", help="include the canonical records in the output")
    args = parser.parse_args()

    if not os.path.isfile(args.logfile):
        print(f"Error: log file not found: {args.logfile}")
        sys.exit(1)

    with open(args.logfile, "rb") as f:
        text = decode_upload(f.read())

    settings = get_settings()
    try:
        outcome = Dispatcher(separator=settings.TABULAR_SEPARATOR).parse(text)
    except NoParseableDataError as e:
        print(f"Error: {e}")
        sys.exit(2)

    analysis = RiskScorer().score(outcome.records)
    report = {
        "file": args.logfile,
        "strategy": outcome.strategy.value,
        "record_count": len(outcome.records),
        "analysis": analysis.model_dump(mode="json"),
        "vectors": [v.model_dump() for v in vector_distribution(outcome.records)],
        "stats": metric_stats(outcome.records, settings.VOLUME_BUCKETS).model_dump(mode="json", by_alias=True),
    }
    if args.records:
        report["records"] = [r.to_dict() for r in outcome.records]

    print(json.dumps(report, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
