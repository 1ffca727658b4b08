"""
Command line entry point.

    neowatch                      # every object in today's feed
    neowatch 3542519 2000433 -n 5 # only the given objects
"""
import argparse
import logging
import sys
from datetime import datetime, timezone

from neowatch.core.config import settings
from neowatch.services.detector import ApproachDetector
from neowatch.services.fetcher import ApproachFetcher
from neowatch.services.neows import NeoFetchError, NeoWsClient
from neowatch.services.ranking import PROXIMITY_STRATEGIES, get_proximity_strategy
from neowatch.services.report import format_report

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="neowatch",
        description="Show the near-earth objects passing closest to Earth this week.",
    )
    parser.add_argument("ids", nargs="*", help="NeoWs object ids (default: today's feed)")
    parser.add_argument("-n", "--limit", type=int, default=settings.DEFAULT_LIMIT)
    parser.add_argument("-w", "--workers", type=int, default=settings.FETCH_MAX_WORKERS)
    parser.add_argument("--proximity", choices=sorted(PROXIMITY_STRATEGIES), default="miss_distance")
    return parser


def run(args: argparse.Namespace) -> int:
    with NeoWsClient(
        api_key=settings.NASA_API_KEY,
        base_url=settings.NEOWS_BASE_URL,
        timeout=settings.FETCH_TIMEOUT_SECONDS,
    ) as client:
        ids = args.ids
        if not ids:
            try:
                ids = client.fetch_feed_ids(datetime.now(timezone.utc).date())
            except NeoFetchError as e:
                logger.error(f"Could not read today's feed: {e}")
                return 1

        fetcher = ApproachFetcher(
            client,
            max_workers=args.workers,
            deadline_seconds=settings.FETCH_DEADLINE_SECONDS,
        )
        detector = ApproachDetector(fetcher, proximity=get_proximity_strategy(args.proximity))
        report = detector.get_closest_approaches(ids, args.limit)

    print(format_report(report.closest))
    print(
        f"\nWindow {report.window}: {report.fetch.succeeded}/{report.fetch.attempted} fetched, "
        f"{len(report.fetch.failed)} failed"
    )
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.limit < 0:
        parser.error("--limit must be >= 0")
    if args.workers < 1:
        parser.error("--workers must be >= 1")

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    try:
        return run(args)
    except KeyboardInterrupt:
        logger.info("Stopped by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
