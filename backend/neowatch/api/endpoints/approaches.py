from fastapi import APIRouter, Depends, HTTPException, Query
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

from neowatch.core.config import settings
from neowatch.services.detector import ApproachDetector, ApproachReport
from neowatch.services.fetcher import ApproachFetcher
from neowatch.services.neows import NeoFetchError, NeoWsClient
from neowatch.services.ranking import PROXIMITY_STRATEGIES, get_proximity_strategy

logger = logging.getLogger(__name__)

router = APIRouter()


def get_client():
    client = NeoWsClient(
        api_key=settings.NASA_API_KEY,
        base_url=settings.NEOWS_BASE_URL,
        timeout=settings.FETCH_TIMEOUT_SECONDS,
    )
    try:
        yield client
    finally:
        client.close()


def get_fetcher(client: NeoWsClient = Depends(get_client)) -> ApproachFetcher:
    return ApproachFetcher(
        client,
        max_workers=settings.FETCH_MAX_WORKERS,
        deadline_seconds=settings.FETCH_DEADLINE_SECONDS,
    )


def _detect(fetcher: ApproachFetcher, ids: List[str], limit: int, proximity: str) -> Dict[str, Any]:
    try:
        detector = ApproachDetector(fetcher, proximity=get_proximity_strategy(proximity))
        report = detector.get_closest_approaches(ids, limit)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return serialize_report(report)


def serialize_report(report: ApproachReport) -> Dict[str, Any]:
    return {
        "window": {"start": report.window.start, "end": report.window.end},
        "attempted": report.fetch.attempted,
        "succeeded": report.fetch.succeeded,
        "failed": report.fetch.failed,
        "hazardous": [neo.neo_id for neo in report.hazardous],
        "closest": [neo.model_dump(mode="json") for neo in report.closest],
    }


@router.get("/closest")
def get_closest_approaches(
    ids: List[str] = Query(default=[]),
    limit: int = Query(default=settings.DEFAULT_LIMIT, ge=0, le=1000),
    proximity: str = Query(default="miss_distance", description=f"One of {sorted(PROXIMITY_STRATEGIES)}"),
    fetcher: ApproachFetcher = Depends(get_fetcher),
):
    """
    Rank the given objects by their closest passing this week.
    Objects that fail to fetch are listed under `failed`.
    """
    return _detect(fetcher, ids, limit, proximity)


@router.get("/today")
def get_todays_closest_approaches(
    limit: int = Query(default=settings.DEFAULT_LIMIT, ge=0, le=1000),
    proximity: str = Query(default="miss_distance"),
    day: Optional[str] = Query(None, description="Feed day (YYYY-MM-DD), defaults to today (UTC)"),
    client: NeoWsClient = Depends(get_client),
    fetcher: ApproachFetcher = Depends(get_fetcher),
):
    """
    Rank every object listed in the NeoWs feed for a day.
    """
    try:
        feed_day = datetime.strptime(day, "%Y-%m-%d").date() if day else datetime.now(timezone.utc).date()
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid day '{day}', expected YYYY-MM-DD")

    try:
        ids = client.fetch_feed_ids(feed_day)
    except NeoFetchError as e:
        logger.error(f"Feed lookup failed: {e}")
        raise HTTPException(status_code=502, detail="NeoWs feed unavailable")

    return _detect(fetcher, ids, limit, proximity)
