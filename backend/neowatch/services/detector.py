"""
Close approach detection.

Receives a set of NEO ids and rates them after earth proximity: retrieves the
approach data for them and sorts to the n closest in the active window.
Alerts if someone is potentially hazardous.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from neowatch.models.neo import TrackedObject
from neowatch.services.date_window import DateWindow
from neowatch.services.fetcher import ApproachFetcher, FetchResult
from neowatch.services.ranking import ProximityKey, closest_miss_distance, rank_closest

logger = logging.getLogger(__name__)


@dataclass
class ApproachReport:
    closest: List[TrackedObject]
    fetch: FetchResult
    window: DateWindow

    @property
    def hazardous(self) -> List[TrackedObject]:
        return [neo for neo in self.closest if neo.is_potentially_hazardous]


class ApproachDetector:
    def __init__(self, fetcher: ApproachFetcher, proximity: ProximityKey = closest_miss_distance):
        self.fetcher = fetcher
        self.proximity = proximity

    def get_closest_approaches(
        self,
        ids: Iterable[str],
        limit: int,
        window: Optional[DateWindow] = None,
    ) -> ApproachReport:
        """Get the n closest approaches in this period."""
        if limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")
        if window is None:
            window = DateWindow.current_week()

        fetched = self.fetcher.fetch_all(ids)
        logger.info(
            f"Received {fetched.succeeded} neos ({len(fetched.failed)} failed), now sorting"
        )

        closest = rank_closest(fetched.objects, limit, window=window, proximity=self.proximity)
        report = ApproachReport(closest=closest, fetch=fetched, window=window)

        for neo in report.hazardous:
            passing = neo.closest_approach()
            logger.warning(
                f"Potentially hazardous object {neo.name} ({neo.neo_id}) passing at "
                f"{passing.miss_distance_km:.3f} km on {passing.when}"
            )
        return report
