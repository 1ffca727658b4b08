"""
Concurrent fetching of NEO records.

Each id is fetched on a bounded thread pool. A failed fetch is logged and
left out of the result; it never aborts the rest of the batch.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol

from neowatch.models.neo import TrackedObject

logger = logging.getLogger(__name__)


class NeoSource(Protocol):
    def fetch_neo(self, neo_id: str) -> TrackedObject: ...


@dataclass
class FetchResult:
    objects: List[TrackedObject] = field(default_factory=list)
    attempted: int = 0
    failed: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return len(self.objects)

    @property
    def feed_unavailable(self) -> bool:
        return self.attempted > 0 and self.succeeded == 0


class ApproachFetcher:
    """
    Fetches a batch of objects from a NeoSource.

    Usage:
        fetcher = ApproachFetcher(NeoWsClient(), max_workers=10)
        result = fetcher.fetch_all(["3542519", "2000433"])
    """

    def __init__(self, source: NeoSource, max_workers: int = 10, deadline_seconds: Optional[float] = None):
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        if deadline_seconds is not None and deadline_seconds < 0:
            raise ValueError(f"deadline_seconds must be >= 0, got {deadline_seconds}")
        self.source = source
        self.max_workers = max_workers
        self.deadline_seconds = deadline_seconds

    def _fetch_one(self, neo_id: str) -> Optional[TrackedObject]:
        try:
            return self.source.fetch_neo(neo_id)
        except Exception as e:
            logger.error(f"Fetch of object {neo_id} failed: {e}")
            return None

    def fetch_all(self, ids: Iterable[str]) -> FetchResult:
        ids = list(ids)
        result = FetchResult(attempted=len(ids))
        if not ids:
            return result

        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(ids)),
            thread_name_prefix="neo-fetch",
        )
        try:
            futures = [(neo_id, executor.submit(self._fetch_one, neo_id)) for neo_id in ids]
            done, not_done = wait([f for _, f in futures], timeout=self.deadline_seconds)
            if not_done:
                logger.warning(
                    f"Fetch deadline of {self.deadline_seconds}s expired, "
                    f"{len(not_done)} of {len(ids)} requests unfinished"
                )
        finally:
            # Don't block on requests still in flight after a deadline
            executor.shutdown(wait=self.deadline_seconds is None, cancel_futures=True)

        for neo_id, future in futures:
            neo = future.result() if future in done else None
            if neo is None:
                result.failed.append(neo_id)
            else:
                result.objects.append(neo)

        if result.feed_unavailable:
            logger.warning(f"All {result.attempted} fetches failed, feed may be unavailable")
        return result
