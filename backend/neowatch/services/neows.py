"""
NASA NeoWs (Near Earth Object Web Service) REST client.

Provides:
- Lookup of a single object and its close approach data
- Feed of object ids approaching in a date range (max 7 days)

https://api.nasa.gov/neo/rest/v1/
"""

import requests
import logging
import threading
from datetime import date, timedelta
from typing import Callable, Optional, List

from pydantic import ValidationError

from neowatch.core.config import settings
from neowatch.models.neo import TrackedObject


logger = logging.getLogger(__name__)

FEED_MAX_DAYS = 7


class NeoFetchError(Exception):
    """A single NeoWs request could not be turned into a record."""

    def __init__(self, message: str, neo_id: Optional[str] = None):
        super().__init__(message)
        self.neo_id = neo_id


class NeoWsClient:
    """
    Client for the NeoWs lookup and feed endpoints.

    Usage:
        with NeoWsClient(api_key="DEMO_KEY") as client:
            ids = client.fetch_feed_ids(date.today())
            neo = client.fetch_neo(ids[0])
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        self.api_key = api_key if api_key is not None else settings.NASA_API_KEY
        self.base_url = (base_url or settings.NEOWS_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.FETCH_TIMEOUT_SECONDS
        self._session_factory = session_factory
        # requests.Session is not thread-safe; one per worker thread
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        """Session owned by the calling thread."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._session_factory()
            session.headers.update({
                "User-Agent": "NeoWatch/1.0",
                "Accept": "application/json",
            })
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
            self._local = threading.local()
        for session in sessions:
            session.close()

    def _get_json(self, url: str, params: dict, neo_id: Optional[str] = None):
        params = {**params, "api_key": self.api_key}
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as e:
            raise NeoFetchError(f"Request to {url} failed: {e}", neo_id) from e
        except ValueError as e:
            # requests raises a ValueError subclass for undecodable JSON
            raise NeoFetchError(f"Invalid JSON from {url}: {e}", neo_id) from e

    def fetch_neo(self, neo_id: str) -> TrackedObject:
        """Retrieve one object with all of its close approach data."""
        logger.info(f"Check passing of object {neo_id}")
        payload = self._get_json(f"{self.base_url}/neo/{neo_id}", {}, neo_id)
        if not isinstance(payload, dict):
            raise NeoFetchError(f"Unexpected payload for {neo_id}", neo_id)
        try:
            return TrackedObject.from_neows(payload)
        except ValidationError as e:
            raise NeoFetchError(f"Malformed record for {neo_id}: {e}", neo_id) from e

    def fetch_feed_ids(self, start_date: date, end_date: Optional[date] = None) -> List[str]:
        """
        Ids of all objects with an approach between start_date and end_date.

        Ids are returned in date order, as listed by the feed.
        """
        end_date = end_date or start_date
        if end_date < start_date:
            raise ValueError("end_date must not be before start_date")
        if end_date - start_date >= timedelta(days=FEED_MAX_DAYS):
            raise ValueError(f"NeoWs feed spans at most {FEED_MAX_DAYS} days")

        data = self._get_json(
            f"{self.base_url}/feed",
            {"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )
        if not isinstance(data, dict):
            raise NeoFetchError(f"Unexpected feed payload for {start_date}..{end_date}")
        by_date = data.get("near_earth_objects") or {}
        if not isinstance(by_date, dict):
            raise NeoFetchError(f"Malformed feed for {start_date}..{end_date}: near_earth_objects is not an object")

        ids = []
        for day in sorted(by_date):
            entries = by_date[day] or []
            if not isinstance(entries, list) or not all(isinstance(obj, dict) for obj in entries):
                raise NeoFetchError(f"Malformed feed entries for {day}")
            for obj in entries:
                neo_id = obj.get("id") or obj.get("neo_reference_id")
                if neo_id:
                    ids.append(str(neo_id))

        logger.info(f"Feed {start_date}..{end_date} lists {len(ids)} objects")
        return ids
