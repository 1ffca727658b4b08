"""
Near-Earth Object records as returned by the NASA NeoWs lookup endpoint.

Only the fields used for ranking are kept; everything else in the payload
(estimated diameter, orbital data, links) is ignored.
"""
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# e.g. "2024-Jan-05 12:34"
NEOWS_DATETIME_FORMAT = "%Y-%b-%d %H:%M"


class ApproachEvent(BaseModel):
    """One predicted close pass of an object."""
    model_config = ConfigDict(frozen=True)

    close_approach_date: date
    close_approach_datetime: Optional[datetime] = None
    miss_distance_km: float
    relative_velocity_km_s: float
    orbiting_body: str = "Earth"

    @field_validator("close_approach_datetime", mode="before")
    @classmethod
    def parse_full_date(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return datetime.strptime(value, NEOWS_DATETIME_FORMAT)
            except ValueError:
                return None
        return value

    @classmethod
    def from_neows(cls, payload: Dict[str, Any]) -> "ApproachEvent":
        """Build from a `close_approach_data` entry."""
        return cls(
            close_approach_date=payload.get("close_approach_date"),
            close_approach_datetime=payload.get("close_approach_date_full"),
            miss_distance_km=(payload.get("miss_distance") or {}).get("kilometers"),
            relative_velocity_km_s=(payload.get("relative_velocity") or {}).get("kilometers_per_second"),
            orbiting_body=payload.get("orbiting_body") or "Earth",
        )

    @property
    def when(self) -> str:
        if self.close_approach_datetime:
            return self.close_approach_datetime.strftime("%Y-%m-%d %H:%M")
        return self.close_approach_date.isoformat()


class TrackedObject(BaseModel):
    """A single NEO with its close approach events."""
    neo_id: str
    name: str
    is_potentially_hazardous: bool = False
    close_approach_data: List[ApproachEvent] = Field(default_factory=list)

    @field_validator("close_approach_data", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @classmethod
    def from_neows(cls, payload: Dict[str, Any]) -> "TrackedObject":
        """
        Build from a NeoWs lookup payload.

        Raises pydantic.ValidationError when required fields are missing
        or cannot be parsed.
        """
        approaches = payload.get("close_approach_data") or []
        neo_id = payload.get("id") or payload.get("neo_reference_id")
        return cls(
            neo_id=str(neo_id) if neo_id is not None else None,
            name=payload.get("name") or "",
            is_potentially_hazardous=bool(payload.get("is_potentially_hazardous_asteroid", False)),
            close_approach_data=[ApproachEvent.from_neows(a) for a in approaches],
        )

    def closest_approach(self) -> Optional[ApproachEvent]:
        if not self.close_approach_data:
            return None
        return min(self.close_approach_data, key=lambda e: e.miss_distance_km)

    def with_events(self, events: List[ApproachEvent]) -> "TrackedObject":
        """Copy of this object carrying only the given events."""
        return self.model_copy(update={"close_approach_data": list(events)})
