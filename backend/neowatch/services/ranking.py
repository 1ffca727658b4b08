"""
Proximity ranking of tracked objects.

Pure functions only: filtering and sorting never touch the network and never
mutate the objects they are given.
"""
from typing import Callable, Dict, Iterable, List, Optional

from neowatch.models.neo import TrackedObject
from neowatch.services.date_window import DateWindow

ProximityKey = Callable[[TrackedObject], float]


def closest_miss_distance(neo: TrackedObject) -> float:
    """Minimum miss distance (km) among the object's events."""
    return min(e.miss_distance_km for e in neo.close_approach_data)


def fastest_relative_velocity(neo: TrackedObject) -> float:
    """Negated maximum relative velocity, so the fastest pass sorts first."""
    return -max(e.relative_velocity_km_s for e in neo.close_approach_data)


PROXIMITY_STRATEGIES: Dict[str, ProximityKey] = {
    "miss_distance": closest_miss_distance,
    "velocity": fastest_relative_velocity,
}


def get_proximity_strategy(name: str) -> ProximityKey:
    try:
        return PROXIMITY_STRATEGIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown proximity strategy '{name}', expected one of {sorted(PROXIMITY_STRATEGIES)}"
        ) from None


def filter_to_window(neos: Iterable[TrackedObject], window: DateWindow) -> List[TrackedObject]:
    """
    Keep only events inside the window.
    Objects left without events are dropped; survivors are copies.
    """
    kept = []
    for neo in neos:
        events = [e for e in neo.close_approach_data if window.contains(e.close_approach_date)]
        if events:
            kept.append(neo.with_events(events))
    return kept


def rank_closest(
    neos: Iterable[TrackedObject],
    limit: int,
    window: Optional[DateWindow] = None,
    proximity: ProximityKey = closest_miss_distance,
) -> List[TrackedObject]:
    """
    Get the closest passings in the active window.

    Ties keep input order (sorted() is stable).
    """
    if limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")
    if limit == 0:
        return []

    if window is None:
        window = DateWindow.current_week()

    candidates = filter_to_window(neos, window)
    return sorted(candidates, key=proximity)[:limit]
