from datetime import date, datetime, timezone

import pytest

from neowatch.models.neo import ApproachEvent, TrackedObject
from neowatch.services.date_window import DateWindow

# Wednesday; the week runs 2024-01-08 (Mon) .. 2024-01-14 (Sun)
NOW = datetime(2024, 1, 10, 15, 30, tzinfo=timezone.utc)


def make_event(day, km, velocity=10.0):
    return ApproachEvent(
        close_approach_date=day,
        miss_distance_km=km,
        relative_velocity_km_s=velocity,
    )


def make_neo(neo_id, events=(), hazardous=False, name=None):
    return TrackedObject(
        neo_id=neo_id,
        name=name or f"({neo_id})",
        is_potentially_hazardous=hazardous,
        close_approach_data=list(events),
    )


def neows_payload(neo_id, approaches, hazardous=False):
    """Minimal NeoWs lookup body."""
    return {
        "id": neo_id,
        "neo_reference_id": neo_id,
        "name": f"({neo_id})",
        "is_potentially_hazardous_asteroid": hazardous,
        "close_approach_data": [
            {
                "close_approach_date": day,
                "close_approach_date_full": full,
                "miss_distance": {"kilometers": str(km), "lunar": "1.0"},
                "relative_velocity": {"kilometers_per_second": "12.5"},
                "orbiting_body": "Earth",
            }
            for day, full, km in approaches
        ],
    }


@pytest.fixture
def window():
    return DateWindow.current_week(NOW)


@pytest.fixture
def in_week():
    return date(2024, 1, 11)


@pytest.fixture
def out_of_week():
    return date(2024, 3, 1)
