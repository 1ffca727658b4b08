from typing import Iterable

from neowatch.models.neo import TrackedObject

HEADER = "Hazard?   Distance(km)    When                 Name"


def format_report(neos: Iterable[TrackedObject]) -> str:
    """Plain-text table of the closest passing of each object."""
    lines = [HEADER]
    for neo in neos:
        passing = neo.closest_approach()
        if passing is None:
            continue
        hazard = "!!!" if neo.is_potentially_hazardous else " No"
        lines.append(f"{hazard}       {passing.miss_distance_km:12.3f}  {passing.when:<20} {neo.name}")
    return "\n".join(lines)
