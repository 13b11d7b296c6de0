"""
Flatten the NeoWs date-grouped feed into sorted meteor events.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from meteor_tracker.models import Measurement, MeteorEvent, SizeRange

_LOG = logging.getLogger(__name__)


def _parse_float(value: Any) -> float:
    """Parse a string-encoded number; malformed values become NaN."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def approach_sort_key(event: MeteorEvent) -> Tuple[int, datetime]:
    approach_time = event.approach_time
    if approach_time is None:
        return 1, datetime.max
    return 0, approach_time


def _to_event(date_key: str, neo: Dict[str, Any]) -> Optional[MeteorEvent]:
    approaches = neo.get("close_approach_data") or []
    approach = approaches[0] if approaches else None
    if not approach:
        return None

    diameter = (neo.get("estimated_diameter") or {}).get("kilometers") or {}
    velocity = approach.get("relative_velocity") or {}
    distance = approach.get("miss_distance") or {}

    return MeteorEvent(
        id=str(neo.get("id", "")),
        name=neo.get("name", ""),
        date=date_key,
        estimated_size=SizeRange(
            min=_parse_float(diameter.get("estimated_diameter_min")),
            max=_parse_float(diameter.get("estimated_diameter_max")),
            unit="km",
        ),
        velocity=Measurement(_parse_float(velocity.get("kilometers_per_hour")), "km/h"),
        distance=Measurement(_parse_float(distance.get("kilometers")), "km"),
        is_hazardous=neo.get("is_potentially_hazardous_asteroid", False),
        approach_date=approach.get("close_approach_date_full", ""),
    )


def to_events(raw_feed: Dict[str, Any]) -> List[MeteorEvent]:
    """
    Transform a NeoWs feed response into meteor events.

    Only the first close approach of each object is used; objects without
    any approach data are dropped. The result is sorted by approach time
    with a stable sort, unparseable timestamps last.
    """
    events: List[MeteorEvent] = []
    skipped = 0

    for date_key, objects in (raw_feed.get("near_earth_objects") or {}).items():
        for neo in objects or []:
            event = _to_event(date_key, neo)
            if event is None:
                skipped += 1
                continue
            events.append(event)

    if skipped:
        _LOG.debug("Skipped %d objects without close approach data", skipped)

    return sorted(events, key=approach_sort_key)
