"""
Data models for meteor events and the astronomy picture of the day.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

APPROACH_DATE_FORMATS = (
    "%Y-%b-%d %H:%M",
    "%Y-%b-%d",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
)


def parse_approach_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a NeoWs approach timestamp such as ``2024-Jan-01 12:00``."""
    if not value:
        return None
    for fmt in APPROACH_DATE_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt)
        except ValueError:
            continue
    return None


@dataclass(frozen=True)
class Measurement:
    value: float
    unit: str


@dataclass(frozen=True)
class SizeRange:
    min: float
    max: float
    unit: str = "km"


@dataclass(frozen=True)
class MeteorEvent:
    """A single close approach, flattened for display."""

    id: str
    name: str
    date: str  # feed date group key
    estimated_size: SizeRange
    velocity: Measurement  # km/h
    distance: Measurement  # km
    is_hazardous: bool
    approach_date: str  # close_approach_date_full

    @property
    def approach_time(self) -> Optional[datetime]:
        return parse_approach_date(self.approach_date)


@dataclass(frozen=True)
class PictureOfDay:
    """Astronomy Picture of the Day."""

    title: str
    explanation: str
    media_type: str
    url: str
    copyright: Optional[str] = None
    date: Optional[str] = None
    hdurl: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PictureOfDay":
        """Build from the ``/planetary/apod`` JSON payload."""
        copyright_text = data.get("copyright")
        if copyright_text:
            copyright_text = copyright_text.strip()
        return cls(
            title=data.get("title", ""),
            explanation=data.get("explanation", ""),
            media_type=data.get("media_type", ""),
            url=data.get("url", ""),
            copyright=copyright_text or None,
            date=data.get("date"),
            hdurl=data.get("hdurl"),
        )

    @property
    def is_image(self) -> bool:
        return self.media_type == "image"


@dataclass
class DashboardData:
    meteors: List[MeteorEvent] = field(default_factory=list)
    picture: Optional[PictureOfDay] = None
