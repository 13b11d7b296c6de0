"""
Meteor dashboard: concurrent data load, list view state and text rendering.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

import asyncio
import logging
import math
from typing import List, Optional

from meteor_tracker.client import FetchError, NASAClient
from meteor_tracker.config import SORT_KEYS
from meteor_tracker.models import DashboardData, MeteorEvent, PictureOfDay
from meteor_tracker.transform import approach_sort_key

_LOG = logging.getLogger(__name__)

EXPLANATION_LIMIT = 200

APP_TITLE = "🌠 PDX Meteor Tracker"
APP_SUBTITLE = "Track Near Earth Objects and meteors approaching our planet"


async def _picture_or_none(client: NASAClient) -> Optional[PictureOfDay]:
    try:
        return await client.fetch_picture_of_day()
    except FetchError as ex:
        _LOG.warning("APOD unavailable, omitting section: %s", ex)
        return None


async def load_dashboard(client: NASAClient) -> DashboardData:
    """
    Load upcoming meteors and the picture of the day concurrently.

    A picture failure leaves ``picture`` as None; a meteor failure
    propagates as FetchError and cancels the picture request.
    """
    meteors_task = asyncio.ensure_future(client.get_upcoming_meteors())
    picture_task = asyncio.ensure_future(_picture_or_none(client))

    try:
        meteors = await meteors_task
    except BaseException:
        meteors_task.cancel()
        picture_task.cancel()
        await asyncio.gather(meteors_task, picture_task, return_exceptions=True)
        raise
    picture = await picture_task

    _LOG.info("Dashboard loaded: %d meteors, picture %s", len(meteors), "present" if picture else "absent")
    return DashboardData(meteors=meteors, picture=picture)


class MeteorListView:
    """Filter and sort state for a list of meteor events."""

    def __init__(
        self,
        meteors: List[MeteorEvent],
        title: str = "Meteors",
        show_only_hazardous: bool = False,
        sort_by: str = "date",
    ):
        self.meteors = list(meteors)
        self.title = title
        self.show_only_hazardous = show_only_hazardous
        self.sort_by = sort_by

    @property
    def sort_by(self) -> str:
        return self._sort_by

    @sort_by.setter
    def sort_by(self, value: str) -> None:
        if value not in SORT_KEYS:
            raise ValueError(f"Unknown sort key: {value!r}")
        self._sort_by = value

    @property
    def total(self) -> int:
        return len(self.meteors)

    @property
    def hazardous_count(self) -> int:
        return sum(1 for meteor in self.meteors if meteor.is_hazardous)

    def visible(self) -> List[MeteorEvent]:
        """Meteors after the hazard filter, in the selected order."""
        meteors = self.meteors
        if self.show_only_hazardous:
            meteors = [meteor for meteor in meteors if meteor.is_hazardous]

        if self.sort_by == "size":
            return sorted(meteors, key=lambda m: m.estimated_size.max, reverse=True)
        if self.sort_by == "distance":
            return sorted(meteors, key=lambda m: m.distance.value)
        return sorted(meteors, key=approach_sort_key)


def format_number(value: float) -> str:
    """Group thousands and keep at most two fraction digits."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "∞" if value > 0 else "-∞"
    text = f"{value:,.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_approach_time(meteor: MeteorEvent) -> str:
    approach_time = meteor.approach_time
    if approach_time is None:
        return meteor.approach_date or "Unknown date"
    hour = approach_time.hour % 12 or 12
    return (
        f"{approach_time:%B} {approach_time.day}, {approach_time.year} "
        f"at {hour}:{approach_time:%M %p}"
    )


def render_card(meteor: MeteorEvent) -> str:
    """Render one meteor as a block of text lines."""
    header = meteor.name
    if meteor.is_hazardous:
        header += "  ⚠️ Potentially Hazardous"

    size = meteor.estimated_size
    lines = [
        header,
        f"  {format_approach_time(meteor)}",
        f"  Size Range: {format_number(size.min * 1000)} - {format_number(size.max * 1000)} meters",
        f"  Velocity: {format_number(meteor.velocity.value)} {meteor.velocity.unit}",
        f"  Miss Distance: {format_number(meteor.distance.value)} {meteor.distance.unit}",
        f"  Object ID: {meteor.id}",
    ]
    return "\n".join(lines)


def render_picture(picture: Optional[PictureOfDay]) -> str:
    """Render the picture of the day; only image pictures are shown."""
    if picture is None or not picture.is_image:
        return ""

    explanation = picture.explanation
    if len(explanation) > EXPLANATION_LIMIT:
        explanation = explanation[:EXPLANATION_LIMIT] + "..."

    lines = [
        "📸 Astronomy Picture of the Day",
        picture.title,
        picture.url,
        explanation,
    ]
    if picture.copyright:
        lines.append(f"© {picture.copyright}")
    return "\n".join(lines)


def render_list(view: MeteorListView) -> str:
    if view.total == 0:
        return "\n".join([
            "🌌 No meteors found",
            "No meteor data available for the selected time period.",
        ])

    summary = f"{view.total} total meteors"
    if view.hazardous_count > 0:
        summary += f" ({view.hazardous_count} potentially hazardous)"

    blocks = [f"{view.title}\n{summary}"]
    visible = view.visible()
    blocks.extend(render_card(meteor) for meteor in visible)
    if not visible and view.show_only_hazardous:
        blocks.append("No potentially hazardous meteors found in this time period.")
    return "\n\n".join(blocks)


def render_dashboard(data: DashboardData, show_only_hazardous: bool = False, sort_by: str = "date") -> str:
    """Render the whole dashboard as text."""
    view = MeteorListView(
        data.meteors,
        title="Upcoming Near Earth Objects",
        show_only_hazardous=show_only_hazardous,
        sort_by=sort_by,
    )
    sections = [f"{APP_TITLE}\n{APP_SUBTITLE}"]
    picture = render_picture(data.picture)
    if picture:
        sections.append(picture)
    sections.append(render_list(view))
    sections.append("Data provided by NASA Open Data Portal (https://api.nasa.gov)")
    return "\n\n".join(sections)


def render_error(message: str) -> str:
    return "\n".join([
        APP_TITLE,
        "⚠️ Error Loading Data",
        message,
        "Try again by re-running the tracker.",
    ])
