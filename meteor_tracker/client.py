"""
NASA API client for near-earth object feeds and the astronomy picture of the day.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

import asyncio
import logging
import ssl
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

import aiohttp
import certifi

from meteor_tracker.config import DEMO_API_KEY, NASA_API_BASE, Config
from meteor_tracker.models import MeteorEvent, PictureOfDay
from meteor_tracker.transform import to_events

_LOG = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"

FEED_PATH = "/neo/rest/v1/feed"
NEO_PATH = "/neo/rest/v1/neo/{neo_id}"
APOD_PATH = "/planetary/apod"


class FetchError(Exception):
    """An external call failed; the message is safe to show to users."""


class NASAClient:
    """Async client for the NASA NeoWs and APOD endpoints."""

    def __init__(
        self,
        base_url: str = NASA_API_BASE,
        api_key: Optional[str] = None,
        timeout: float = 10,
        session: Optional[aiohttp.ClientSession] = None,
        days_ahead: int = 7,
    ):
        """Initialize NASA client."""
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key or DEMO_API_KEY
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._days_ahead = days_ahead
        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_config(cls, config: Config, session: Optional[aiohttp.ClientSession] = None) -> "NASAClient":
        """Build a client from a Config."""
        return cls(
            base_url=config.base_url,
            api_key=config.api_key,
            timeout=config.timeout,
            session=session,
            days_ahead=config.days_ahead,
        )

    async def __aenter__(self):
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self) -> None:
        """Ensure an aiohttp session exists."""
        if self._session is None or (self._owns_session and self._session.closed):
            ssl_context = ssl.create_default_context(cafile=certifi.where())
            connector = aiohttp.TCPConnector(ssl=ssl_context, limit_per_host=5)
            headers = {
                "User-Agent": "meteor-tracker/0.1 (+https://api.nasa.gov)",
                "Accept": "application/json",
            }
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                connector=connector,
                headers=headers,
            )
            self._owns_session = True
            _LOG.info("🌐 NASA HTTP session created with SSL verification")

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Issue a single GET and decode the JSON body.

        Raises the underlying aiohttp, timeout or decoding error unchanged;
        public methods translate them into FetchError.
        """
        await self._ensure_session()
        if self._session.closed:
            # injected sessions belong to the caller and are never reopened
            raise aiohttp.ClientConnectionError("HTTP session is closed")

        query = {"api_key": self._api_key}
        if params:
            query.update(params)
        url = f"{self._base_url}{path}"

        _LOG.debug("Making request to %s", url)
        async with self._session.get(url, params=query, timeout=self._timeout) as response:
            _LOG.debug("Response: HTTP %s from %s", response.status, url)
            response.raise_for_status()
            return await response.json(content_type=None)

    async def _fetch(self, path: str, params: Optional[Dict[str, Any]], message: str) -> Any:
        try:
            return await self._get_json(path, params)
        except asyncio.TimeoutError as ex:
            _LOG.error("Timeout for %s: %s", path, ex)
            raise FetchError(message) from ex
        except aiohttp.ClientError as ex:
            _LOG.error("Client error for %s: %s", path, ex)
            raise FetchError(message) from ex
        except ValueError as ex:
            _LOG.error("Invalid JSON from %s: %s", path, ex)
            raise FetchError(message) from ex

    async def fetch_events(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Dict[str, Any]:
        """Fetch the NeoWs feed for an inclusive date range (default: the next week)."""
        if start_date is None:
            start_date = date.today()
        if end_date is None:
            end_date = date.today() + timedelta(days=self._days_ahead)

        params = {
            "start_date": start_date.strftime(DATE_FORMAT),
            "end_date": end_date.strftime(DATE_FORMAT),
        }
        data = await self._fetch(FEED_PATH, params, "Failed to fetch meteor data")
        if not isinstance(data, dict):
            _LOG.error("Unexpected NeoWs feed payload: %s", type(data).__name__)
            raise FetchError("Failed to fetch meteor data")

        _LOG.info("NEO feed fetched: %s objects", data.get("element_count", "?"))
        return data

    async def fetch_object_details(self, neo_id: str) -> Dict[str, Any]:
        """Fetch the full record of a single near-earth object."""
        data = await self._fetch(NEO_PATH.format(neo_id=neo_id), None, "Failed to fetch meteor details")
        if not isinstance(data, dict):
            raise FetchError("Failed to fetch meteor details")
        return data

    async def fetch_picture_of_day(self, day: Optional[date] = None) -> PictureOfDay:
        """Fetch the astronomy picture for ``day``, or the service's current one."""
        params = {}
        if day is not None:
            params["date"] = day.strftime(DATE_FORMAT)

        data = await self._fetch(APOD_PATH, params, "Failed to fetch astronomy picture")
        if not isinstance(data, dict):
            raise FetchError("Failed to fetch astronomy picture")

        picture = PictureOfDay.from_api(data)
        _LOG.info("APOD data fetched: %s", picture.title[:30])
        return picture

    async def fetch_hazardous_objects(self) -> List[Dict[str, Any]]:
        """Potentially hazardous objects of the default window, across all dates."""
        try:
            feed = await self.fetch_events()
        except FetchError as ex:
            raise FetchError("Failed to fetch hazardous asteroids") from ex

        hazardous = []
        for objects in (feed.get("near_earth_objects") or {}).values():
            hazardous.extend(
                neo for neo in objects or [] if neo.get("is_potentially_hazardous_asteroid")
            )
        return hazardous

    async def get_upcoming_meteors(self) -> List[MeteorEvent]:
        """Meteor events for the default upcoming window."""
        try:
            feed = await self.fetch_events()
        except FetchError as ex:
            raise FetchError("Failed to fetch upcoming meteors") from ex
        return to_events(feed)

    async def get_todays_meteors(self) -> List[MeteorEvent]:
        """Meteor events approaching today."""
        today = date.today()
        try:
            feed = await self.fetch_events(today, today)
        except FetchError as ex:
            raise FetchError("Failed to fetch today's meteors") from ex
        return to_events(feed)
