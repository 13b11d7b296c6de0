import asyncio
from unittest.mock import Mock

import aiohttp
import pytest

from meteor_tracker.client import NASAClient


class FakeResponse:
    def __init__(self, payload=None, status=200, error=None, delay=0):
        self.status = status
        self._payload = payload
        self._error = error
        self._delay = delay
        self.session = None
        self.cancelled = False

    async def __aenter__(self):
        if self.session is not None:
            self.session.in_flight += 1
            self.session.max_in_flight = max(self.session.max_in_flight, self.session.in_flight)
        try:
            if self._delay:
                await asyncio.sleep(self._delay)
            if self._error is not None:
                raise self._error
        except asyncio.CancelledError:
            self.cancelled = True
            self._leave()
            raise
        except BaseException:
            self._leave()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self._leave()
        return False

    def _leave(self):
        if self.session is not None:
            self.session.in_flight -= 1

    def raise_for_status(self):
        if self.status >= 400:
            raise aiohttp.ClientResponseError(
                request_info=Mock(real_url="https://api.test"),
                history=(),
                status=self.status,
                message="error",
            )

    async def json(self, content_type="application/json"):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Stands in for aiohttp.ClientSession; responses are keyed by URL path."""

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.calls = []
        self.closed = False
        self.in_flight = 0
        self.max_in_flight = 0

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        for path, response in self.responses.items():
            if url.endswith(path):
                response.session = self
                return response
        return FakeResponse(status=404)

    async def close(self):
        self.closed = True


def make_neo(neo_id, name, approach_full, hazardous=False, velocity="50000", distance="100000",
             size=(0.1, 0.3), approaches=None):
    if approaches is None:
        approaches = [
            {
                "close_approach_date_full": approach_full,
                "relative_velocity": {"kilometers_per_hour": velocity},
                "miss_distance": {"kilometers": distance},
            }
        ]
    return {
        "id": neo_id,
        "name": name,
        "estimated_diameter": {
            "kilometers": {
                "estimated_diameter_min": size[0],
                "estimated_diameter_max": size[1],
            }
        },
        "close_approach_data": approaches,
        "is_potentially_hazardous_asteroid": hazardous,
    }


def make_feed(groups):
    return {
        "element_count": sum(len(objects) for objects in groups.values()),
        "near_earth_objects": groups,
    }


APOD_PAYLOAD = {
    "title": "Horsehead Nebula",
    "explanation": "A dark cloud of gas and dust.",
    "media_type": "image",
    "url": "https://apod.nasa.gov/apod/image/horsehead.jpg",
    "hdurl": "https://apod.nasa.gov/apod/image/horsehead_big.jpg",
    "date": "2024-01-01",
    "copyright": "\nJane Doe\n",
}


@pytest.fixture
def feed():
    return make_feed(
        {
            "2024-01-02": [
                make_neo("3", "(2024 CC)", "2024-Jan-02 08:30", hazardous=True, distance="5000"),
            ],
            "2024-01-01": [
                make_neo("1", "(2024 AA)", "2024-Jan-01 12:00", size=(0.5, 1.2)),
                make_neo("2", "(2024 AB)", "2024-Jan-01 03:15", hazardous=True),
                make_neo("4", "(2024 AD)", "2024-Jan-01 05:00", approaches=[]),
            ],
        }
    )


@pytest.fixture
def make_client():
    def _make(responses=None, **kwargs):
        session = FakeSession(responses)
        return NASAClient(base_url="https://api.test", api_key="TEST_KEY", session=session, **kwargs), session
    return _make


@pytest.fixture
def timeout_response():
    return FakeResponse(error=asyncio.TimeoutError())
