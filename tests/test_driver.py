import json

import pytest

from meteor_tracker import driver
from meteor_tracker.client import NASAClient

from conftest import APOD_PAYLOAD, FakeResponse, FakeSession


@pytest.fixture
def patch_client(monkeypatch):
    def _patch(responses):
        session = FakeSession(responses)
        original = NASAClient.from_config.__func__

        def from_config(cls, config, session_=None):
            return original(cls, config, session=session)

        monkeypatch.setattr(NASAClient, "from_config", classmethod(from_config))
        return session
    return _patch


@pytest.mark.asyncio
async def test_main_prints_dashboard(tmp_path, patch_client, feed, capsys):
    patch_client(
        {
            "/neo/rest/v1/feed": FakeResponse(feed),
            "/planetary/apod": FakeResponse(APOD_PAYLOAD),
        }
    )

    code = await driver.main(str(tmp_path / "config.json"))

    out = capsys.readouterr().out
    assert code == 0
    assert "PDX Meteor Tracker" in out
    assert "Horsehead Nebula" in out
    assert "3 total meteors (2 potentially hazardous)" in out


@pytest.mark.asyncio
async def test_main_reports_fetch_error(tmp_path, patch_client, capsys):
    patch_client({"/neo/rest/v1/feed": FakeResponse(status=500)})

    code = await driver.main(str(tmp_path / "config.json"))

    out = capsys.readouterr().out
    assert code == 1
    assert "Error Loading Data" in out
    assert "Failed to fetch upcoming meteors" in out


@pytest.mark.asyncio
async def test_main_ignores_unknown_sort_key(tmp_path, patch_client, feed, capsys):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"sort_by": "name", "show_only_hazardous": True}))
    patch_client(
        {
            "/neo/rest/v1/feed": FakeResponse(feed),
            "/planetary/apod": FakeResponse(APOD_PAYLOAD),
        }
    )

    code = await driver.main(str(path))

    out = capsys.readouterr().out
    assert code == 0
    assert "(2024 AB)" in out
    assert "(2024 CC)" in out
    assert "(2024 AA)" not in out
    assert out.index("(2024 AB)") < out.index("(2024 CC)")
