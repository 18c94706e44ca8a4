"""Tests for the site episode index client."""

import datetime
from unittest.mock import Mock

import pytest

from castlog.catalog.site import SiteClient
from castlog.utils.errors import CatalogError, NetworkError, UpstreamError


def _session(payload, status_code: int = 200) -> Mock:
    session = Mock()
    response = Mock(status_code=status_code, reason="Not Found")
    response.json.return_value = payload
    session.get.return_value = response
    return session


class TestSiteClient:
    """Tests for SiteClient class."""

    def test_latest_episode(self):
        session = _session({"latest": {"episode": "412", "airDate": "2022-05-06"}})
        client = SiteClient("https://site.example/", session=session)

        ep = client.latest_episode()

        assert ep.number == 412
        assert ep.date == datetime.date(2022, 5, 6)
        assert session.get.call_args[0][0] == "https://site.example/latest.json"

    def test_fetch_episode_by_label(self):
        session = _session({"episode": {"episode": 12, "airDate": "2020-04-01"}})
        client = SiteClient("https://site.example", session=session)

        client.fetch_episode("12")

        assert session.get.call_args[0][0] == "https://site.example/episode/12.json"

    def test_all_episodes(self):
        session = _session(
            {
                "episodes": [
                    {"episode": 1, "airDate": "2020-03-16"},
                    {"episode": "bonus", "airDate": "2020-03-17"},
                ]
            }
        )
        episodes = SiteClient(session=session).all_episodes()

        assert [str(ep.episode) for ep in episodes] == ["1", "bonus"]

    def test_missing_record(self):
        client = SiteClient(session=_session({"other": {}}))
        with pytest.raises(NetworkError, match="no 'latest' episode record"):
            client.latest_episode()

    def test_invalid_record(self):
        client = SiteClient(session=_session({"latest": {"episode": 1}}))
        with pytest.raises(CatalogError, match="Invalid episode record"):
            client.latest_episode()

    def test_http_error(self):
        client = SiteClient(session=_session({}, status_code=404))
        with pytest.raises(UpstreamError) as exc:
            client.fetch_episode(9999)
        assert exc.value.status_code == 404
