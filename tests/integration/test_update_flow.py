"""End-to-end update pass with the upstream services faked at the HTTP layer."""

import datetime
from unittest.mock import Mock

import pytest

from castlog.catalog.episodes import load_episode
from castlog.catalog.guests import GuestFile
from castlog.catalog.models import Label
from castlog.catalog.site import SiteClient
from castlog.config.schema import CastlogConfig
from castlog.pipeline.scheduler import EXIT_NO_UPDATE, EXIT_OK, PollMode, PollScheduler
from castlog.pipeline.updater import EpisodeUpdater
from castlog.social.search import SEARCH_RECENT_URL, TwitterClient
from castlog.video.youtube import VIDEOS_URL

UTC = datetime.timezone.utc
NOW = datetime.datetime(2023, 6, 10, 12, 0, tzinfo=UTC)

SITE_REPLY = {
    "latest": {
        "episode": 299,
        "airDate": "2023-06-09",
        "youTubeURL": "https://www.youtube.com/watch?v=OLD",
        "guestNames": ["Somebody Else"],
    }
}

SEARCH_REPLY = {
    "data": [
        {
            "id": "1667000000000000000",
            "text": "Tomorrow on @inlieuoffunshow: @SomeGuest! https://t.co/abc",
            "created_at": "2023-06-10T02:00:00.000Z",
            "author_id": "1",
            "entities": {
                "urls": [
                    {
                        "url": "https://t.co/abc",
                        "expanded_url": "https://youtu.be/XYZ",
                        "display_url": "youtu.be/XYZ",
                    }
                ],
                "mentions": [
                    {"username": "inlieuoffunshow", "id": "2"},
                    {"username": "SomeGuest", "id": "3"},
                ],
            },
        }
    ],
    "includes": {
        "users": [
            {
                "id": "3",
                "username": "SomeGuest",
                "name": "Some Guest",
                "description": "Writes about courts",
                "url": "",
            }
        ]
    },
    "meta": {"result_count": 1},
}

VIDEO_REPLY = {
    "items": [
        {
            "id": "XYZ",
            "snippet": {
                "publishedAt": "2023-06-10T02:05:00Z",
                "channelId": "UC123",
                "channelTitle": "In Lieu of Fun",
                "title": "Episode 300",
                "description": "It's cheese night with Some Guest.",
            },
        }
    ]
}


def _reply(payload) -> Mock:
    response = Mock(status_code=200, reason="OK")
    response.json.return_value = payload
    return response


@pytest.fixture
def session(monkeypatch) -> Mock:
    """A requests session that answers for the site, Twitter and YouTube."""
    replies = {
        "https://inlieuof.fun/latest.json": SITE_REPLY,
        SEARCH_RECENT_URL: SEARCH_REPLY,
        VIDEOS_URL: VIDEO_REPLY,
    }
    session = Mock()
    session.get.side_effect = lambda url, **kwargs: _reply(replies[url])
    return session


@pytest.fixture
def config(tmp_path) -> CastlogConfig:
    (tmp_path / "_episodes").mkdir()
    (tmp_path / "_data").mkdir()
    (tmp_path / "_data" / "guests.yaml").write_text(
        "# Guests of the show.\n# Keep records sorted by first appearance.\n"
        "- name: Somebody Else\n  episodes: [299]\n"
    )
    return CastlogConfig(
        episode_dir=tmp_path / "_episodes",
        guest_file=tmp_path / "_data" / "guests.yaml",
        check_repo=None,
    )


def _updater(config, session) -> EpisodeUpdater:
    return EpisodeUpdater(
        config,
        site=SiteClient(config.site_url, session=session),
        twitter=TwitterClient("A" * 30, session=session),
        youtube_key="AIzaSyTestKeyTestKeyTestKey123",
        session=session,
        clock=lambda: NOW,
    )


class TestUpdateFlow:
    def test_announcement_becomes_episode(self, config, session):
        scheduler = PollScheduler(
            PollMode.ONCE,
            run_pass=_updater(config, session).check_for_update,
            clock=lambda: NOW,
        )

        result = scheduler.run()

        assert result.exit_code == EXIT_OK
        path = config.episode_dir / "2023-06-11-0300.md"
        episode = load_episode(path)
        assert episode.episode == Label.numeric(300)
        assert episode.date == datetime.date(2023, 6, 11)
        assert episode.youtube == "https://www.youtube.com/watch?v=XYZ"
        assert episode.detail == "It's cheese night with Some Guest."
        assert episode.tags == ["cheese-night"]

        registry = GuestFile.load(config.guest_file)
        assert registry.header.startswith("# Guests of the show.\n")
        assert [(g.name, g.twitter, g.episodes) for g in registry.guests] == [
            ("Somebody Else", "", [299.0]),
            ("Some Guest", "SomeGuest", [300.0]),
        ]

        search_params = next(
            c.kwargs["params"] for c in session.get.call_args_list if c.args[0] == SEARCH_RECENT_URL
        )
        assert search_params["start_time"] == "2023-06-09T22:00:00Z"

    def test_second_pass_finds_nothing_new(self, config, session):
        updater = _updater(config, session)
        updater.check_for_update()
        before = (config.episode_dir / "2023-06-11-0300.md").read_text()

        result = PollScheduler(PollMode.ONCE, run_pass=updater.check_for_update, clock=lambda: NOW).run()

        # The site has not published episode 300 yet, so the same file is found and left alone
        assert result.exit_code == EXIT_NO_UPDATE
        assert (config.episode_dir / "2023-06-11-0300.md").read_text() == before
