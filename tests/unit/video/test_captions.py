"""Tests for YouTube caption retrieval."""

from unittest.mock import MagicMock, Mock

import pytest
from youtube_transcript_api._errors import NoTranscriptFound, TranscriptsDisabled, VideoUnavailable

from castlog.utils.errors import NoCaptionsError, VideoNotFoundError
from castlog.video.captions import Caption, CaptionFetcher, Transcript


def _snippet(start: float, duration: float, text: str) -> Mock:
    return Mock(start=start, duration=duration, text=text)


def _transcript(language: str, snippets: list) -> Mock:
    transcript = Mock(language_code=language)
    transcript.fetch.return_value = snippets
    return transcript


def _listing(preferred=None, others=()) -> MagicMock:
    listing = MagicMock()
    if preferred is not None:
        listing.find_transcript.return_value = preferred
    else:
        listing.find_transcript.side_effect = NoTranscriptFound("abc", ["en"], listing)
    listing.__iter__.return_value = iter(list(others))
    return listing


class TestCaptionFetcher:
    """Tests for CaptionFetcher class."""

    def test_prefers_english(self):
        api = Mock()
        api.list.return_value = _listing(
            preferred=_transcript("en", [_snippet(0.0, 1.5, "Hello"), _snippet(1.5, 2.0, "world")])
        )

        transcript = CaptionFetcher(api=api).fetch("abc")

        assert transcript.video_id == "abc"
        assert transcript.language == "en"
        assert [c.text for c in transcript.captions] == ["Hello", "world"]
        api.list.return_value.find_transcript.assert_called_once_with(["en"])

    def test_falls_back_to_first_listed(self):
        api = Mock()
        api.list.return_value = _listing(others=[_transcript("de", [_snippet(0.0, 1.0, "Hallo")])])

        transcript = CaptionFetcher(api=api).fetch("abc")

        assert transcript.language == "de"
        assert transcript.captions[0].text == "Hallo"

    def test_no_transcripts(self):
        api = Mock()
        api.list.return_value = _listing()

        with pytest.raises(NoCaptionsError):
            CaptionFetcher(api=api).fetch("abc")

    def test_disabled(self):
        api = Mock()
        api.list.side_effect = TranscriptsDisabled("abc")

        with pytest.raises(NoCaptionsError, match="disabled"):
            CaptionFetcher(api=api).fetch("abc")

    def test_unavailable(self):
        api = Mock()
        api.list.side_effect = VideoUnavailable("abc")

        with pytest.raises(VideoNotFoundError):
            CaptionFetcher(api=api).fetch("abc")


class TestTranscript:
    def test_to_json(self):
        transcript = Transcript(
            video_id="abc",
            captions=[Caption(start=3285.28, duration=4.88, text="surprised you")],
        )
        assert transcript.to_json() == {
            "transcript": {
                "videoID": "abc",
                "captions": [{"startSec": 3285.28, "durationSec": 4.88, "text": "surprised you"}],
            }
        }
