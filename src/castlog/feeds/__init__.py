"""Audio feed parsing for castlog."""

from castlog.feeds.models import AudioEpisode
from castlog.feeds.parser import RSSParser, html_to_text, parse_duration
from castlog.feeds.scan import episodes_missing_audio, unrecorded_audio

__all__ = [
    "AudioEpisode",
    "RSSParser",
    "episodes_missing_audio",
    "html_to_text",
    "parse_duration",
    "unrecorded_audio",
]
