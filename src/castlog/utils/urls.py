"""URL normalization for stream links found in social posts.

Posts carry links in up to three forms (the unwound redirect target, the
platform-expanded URL and the raw short URL). This module picks the best of
them, recognizes the streaming platforms the show uses, and strips tracking
noise so the same stream always yields the same URL.
"""

import logging
from enum import Enum
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

logger = logging.getLogger(__name__)

YOUTUBE_HOSTS = ("youtube.com", "www.youtube.com", "m.youtube.com")
YOUTUBE_SHORT_HOSTS = ("youtu.be",)
CROWDCAST_HOSTS = ("crowdcast.io", "www.crowdcast.io")

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={}"


class Platform(str, Enum):
    """Streaming platform a link points at."""

    YOUTUBE = "youtube"
    CROWDCAST = "crowdcast"
    OTHER = "other"


def parse_absolute_url(candidate: str | None):
    """Parse candidate as an absolute http(s) URL.

    Returns:
        The parsed URL, or None if candidate is empty or not a valid URL
    """
    if not candidate:
        return None
    try:
        parsed = urlparse(candidate.strip())
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return parsed


def pick_url(*candidates: str | None):
    """Return the first candidate that parses as a valid URL.

    Candidates are given in preference order, normally
    ``(unwound_url, expanded_url, url)``.

    Returns:
        Parsed URL, or None if no candidate is usable
    """
    for candidate in candidates:
        parsed = parse_absolute_url(candidate)
        if parsed is not None:
            return parsed
    return None


def _host(url: str) -> str:
    parsed = parse_absolute_url(url)
    return parsed.netloc.lower() if parsed else ""


def platform_of(url: str) -> Platform:
    """Classify url by its host."""
    host = _host(url)
    if host in YOUTUBE_HOSTS or host in YOUTUBE_SHORT_HOSTS:
        return Platform.YOUTUBE
    if host in CROWDCAST_HOSTS:
        return Platform.CROWDCAST
    return Platform.OTHER


def youtube_video_id(url: str) -> str | None:
    """Extract the YouTube video ID from url.

    Handles these formats:
    - youtube.com/watch?v=ID
    - youtu.be/ID
    - youtube.com/embed/ID
    - youtube.com/v/ID

    Args:
        url: Candidate URL

    Returns:
        Video ID, or None if url is not a YouTube video URL

    Examples:
        >>> youtube_video_id("https://youtu.be/abc123?t=42")
        'abc123'
        >>> youtube_video_id("https://www.youtube.com/watch?v=ID&feature=x")
        'ID'
    """
    parsed = parse_absolute_url(url)
    if parsed is None:
        return None
    host = parsed.netloc.lower()

    if host in YOUTUBE_HOSTS:
        if parsed.path == "/watch":
            values = parse_qs(parsed.query).get("v")
            if values and values[0]:
                return values[0]
        elif parsed.path.startswith(("/embed/", "/v/")):
            parts = parsed.path.split("/")
            if len(parts) >= 3 and parts[2]:
                return parts[2]
    elif host in YOUTUBE_SHORT_HOSTS:
        video_id = parsed.path.strip("/").split("/")[0]
        return video_id or None

    return None


def clean_url(url: str) -> str:
    """Normalize a stream URL, dropping tracking parameters.

    YouTube links are rewritten to the canonical watch URL carrying only the
    video ID. Crowdcast links lose their query string. Links to any other
    host are returned unchanged.
    """
    parsed = parse_absolute_url(url)
    if parsed is None:
        return url
    host = parsed.netloc.lower()

    if host in YOUTUBE_HOSTS or host in YOUTUBE_SHORT_HOSTS:
        video_id = youtube_video_id(url)
        if video_id:
            return YOUTUBE_WATCH_URL.format(video_id)
        # No ID: keep the page, drop everything but "v"
        query = {k: v for k, v in parse_qs(parsed.query).items() if k == "v"}
        return urlunparse(parsed._replace(query=urlencode(query, doseq=True)))

    if host in CROWDCAST_HOSTS:
        return urlunparse(parsed._replace(query="", fragment=""))

    return url
