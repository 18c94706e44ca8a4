"""RSS feed parser using feedparser."""

import logging
from calendar import timegm
from datetime import datetime, timedelta, timezone
from typing import Any

import feedparser
import requests
from bs4 import BeautifulSoup, NavigableString, Tag

from castlog.feeds.models import AudioEpisode
from castlog.utils.errors import FeedParseError
from castlog.utils.http import fetch

logger = logging.getLogger(__name__)

DEFAULT_FEED_URL = "https://feeds.acast.com/public/shows/in-lieu-of-fun"
ACAST_EPISODE_BASE = "https://shows.acast.com/{show}/episodes/{episode}"

_DURATION_UNITS = ("seconds", "minutes", "hours")


def parse_duration(text: str) -> timedelta:
    """Parse an ``[[HH:]MM:]SS`` duration.

    Raises:
        ValueError: If any component is not an integer

    Examples:
        >>> parse_duration("1:02:03")
        datetime.timedelta(seconds=3723)
        >>> parse_duration("45")
        datetime.timedelta(seconds=45)
    """
    parts = text.strip().split(":", 2)
    total = timedelta()
    for unit, part in zip(_DURATION_UNITS, reversed(parts)):
        total += timedelta(**{unit: int(part)})
    return total


def html_to_text(html: str) -> tuple[str, list[str]]:
    """Reduce an HTML episode description to plain text and its links.

    Paragraphs and line breaks become newlines. The publisher appends a
    disclaimer after a top-level ``<br>``; everything from there on is
    dropped. Breaks inside paragraphs are part of the text.

    Returns:
        Tuple of (text, list of link targets)
    """
    soup = BeautifulSoup(html, "html.parser")
    links: list[str] = []
    chunks: list[str] = []

    def collect(node: Any) -> None:
        if isinstance(node, NavigableString):
            chunks.append(str(node))
            return
        if not isinstance(node, Tag):
            return
        if node.name == "br":
            chunks.append("\n")
            return
        if node.name == "a" and node.get("href"):
            links.append(node["href"])
        for child in node.children:
            collect(child)
        if node.name == "p":
            chunks.append("\n")

    for node in soup.contents:
        if isinstance(node, Tag) and node.name == "br":
            break
        collect(node)

    lines = [line.strip() for line in "".join(chunks).strip().split("\n")]
    return "\n".join(lines), links


def _struct_to_datetime(st: Any) -> datetime | None:
    """Convert feedparser's time.struct_time to a timezone-aware datetime."""
    if st is None:
        return None
    return datetime.fromtimestamp(timegm(st), tz=timezone.utc)


def _extension(node: Any, name: str) -> str:
    """Read an ``acast:`` extension element from a feed or entry."""
    for key in (f"acast_{name.lower()}", f"acast_{name}"):
        value = node.get(key)
        if value:
            return str(value).strip()
    return ""


def _audio_link(entry: Any) -> str:
    for enclosure in entry.get("enclosures", []):
        if enclosure.get("type") == "audio/mpeg":
            return enclosure.get("href", "")
    return ""


class RSSParser:
    """Parses the show's audio feed and extracts episode information."""

    def __init__(self, timeout: int = 30, session: requests.Session | None = None) -> None:
        """Initialize the RSS parser.

        Args:
            timeout: HTTP request timeout in seconds.
            session: Optional requests session to fetch with.
        """
        self.timeout = timeout
        self.session = session

    def fetch_feed(self, url: str = DEFAULT_FEED_URL) -> list[AudioEpisode]:
        """Fetch and parse the feed at url.

        Raises:
            NetworkError: If the feed cannot be fetched
            FeedParseError: If the content is not a usable feed
        """
        response = fetch(url, timeout=self.timeout, session=self.session)
        episodes = self.parse(response.content)
        logger.info(f"Loaded {len(episodes)} audio episodes from {url}")
        return episodes

    def parse(self, content: str | bytes) -> list[AudioEpisode]:
        """Parse feed content into audio episodes, newest first as published.

        Raises:
            FeedParseError: If the content is not a feed
        """
        feed = feedparser.parse(content)
        if feed.get("bozo") and not feed.entries:
            raise FeedParseError(f"Parsing feed: {feed.get('bozo_exception')}")

        # Episodes do not always link back to their landing page, so rebuild
        # it from the show URL when the feed provides the extension.
        show = _extension(feed.feed, "showUrl")
        return [self._episode(show, entry) for entry in feed.entries]

    def _episode(self, show: str, entry: Any) -> AudioEpisode:
        raw = entry.get("summary", "") or entry.get("description", "")
        episode = AudioEpisode(
            title=entry.get("title", ""),
            subtitle=entry.get("subtitle", "") or entry.get("itunes_subtitle", ""),
            description=raw,
            raw_description=raw,
            page_link=entry.get("link", ""),
            file_link=_audio_link(entry),
            published=_struct_to_datetime(entry.get("published_parsed")),
        )
        if raw:
            episode.description, episode.desc_links = html_to_text(raw)

        episode_name = _extension(entry, "episodeUrl")
        if show and episode_name:
            episode.page_link = ACAST_EPISODE_BASE.format(show=show, episode=episode_name)

        duration = entry.get("itunes_duration", "")
        if duration:
            try:
                episode.duration = parse_duration(duration)
            except ValueError:
                logger.debug(f"Ignoring unparseable duration {duration!r}")
        return episode
