"""Turn announcement posts into episode update candidates."""

import datetime
import logging

from castlog.catalog.models import Guest
from castlog.config.schema import SocialConfig
from castlog.social.models import Post, SearchResult, Update
from castlog.social.search import TwitterClient, build_query, search_window
from castlog.utils.text import contains_word
from castlog.utils.urls import Platform, clean_url, pick_url, platform_of, youtube_video_id

logger = logging.getLogger(__name__)


def _air_date(post: Post) -> datetime.date:
    """Infer the broadcast date announced by post.

    Announcements made the evening before say "tomorrow".
    """
    posted = post.created_at.astimezone(datetime.timezone.utc).date()
    if contains_word(post.text, "tomorrow"):
        return posted + datetime.timedelta(days=1)
    return posted


def _extract_update(post: Post, result: SearchResult, known: set[str]) -> Update:
    update = Update(post_id=post.id, posted=post.created_at, air_date=_air_date(post))

    for entity in post.entities.urls:
        parsed = pick_url(entity.unwound_url, entity.expanded_url, entity.url)
        if parsed is None:
            continue
        url = parsed.geturl()
        platform = platform_of(url)
        if platform == Platform.CROWDCAST:
            update.crowdcast = clean_url(url)
        elif platform == Platform.YOUTUBE and youtube_video_id(url):
            update.youtube = clean_url(url)

    for mention in post.entities.mentions:
        if mention.username.lower() in known:
            continue
        guest = Guest(twitter=mention.username)
        user = result.find_user(mention.username)
        if user is not None:
            guest.name = user.name
            guest.url = user.profile_url()
            guest.notes = user.description
        update.guests.append(guest)

    return update


def extract_updates(result: SearchResult, known_handles: list[str]) -> list[Update]:
    """Build one update per post, oldest post first.

    Args:
        result: Search results with their included users
        known_handles: Handles that are never guests (case-insensitive)

    Returns:
        Update candidates in posting order
    """
    known = {h.lower().lstrip("@") for h in known_handles}
    posts = sorted(result.posts, key=lambda p: p.created_at)
    updates = [_extract_update(post, result, known) for post in posts]
    logger.debug(f"Extracted {len(updates)} updates from {len(posts)} posts")
    return updates


def find_updates(
    client: TwitterClient,
    config: SocialConfig,
    since: datetime.date,
    now: datetime.datetime | None = None,
) -> list[Update]:
    """Search for announcements of episodes after the one aired on since.

    Raises:
        NoUpdatesError: If the window is in the future or nothing matched
    """
    now = now or datetime.datetime.now(datetime.timezone.utc)
    start = search_window(since, now, config.lookback_days)
    result = client.search_recent(build_query(config), start, config.max_results)
    return extract_updates(result, config.known_handles)
