"""Twitter recent-search client and query construction."""

import datetime
import logging

import requests
from pydantic import ValidationError

from castlog.config.schema import SocialConfig
from castlog.social.models import SearchResult
from castlog.utils.errors import NetworkError, NoUpdatesError
from castlog.utils.http import fetch_json

logger = logging.getLogger(__name__)

SEARCH_RECENT_URL = "https://api.twitter.com/2/tweets/search/recent"

# An episode airs in the evening (UTC) of its air date, so no post about a
# later episode can appear before this offset into the day.
AIR_DAY_OFFSET = datetime.timedelta(hours=22)

# Recent search rejects a start time right at the edge of its window.
LOOKBACK_MARGIN = datetime.timedelta(minutes=1)


def build_query(config: SocialConfig) -> str:
    """Build the recent-search query for episode announcements.

    Matches posts by the host that contain a trigger phrase and mention the
    show, or posts by the show account that contain its keyword. Only
    original posts with links qualify.

    Example:
        >>> build_query(SocialConfig(trigger_phrases=["Today on"]))
        '((from:benjaminwittes ("Today on") @inlieuoffunshow) OR (from:inlieuoffunshow "episode")) has:links -is:reply -is:retweet'
    """
    phrases = " OR ".join(f'"{p}"' for p in config.trigger_phrases)
    by_host = f"(from:{config.host_handle} ({phrases}) @{config.show_handle})"
    by_show = f'(from:{config.show_handle} "{config.show_keyword}")'
    return f"({by_host} OR {by_show}) has:links -is:reply -is:retweet"


def search_window(
    since: datetime.date,
    now: datetime.datetime,
    lookback_days: int = 7,
) -> datetime.datetime:
    """Compute the search start time for posts after the episode aired on since.

    The start is clamped to the search API's lookback window; posts older
    than that are not visible, so a caller that polls less often than once
    per window can miss announcements.

    Args:
        since: Air date of the latest known episode
        now: Current time (timezone-aware)
        lookback_days: How far back the search API can see

    Returns:
        Timezone-aware UTC start time

    Raises:
        NoUpdatesError: If the start is still in the future
    """
    start = datetime.datetime.combine(since, datetime.time(), tzinfo=datetime.timezone.utc)
    start += AIR_DAY_OFFSET

    earliest = now - datetime.timedelta(days=lookback_days) + LOOKBACK_MARGIN
    if start < earliest:
        logger.debug(f"Clamping search start {start} to {earliest}")
        start = earliest

    if start > now:
        raise NoUpdatesError(f"No episodes can be announced yet (window opens {start})")
    return start.astimezone(datetime.timezone.utc)


class TwitterClient:
    """Minimal Twitter API v2 client for recent search."""

    def __init__(
        self,
        token: str,
        session: requests.Session | None = None,
        timeout: int = 30,
    ) -> None:
        """Initialize the client.

        Args:
            token: API v2 bearer token
            session: Optional requests session
            timeout: Request timeout in seconds
        """
        self.token = token
        self.session = session
        self.timeout = timeout

    def search_recent(
        self,
        query: str,
        start_time: datetime.datetime,
        max_results: int = 10,
    ) -> SearchResult:
        """Search posts from the last week matching query.

        Raises:
            NoUpdatesError: If nothing matched
            UpstreamError: If the API rejected the request
            NetworkError: If the request failed or the reply is malformed
        """
        params = {
            "query": query,
            "start_time": start_time.astimezone(datetime.timezone.utc).strftime(
                "%Y-%m-%dT%H:%M:%SZ"
            ),
            "max_results": max_results,
            "tweet.fields": "created_at,entities,author_id",
            "user.fields": "description,url,entities",
            "expansions": "entities.mentions.username",
        }
        logger.debug(f"Searching recent posts: {query!r} since {params['start_time']}")
        data = fetch_json(
            SEARCH_RECENT_URL,
            params=params,
            headers={"Authorization": f"Bearer {self.token}"},
            timeout=self.timeout,
            session=self.session,
        )

        try:
            result = SearchResult.from_api(data)
        except (AttributeError, ValidationError) as e:
            raise NetworkError(f"Malformed search reply: {e}") from e
        if not result.posts:
            raise NoUpdatesError("No matching updates")
        return result
