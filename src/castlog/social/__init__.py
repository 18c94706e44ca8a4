"""Episode announcements from Twitter."""

from castlog.social.dedup import dedup_updates
from castlog.social.extractor import extract_updates, find_updates
from castlog.social.models import Post, SearchResult, Update, User
from castlog.social.search import TwitterClient, build_query, search_window

__all__ = [
    "Post",
    "SearchResult",
    "TwitterClient",
    "Update",
    "User",
    "build_query",
    "dedup_updates",
    "extract_updates",
    "find_updates",
    "search_window",
]
