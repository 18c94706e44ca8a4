"""Data models for Twitter search results and the updates derived from them.

The search models mirror the Twitter API v2 JSON shapes, keeping only the
fields the extractor reads.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from castlog.catalog.models import Guest


class UrlEntity(BaseModel):
    """A link annotation on a post or profile."""

    url: str = ""  # the t.co short link
    expanded_url: str = ""
    unwound_url: str = ""  # final redirect target, when the API resolved it
    display_url: str = ""


class MentionEntity(BaseModel):
    """An @-mention annotation on a post."""

    username: str
    id: str = ""


class PostEntities(BaseModel):
    urls: list[UrlEntity] = Field(default_factory=list)
    mentions: list[MentionEntity] = Field(default_factory=list)


class UrlEntities(BaseModel):
    urls: list[UrlEntity] = Field(default_factory=list)


class UserEntities(BaseModel):
    url: UrlEntities = Field(default_factory=UrlEntities)
    description: UrlEntities = Field(default_factory=UrlEntities)


class User(BaseModel):
    """Profile data for a user referenced by a post."""

    id: str = ""
    name: str = ""
    username: str
    description: str = ""
    url: str = ""  # profile link, usually a t.co short link
    entities: UserEntities | None = None

    def profile_url(self) -> str:
        """Return the profile link, expanded when the entities provide it."""
        if self.entities is None:
            return self.url
        candidates = self.entities.url.urls + self.entities.description.urls
        for candidate in candidates:
            if candidate.url == self.url and candidate.expanded_url:
                return candidate.expanded_url
        return self.url


class Post(BaseModel):
    """A single tweet."""

    id: str
    text: str = ""
    created_at: datetime
    author_id: str = ""
    entities: PostEntities = Field(default_factory=PostEntities)


class SearchResult(BaseModel):
    """One page of recent-search results with the expanded users."""

    posts: list[Post] = Field(default_factory=list)
    users: list[User] = Field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "SearchResult":
        """Decode a ``/2/tweets/search/recent`` reply."""
        includes = data.get("includes") or {}
        return cls(
            posts=data.get("data") or [],
            users=includes.get("users") or [],
        )

    def find_user(self, username: str) -> User | None:
        """Return the included user with username (case-insensitive)."""
        wanted = username.lower()
        for user in self.users:
            if user.username.lower() == wanted:
                return user
        return None


class Update(BaseModel):
    """A candidate episode update detected from one announcement post."""

    post_id: str
    posted: datetime  # when the announcement was posted
    air_date: date  # when the episode airs
    youtube: str = ""  # primary stream link
    crowdcast: str = ""  # secondary stream link
    guests: list[Guest] = Field(default_factory=list)

    @property
    def has_content(self) -> bool:
        return bool(self.youtube or self.crowdcast or self.guests)
