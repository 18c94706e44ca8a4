"""Data models for audio feed episodes."""

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, Field


class AudioEpisode(BaseModel):
    """Metadata about an audio recording of an episode, from the RSS feed."""

    title: str = ""
    subtitle: str = ""
    description: str = ""
    page_link: str = ""  # landing page for this episode
    file_link: str = ""  # audio file URL
    desc_links: list[str] = Field(default_factory=list)  # URLs in the description
    published: datetime | None = None
    duration: timedelta | None = None
    raw_description: str = ""

    def to_json(self) -> dict[str, Any]:
        """Encode with camelCase keys, omitting empty values."""
        data = {
            "title": self.title,
            "subtitle": self.subtitle,
            "description": self.description,
            "pageLink": self.page_link,
            "fileLink": self.file_link,
            "descLinks": self.desc_links,
            "published": self.published.isoformat() if self.published else None,
            "duration": self.duration.total_seconds() if self.duration else None,
            "rawDescription": self.raw_description,
        }
        return {k: v for k, v in data.items() if v}
