"""Data models for catalog records: episodes, links and guests.

Episodes are stored one per markdown file with YAML front matter; guests
live together in a single YAML registry. The site also publishes episodes
as JSON with camelCase keys, so episodes know how to read both shapes.
"""

import datetime
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

# Episodes per season, by decree of the hosts.
SEASON_LENGTH = 250

_NUMERIC = re.compile(r"^-?\d+(\.\d+)?$")


class LabelKind(str, Enum):
    """Which representation a label holds."""

    NUMERIC = "numeric"
    TEXTUAL = "textual"


@dataclass(frozen=True)
class Label:
    """An episode label: a number for regular episodes, a slug otherwise.

    Examples:
        >>> Label.parse("42").number
        42.0
        >>> Label.parse("bonus-round").number
        -1
        >>> Label.parse(12.5).encode()
        12.5
    """

    kind: LabelKind
    value: float | str

    @classmethod
    def numeric(cls, value: float) -> "Label":
        return cls(LabelKind.NUMERIC, float(value))

    @classmethod
    def textual(cls, value: str) -> "Label":
        return cls(LabelKind.TEXTUAL, value)

    @classmethod
    def parse(cls, value: Any) -> "Label":
        """Decode a label from a YAML/JSON number or string.

        Raises:
            ValueError: If value is empty or of an unsupported type
        """
        if isinstance(value, Label):
            return value
        if isinstance(value, bool):
            raise ValueError(f"invalid episode label: {value!r}")
        if isinstance(value, (int, float)):
            return cls.numeric(value)
        if isinstance(value, str):
            text = value.strip()
            if not text:
                raise ValueError("empty episode label")
            if _NUMERIC.match(text):
                return cls.numeric(float(text))
            return cls.textual(text)
        raise ValueError(f"invalid episode label: {value!r}")

    @property
    def is_numeric(self) -> bool:
        return self.kind is LabelKind.NUMERIC

    @property
    def number(self) -> float:
        """Numeric value of the label, or -1 for textual labels."""
        if self.is_numeric:
            return float(self.value)
        return -1

    def encode(self) -> int | float | str:
        """Encode as an int, float or string, the inverse of parse."""
        if self.is_numeric:
            value = float(self.value)
            return int(value) if value.is_integer() else value
        return str(self.value)

    def __str__(self) -> str:
        return str(self.encode())


class Link(BaseModel):
    """Title and URL of a hyperlink."""

    title: str = ""
    url: str

    def to_dict(self) -> dict[str, str]:
        data = {"title": self.title} if self.title else {}
        data["url"] = self.url
        return data


# Front matter keys, in the order they are written.
FRONT_MATTER_KEYS = {
    "episode": "episode",
    "date": "date",
    "season": "season",
    "topics": "topics",
    "summary": "summary",
    "crowdcast": "crowdcast",
    "youtube": "youtube",
    "acast": "acast",
    "audio_file": "audio-file",
    "special": "special",
    "tags": "tags",
    "links": "links",
}

# Site JSON keys that differ from the field names.
SITE_JSON_KEYS = {
    "airDate": "date",
    "guestNames": "guests",
    "crowdcastURL": "crowdcast",
    "youTubeURL": "youtube",
    "acastURL": "acast",
    "audioFileURL": "audio_file",
}


class Episode(BaseModel):
    """One broadcast installment.

    The label and air date are required; everything else is optional.
    ``detail`` is the free-text body that follows the front matter and is
    usually edited by hand. ``guests`` holds display names as published by
    the site and is never written into the front matter (the guest registry
    is authoritative). Unrecognized front matter keys are kept in ``extra``
    so that rewriting a file never drops them.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    episode: Label
    date: datetime.date
    season: int = 0
    guests: list[str] = Field(default_factory=list)
    topics: str = ""
    summary: str = ""
    crowdcast: str = ""
    youtube: str = ""
    acast: str = ""
    audio_file: str = ""
    special: bool = False
    tags: list[str] = Field(default_factory=list)
    links: list[Link] = Field(default_factory=list)
    detail: str = ""
    extra: dict[str, Any] = Field(default_factory=dict)

    @field_validator("episode", mode="before")
    @classmethod
    def _parse_label(cls, value: Any) -> Label:
        return Label.parse(value)

    @field_serializer("episode")
    def _encode_label(self, value: Label) -> int | float | str:
        return value.encode()

    @property
    def number(self) -> float:
        return self.episode.number

    @property
    def derived_season(self) -> int:
        """Season implied by the episode number."""
        return int(max(self.number, 0) // SEASON_LENGTH) + 1

    def add_tag(self, tag: str) -> bool:
        """Add tag if not already present. Returns whether it was added."""
        if tag in self.tags:
            return False
        self.tags.append(tag)
        return True

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    @classmethod
    def from_front_matter(cls, data: dict[str, Any], detail: str = "") -> "Episode":
        """Build an episode from decoded front matter and body text."""
        by_key = {v: k for k, v in FRONT_MATTER_KEYS.items()}
        fields: dict[str, Any] = {"detail": detail}
        extra: dict[str, Any] = {}
        for key, value in data.items():
            if key in by_key:
                fields[by_key[key]] = value
            else:
                extra[key] = value
        fields["extra"] = extra
        return cls(**fields)

    def front_matter(self) -> dict[str, Any]:
        """Encode the front matter fields, omitting empty optional values."""
        out: dict[str, Any] = {
            "episode": self.episode.encode(),
            "date": self.date,
        }
        if self.season:
            out["season"] = self.season
        for field in ("topics", "summary", "crowdcast", "youtube", "acast", "audio_file"):
            value = getattr(self, field)
            if value:
                out[FRONT_MATTER_KEYS[field]] = value
        if self.special:
            out["special"] = True
        if self.tags:
            out["tags"] = list(self.tags)
        if self.links:
            out["links"] = [link.to_dict() for link in self.links]
        out.update(self.extra)
        return out

    @classmethod
    def from_site_json(cls, data: dict[str, Any]) -> "Episode":
        """Build an episode from the site's JSON representation."""
        fields = {SITE_JSON_KEYS.get(key, key): value for key, value in data.items()}
        known = set(cls.model_fields) - {"extra"}
        return cls(**{k: v for k, v in fields.items() if k in known})


class Guest(BaseModel):
    """A person who appeared on one or more episodes.

    Keys the registry carries beyond the known fields are kept as extras.
    """

    model_config = ConfigDict(extra="allow")

    name: str = ""
    twitter: str = ""
    url: str = ""
    notes: str = ""
    episodes: list[float] = Field(default_factory=list)

    def same_person(self, other: "Guest") -> bool:
        """Report whether self and other denote the same person.

        Non-empty names must match exactly, or both records must carry the
        same non-empty Twitter handle.
        """
        if self.name and self.name == other.name:
            return True
        return bool(self.twitter) and self.twitter == other.twitter

    def on_episode(self, episode: float) -> bool:
        return float(episode) in self.episodes

    def to_dict(self) -> dict[str, Any]:
        """Encode for the guest registry, omitting empty optional fields."""
        data: dict[str, Any] = {"name": self.name}
        for field in ("twitter", "url", "notes"):
            value = getattr(self, field)
            if value:
                data[field] = value
        data["episodes"] = [int(e) if float(e).is_integer() else e for e in self.episodes]
        data.update(self.model_extra or {})
        return data

    def __str__(self) -> str:
        parts = [self.name]
        if self.url:
            parts.append(f"<{self.url}>")
        if self.twitter:
            parts.append(f"(@{self.twitter})")
        if self.episodes:
            parts.append(str(self.to_dict()["episodes"]))
        return " ".join(parts)
