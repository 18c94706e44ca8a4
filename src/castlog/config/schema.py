"""Configuration schema models using Pydantic."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class SocialConfig(BaseModel):
    """How announcements are found on Twitter."""

    host_handle: str = "benjaminwittes"
    show_handle: str = "inlieuoffunshow"
    trigger_phrases: list[str] = Field(
        default_factory=lambda: ["Today on", "Tonight on", "Tomorrow on"]
    )
    show_keyword: str = "episode"
    # Handles that are never guests (hosts, the show, streaming services).
    known_handles: list[str] = Field(
        default_factory=lambda: [
            "benjaminwittes",
            "klonick",
            "inlieuoffunshow",
            "lawfareblog",
            "youtube",
            "crowdcasthq",
        ]
    )
    lookback_days: int = Field(default=7, ge=1, le=7)
    max_results: int = Field(default=10, ge=10, le=100)

    @field_validator("known_handles")
    @classmethod
    def _lowercase_handles(cls, value: list[str]) -> list[str]:
        return [h.lower().lstrip("@") for h in value]


class ScheduleConfig(BaseModel):
    """Weekly broadcast schedule and polling bounds."""

    timezone: str = "America/New_York"
    # Start hour in UTC while the timezone observes DST, and outside it.
    dst_start_hour: int = Field(default=21, ge=0, le=23)
    std_start_hour: int = Field(default=22, ge=0, le=23)
    # Broadcast weekdays, Monday=0.
    broadcast_days: list[int] = Field(default_factory=lambda: [0, 2, 4])
    grace_minutes: int = Field(default=60, ge=0)
    divisor: int = Field(default=7, ge=1)
    min_poll_minutes: int = Field(default=1, ge=1)
    max_poll_minutes: int = Field(default=90, ge=1)

    @field_validator("broadcast_days")
    @classmethod
    def _valid_weekdays(cls, value: list[int]) -> list[int]:
        if not value or any(d < 0 or d > 6 for d in value):
            raise ValueError("broadcast_days must be non-empty weekdays 0-6")
        return sorted(set(value))


class CastlogConfig(BaseModel):
    """Global castlog configuration."""

    version: str = "1"
    log_level: LogLevel = "INFO"
    site_url: str = "https://inlieuof.fun"
    feed_url: str = "https://feeds.acast.com/public/shows/in-lieu-of-fun"
    episode_dir: Path = Field(default=Path("_episodes"))
    guest_file: Path = Field(default=Path("_data/guests.yaml"))
    check_repo: str | None = "inlieuoffun.github.io"

    social: SocialConfig = Field(default_factory=SocialConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)

    # Catch phrase -> tag added when the video description mentions it.
    tags: dict[str, str] = Field(
        default_factory=lambda: {
            "cheese night": "cheese-night",
            "where's lie": "truth-from-fiction",
        }
    )
