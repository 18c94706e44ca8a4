"""Utility functions and helpers for castlog."""

from castlog.utils.errors import (
    APIKeyError,
    CastlogError,
    CatalogError,
    ConfigError,
    EpisodeFormatError,
    FeedError,
    FeedParseError,
    GuestFileError,
    InvalidConfigError,
    NetworkError,
    NoCaptionsError,
    NoDataError,
    NoUpdatesError,
    NoVideoIDError,
    RepoError,
    UpstreamError,
    VideoNotFoundError,
)

__all__ = [
    "APIKeyError",
    "CastlogError",
    "CatalogError",
    "ConfigError",
    "EpisodeFormatError",
    "FeedError",
    "FeedParseError",
    "GuestFileError",
    "InvalidConfigError",
    "NetworkError",
    "NoCaptionsError",
    "NoDataError",
    "NoUpdatesError",
    "NoVideoIDError",
    "RepoError",
    "UpstreamError",
    "VideoNotFoundError",
]
