"""Episode and guest records of the site catalog."""

from castlog.catalog.episodes import (
    assign_seasons,
    episode_filename,
    list_episode_files,
    load_episode,
    write_episode,
)
from castlog.catalog.guests import GuestFile, add_or_update_guests, merge_guests
from castlog.catalog.models import Episode, Guest, Label, Link
from castlog.catalog.site import SiteClient

__all__ = [
    "Episode",
    "Guest",
    "GuestFile",
    "Label",
    "Link",
    "SiteClient",
    "add_or_update_guests",
    "assign_seasons",
    "episode_filename",
    "list_episode_files",
    "load_episode",
    "merge_guests",
    "write_episode",
]
