"""castlog - keep a podcast's episode log in sync with its announcements."""

__version__ = "0.1.0"
