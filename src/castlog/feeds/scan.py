"""Find audio episodes that the episode log has not recorded yet.

The audio feed and the episode log cannot be matched automatically: the
feed's publication dates differ from air dates, and its episode numbers
are assigned by hand and often wrong. Instead, every audio episode whose
landing page is already linked from some episode is crossed off, and the
leftovers are reported for a human to file.
"""

from castlog.catalog.models import Episode
from castlog.feeds.models import AudioEpisode


def unrecorded_audio(
    audio: list[AudioEpisode], episodes: list[Episode]
) -> list[AudioEpisode]:
    """Return audio episodes whose landing page no episode links to.

    Feed order is preserved.
    """
    recorded = {ep.acast for ep in episodes if ep.acast}
    return [a for a in audio if a.page_link not in recorded]


def episodes_missing_audio(episodes: list[Episode]) -> list[Episode]:
    """Return episodes that have no audio landing page recorded."""
    return [ep for ep in episodes if not ep.acast]
