"""Create or amend episode files from update candidates."""

import logging
from pathlib import Path

from castlog.catalog.episodes import load_episode, write_episode
from castlog.catalog.models import Episode, Label
from castlog.social.models import Update
from castlog.utils.text import similarity

logger = logging.getLogger(__name__)

DEFAULT_TAG_PHRASES = {
    "cheese night": "cheese-night",
    "where's lie": "truth-from-fiction",
}


def apply_tags(episode: Episode, description: str, tag_phrases: dict[str, str]) -> list[str]:
    """Tag episode for every catch phrase that description mentions.

    Returns:
        Tags that were newly added
    """
    added = []
    for phrase, tag in tag_phrases.items():
        if episode.has_tag(tag) or similarity(description, phrase) == 0:
            continue
        episode.add_tag(tag)
        added.append(tag)
    return added


def synthesize_episode(
    path: Path,
    number: int,
    description: str,
    update: Update,
    tag_phrases: dict[str, str] | None = None,
) -> Episode:
    """Write the episode file at path for update.

    An existing file keeps everything except its stream links, which are
    replaced from the update. A new file takes its number and air date from
    the arguments and starts with description as its detail body.

    Args:
        path: Episode file path
        number: Episode number for a new file
        description: Video description, possibly empty
        update: The update being recorded
        tag_phrases: Catch phrase to tag mapping

    Returns:
        The episode as written

    Raises:
        EpisodeFormatError: If an existing file is malformed
    """
    if tag_phrases is None:
        tag_phrases = DEFAULT_TAG_PHRASES

    try:
        episode = load_episode(path)
        logger.debug(f"Amending existing episode file {path}")
    except FileNotFoundError:
        episode = Episode(
            episode=Label.numeric(number),
            date=update.air_date,
            detail=description,
        )

    added = apply_tags(episode, description, tag_phrases)
    if added:
        logger.info(f"Tagged episode {episode.episode}: {', '.join(added)}")
    episode.crowdcast = update.crowdcast
    episode.youtube = update.youtube

    write_episode(path, episode)
    return episode
