"""Reading and writing episode files.

Each episode lives in its own markdown file: a YAML front matter block
delimited by ``---`` lines, followed by the free-text detail body.
"""

import datetime
import logging
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from castlog.catalog.models import Episode
from castlog.utils.atomic import atomic_write
from castlog.utils.errors import EpisodeFormatError

logger = logging.getLogger(__name__)

FRONT_MATTER_DELIMITER = "---\n"

# Matches names like 2021-03-04-0123.md or 2021-03-04-bonus-round.md
EPISODE_FILE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}-[-\w]+\.md$")


def episode_filename(air_date: datetime.date, number: int) -> str:
    """Return the file name for episode number airing on air_date."""
    return f"{air_date:%Y-%m-%d}-{number:04d}.md"


def parse_episode(text: str, source: str = "<string>") -> Episode:
    """Parse the contents of an episode file.

    Args:
        text: File contents
        source: Name used in error messages

    Returns:
        Parsed Episode

    Raises:
        EpisodeFormatError: If the front matter is missing or invalid
    """
    chunks = text.split(FRONT_MATTER_DELIMITER, 2)
    if len(chunks) != 3 or chunks[0] != "":
        raise EpisodeFormatError(f"{source}: invalid episode file format")

    try:
        data = yaml.safe_load(chunks[1]) or {}
    except yaml.YAMLError as e:
        raise EpisodeFormatError(f"{source}: decoding front matter: {e}") from e
    if not isinstance(data, dict):
        raise EpisodeFormatError(f"{source}: front matter is not a mapping")

    try:
        return Episode.from_front_matter(data, detail=chunks[2].strip())
    except (ValidationError, ValueError) as e:
        raise EpisodeFormatError(f"{source}: invalid front matter: {e}") from e


def load_episode(path: Path) -> Episode:
    """Load an episode from the markdown file at path.

    Raises:
        FileNotFoundError: If path does not exist
        EpisodeFormatError: If the file is malformed
    """
    return parse_episode(path.read_text(encoding="utf-8"), source=str(path))


def format_episode(episode: Episode) -> str:
    """Render an episode as front matter plus detail body."""
    front = yaml.safe_dump(
        episode.front_matter(),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    text = FRONT_MATTER_DELIMITER + front + FRONT_MATTER_DELIMITER
    if episode.detail:
        text += episode.detail + "\n"
    return text


def write_episode(path: Path, episode: Episode) -> None:
    """Write episode to path atomically, replacing any existing file."""
    content = format_episode(episode)
    with atomic_write(path) as f:
        f.write(content)
    logger.debug(f"Wrote episode {episode.episode} to {path}")


def list_episode_files(directory: Path) -> list[Path]:
    """List episode files in directory, sorted by name.

    Files whose names do not look like episodes are skipped.
    """
    files = []
    for item in sorted(directory.iterdir()):
        if not item.is_file():
            continue
        if not EPISODE_FILE_PATTERN.match(item.name):
            logger.info(f"Skip {item.name!r}")
            continue
        files.append(item)
    return files


def assign_seasons(directory: Path, dry_run: bool = False) -> list[Episode]:
    """Fill in the season of every episode file that lacks one.

    Args:
        directory: The episodes directory
        dry_run: Report assignments without writing files

    Returns:
        Episodes that were assigned a season

    Raises:
        EpisodeFormatError: If any episode file is malformed
    """
    assigned = []
    for path in list_episode_files(directory):
        episode = load_episode(path)
        if episode.season:
            logger.info(
                f"Episode {episode.episode} already has season {episode.season} (skipped)"
            )
            continue

        episode.season = episode.derived_season
        logger.info(f"Assigned episode {episode.episode} to season {episode.season}")
        if not dry_run:
            write_episode(path, episode)
        assigned.append(episode)
    return assigned
