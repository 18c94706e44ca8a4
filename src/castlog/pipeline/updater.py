"""One update pass: find new episode announcements and record them.

A pass looks up the latest episode the site knows about, searches Twitter
for announcements of later episodes, and writes an episode file (and guest
registry entries) for each one. Episode numbers count up from the latest
known episode in the order the announcements were posted.
"""

import datetime
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import requests

from castlog.catalog.episodes import episode_filename
from castlog.catalog.guests import add_or_update_guests
from castlog.catalog.models import Episode, Label
from castlog.catalog.site import SiteClient
from castlog.config.schema import CastlogConfig
from castlog.pipeline.synthesizer import synthesize_episode
from castlog.social.dedup import dedup_updates
from castlog.social.extractor import find_updates
from castlog.social.models import Update
from castlog.social.search import TwitterClient
from castlog.utils.editor import edit_files
from castlog.utils.errors import NetworkError, NoUpdatesError, NoVideoIDError
from castlog.utils.urls import youtube_video_id
from castlog.video.youtube import VideoInfo, fetch_video_info

logger = logging.getLogger(__name__)


@dataclass
class PipelineOptions:
    """Flags that change how a pass treats its updates."""

    force: bool = False  # rewrite episode files that already exist
    dry_run: bool = False  # log what would be written, write nothing
    edit: bool = False  # open touched files in $EDITOR afterwards
    skip_video_check: bool = False  # record updates that lack a video ID
    override: str | None = None  # "NUM[:YYYY-MM-DD]" replacing the latest episode


@dataclass
class UpdateOutcome:
    """Result of one pass."""

    latest_date: datetime.date
    updated: bool
    paths: list[Path] = field(default_factory=list)


def parse_override(text: str) -> tuple[Label, datetime.date | None]:
    """Parse a "NUM[:YYYY-MM-DD]" baseline override.

    Raises:
        ValueError: If the label or date is invalid

    Examples:
        >>> parse_override("140:2021-01-15")
        (Label(kind=<LabelKind.NUMERIC: 'numeric'>, value=140.0), datetime.date(2021, 1, 15))
    """
    number, _, date_text = text.partition(":")
    label = Label.parse(number)
    if not date_text:
        return label, None
    return label, datetime.date.fromisoformat(date_text)


def apply_override(latest: Episode, override: str) -> Episode:
    """Return a copy of latest with its label and date replaced by override."""
    label, air_date = parse_override(override)
    changes = {"episode": label}
    logger.info(f" >> override episode: {label}")
    if air_date is not None:
        changes["date"] = air_date
        logger.info(f" >> override date: {air_date}")
    return latest.model_copy(update=changes)


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class EpisodeUpdater:
    """Runs update passes against the working tree of the site repository."""

    def __init__(
        self,
        config: CastlogConfig,
        site: SiteClient,
        twitter: TwitterClient,
        youtube_key: str,
        options: PipelineOptions | None = None,
        session: requests.Session | None = None,
        clock: Callable[[], datetime.datetime] = _utcnow,
        video_lookup: Callable[..., VideoInfo] = fetch_video_info,
    ) -> None:
        self.config = config
        self.site = site
        self.twitter = twitter
        self.youtube_key = youtube_key
        self.options = options or PipelineOptions()
        self.session = session
        self.clock = clock
        self.video_lookup = video_lookup

    def _latest_episode(self) -> Episode:
        latest = self.site.latest_episode()
        logger.info(f"Latest episode is {latest.episode}, airdate {latest.date}")
        if self.options.override:
            latest = apply_override(latest, self.options.override)
        return latest

    def _video_description(self, update: Update) -> str:
        """Return the description of the update's video.

        Raises:
            NoVideoIDError: If the update has no YouTube video
            NetworkError: If the lookup failed
        """
        video_id = youtube_video_id(update.youtube)
        if not video_id:
            raise NoVideoIDError(f"No video ID found for post {update.post_id}")
        info = self.video_lookup(video_id, self.youtube_key, session=self.session)
        return info.description

    def check_for_update(self) -> UpdateOutcome:
        """Run one pass.

        Returns:
            The latest known air date, and whether any episode was recorded

        Raises:
            NetworkError: If the site or Twitter could not be queried
            CatalogError: If an existing episode or guest file is malformed
        """
        latest = self._latest_episode()

        try:
            updates = find_updates(self.twitter, self.config.social, latest.date, now=self.clock())
        except NoUpdatesError as e:
            logger.info(f"Finding updates on twitter: {e}")
            return UpdateOutcome(latest_date=latest.date, updated=False)
        updates = dedup_updates(updates)
        logger.info(f"Found {len(updates)} updates on twitter since {latest.date}")

        episode_dir = self.config.episode_dir
        guest_file = self.config.guest_file
        dry_run = self.options.dry_run

        paths: list[Path] = []
        guests_dirty = False
        num_valid = 0
        for i, update in enumerate(updates, start=1):
            number = int(latest.number) + num_valid + 1
            path = episode_dir / episode_filename(update.air_date, number)
            exists = path.exists()
            logger.info(
                f"Update {i}: episode {number}, id {update.post_id}, "
                f"posted {update.posted:%Y-%m-%d %H:%M}, air {update.air_date}, exists={exists}"
            )
            if exists and not self.options.force:
                continue

            description = ""
            try:
                description = self._video_description(update)
                logger.info(f"- Fetched video description ({len(description)} bytes)")
            except NoVideoIDError:
                if not self.options.skip_video_check:
                    logger.warning("* No video ID found for this episode; skipping")
                    continue
            except NetworkError as e:
                logger.warning(f"* Unable to fetch video detail from YouTube: {e}")

            if dry_run:
                logger.info(f"@ Not writing episode file {path}, this is a dry run")
            else:
                synthesize_episode(path, number, description, update, self.config.tags)
                logger.info(f"- Wrote episode {number} file: {path}")

            for guest in update.guests:
                logger.info(f"- Guest: {guest}")
            if dry_run:
                logger.info("@ Skipped guest list update, this is a dry run")
            else:
                add_or_update_guests(number, guest_file, update.guests)

            paths.append(path)
            guests_dirty = guests_dirty or bool(update.guests)
            num_valid += 1

        if guests_dirty:
            paths.append(guest_file)
        if self.options.edit and paths and not dry_run:
            edit_files(paths)

        return UpdateOutcome(latest_date=latest.date, updated=num_valid > 0, paths=paths)
