"""Guest registry: one YAML file listing every guest and their episodes.

The file may begin with a block of ``#`` comments written by humans. That
block is kept byte for byte. Records are written one at a time, separated
by blank lines, so that adding a guest produces a small diff.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from pydantic import ValidationError

from castlog.catalog.models import Guest
from castlog.utils.atomic import atomic_write
from castlog.utils.errors import GuestFileError

logger = logging.getLogger(__name__)

_FIRST_NON_COMMENT = re.compile(r"^[^#]", re.MULTILINE)


class _FlowList(list):
    """A list that YAML renders inline, e.g. ``[1, 2, 3]``."""


class _GuestDumper(yaml.SafeDumper):
    pass


_GuestDumper.add_representer(
    _FlowList,
    lambda dumper, data: dumper.represent_sequence(
        "tag:yaml.org,2002:seq", data, flow_style=True
    ),
)


def find_guest(needle: Guest, guests: list[Guest]) -> Guest | None:
    """Return the first guest in guests that is the same person as needle."""
    for guest in guests:
        if guest.same_person(needle):
            return guest
    return None


def merge_guests(
    episode: float, records: list[Guest], appearances: list[Guest]
) -> tuple[list[Guest], bool]:
    """Merge guest appearances on episode into records.

    New guests are appended in order of first appearance with just this
    episode. Known guests gain the episode number if missing; their name,
    URL and notes are never overwritten. The input lists are not modified.

    Args:
        episode: Episode number the appearances belong to
        records: Existing registry records
        appearances: Candidate guests for the episode

    Returns:
        Tuple of (updated records, whether anything changed)

    Example:
        >>> merged, changed = merge_guests(12, [], [Guest(name="Ann")])
        >>> merged[0].episodes, changed
        ([12.0], True)
    """
    episode = float(episode)
    merged = [g.model_copy(deep=True) for g in records]
    changed = False

    for appearance in appearances:
        old = find_guest(appearance, merged)
        if old is None:
            new = appearance.model_copy(deep=True)
            new.episodes = [episode]
            merged.append(new)
            changed = True
        elif not old.on_episode(episode):
            old.episodes = sorted(old.episodes + [episode])
            changed = True

    return merged, changed


@dataclass
class GuestFile:
    """In-memory image of a guest registry file."""

    header: str = ""
    guests: list[Guest] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str, source: str = "<string>") -> "GuestFile":
        """Split text into its comment header and guest records.

        Raises:
            GuestFileError: If the records cannot be decoded
        """
        m = _FIRST_NON_COMMENT.search(text)
        if m:
            header, content = text[: m.start()], text[m.start():]
        else:
            header, content = text, ""

        try:
            entries = yaml.safe_load(content) or []
        except yaml.YAMLError as e:
            raise GuestFileError(f"{source}: decoding guests: {e}") from e
        if not isinstance(entries, list):
            raise GuestFileError(f"{source}: guest list is not a sequence")

        try:
            guests = [Guest(**entry) for entry in entries]
        except (TypeError, ValidationError) as e:
            raise GuestFileError(f"{source}: invalid guest record: {e}") from e
        return cls(header=header, guests=guests)

    @classmethod
    def load(cls, path: Path) -> "GuestFile":
        return cls.parse(path.read_text(encoding="utf-8"), source=str(path))

    def dump(self) -> str:
        """Render the header followed by each record, blank-line separated."""
        records = []
        for guest in self.guests:
            data = guest.to_dict()
            data["episodes"] = _FlowList(data["episodes"])
            records.append(
                yaml.dump(
                    [data],
                    Dumper=_GuestDumper,
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True,
                )
            )
        header = self.header
        if header and not header.endswith("\n"):
            header += "\n"
        return header + "\n".join(records)

    def save(self, path: Path) -> None:
        content = self.dump()
        with atomic_write(path) as f:
            f.write(content)


def add_or_update_guests(episode: float, path: Path, guests: list[Guest]) -> bool:
    """Record guests as appearing on episode in the registry at path.

    The file is rewritten only if something changed.

    Returns:
        True if the file was updated

    Raises:
        FileNotFoundError: If the registry does not exist
        GuestFileError: If the registry is malformed
    """
    if not guests:
        return False

    registry = GuestFile.load(path)
    merged, changed = merge_guests(episode, registry.guests, guests)
    if not changed:
        logger.debug(f"Guest list unchanged for episode {episode}")
        return False

    registry.guests = merged
    registry.save(path)
    logger.info(f"Updated guest list {path} for episode {episode}")
    return True
