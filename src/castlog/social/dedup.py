"""Drop empty and repeated update candidates."""

import logging

from castlog.catalog.models import Guest
from castlog.social.models import Update

logger = logging.getLogger(__name__)


def _same_guests(a: list[Guest], b: list[Guest]) -> bool:
    """Report whether a and b name the same people, in any order."""
    if len(a) != len(b):
        return False
    return all(any(g.same_person(h) for h in b) for g in a) and all(
        any(h.same_person(g) for g in a) for h in b
    )


def _duplicates(a: Update, b: Update) -> bool:
    return a.youtube == b.youtube and a.crowdcast == b.crowdcast and _same_guests(a.guests, b.guests)


def dedup_updates(updates: list[Update]) -> list[Update]:
    """Filter updates that carry nothing or repeat an earlier one.

    The same announcement is sometimes posted twice (for example a
    correction), so only the first of a set of equivalent updates is kept.
    Order is preserved.
    """
    kept: list[Update] = []
    for update in updates:
        if not update.has_content:
            logger.debug(f"Dropping empty update from post {update.post_id}")
            continue
        if any(_duplicates(update, prev) for prev in kept):
            logger.debug(f"Dropping duplicate update from post {update.post_id}")
            continue
        kept.append(update)
    return kept
