"""Read-only client for the episode index the site publishes as JSON."""

import logging
from typing import Any

import requests

from castlog.catalog.models import Episode, Label
from castlog.utils.errors import CatalogError, NetworkError
from castlog.utils.http import fetch_json

logger = logging.getLogger(__name__)

DEFAULT_SITE_URL = "https://inlieuof.fun"


class SiteClient:
    """Fetches episode records from the production site.

    Endpoints:
    - ``/latest.json``: ``{"latest": {...}}``
    - ``/episode/<label>.json``: ``{"episode": {...}}``
    - ``/episodes.json``: ``{"episodes": [{...}, ...]}``
    """

    def __init__(
        self,
        base_url: str = DEFAULT_SITE_URL,
        session: requests.Session | None = None,
        timeout: int = 30,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout

    def _get(self, path: str) -> Any:
        return fetch_json(
            f"{self.base_url}/{path}",
            headers={"Accept": "application/json"},
            timeout=self.timeout,
            session=self.session,
        )

    def _decode(self, data: Any, key: str) -> Episode:
        record = data.get(key) if isinstance(data, dict) else None
        if not isinstance(record, dict):
            raise NetworkError(f"Site reply has no {key!r} episode record")
        try:
            return Episode.from_site_json(record)
        except ValueError as e:
            raise CatalogError(f"Invalid episode record from site: {e}") from e

    def latest_episode(self) -> Episode:
        """Return the most recent episode the site knows about."""
        return self._decode(self._get("latest.json"), "latest")

    def fetch_episode(self, label: Label | str | int) -> Episode:
        """Return the episode with the given label."""
        label = Label.parse(label)
        return self._decode(self._get(f"episode/{label}.json"), "episode")

    def all_episodes(self) -> list[Episode]:
        """Return every episode the site publishes."""
        data = self._get("episodes.json")
        records = data.get("episodes") if isinstance(data, dict) else data
        if not isinstance(records, list):
            raise NetworkError("Site reply has no episode list")
        try:
            episodes = [Episode.from_site_json(r) for r in records]
        except ValueError as e:
            raise CatalogError(f"Invalid episode record from site: {e}") from e
        logger.debug(f"Loaded {len(episodes)} episodes from {self.base_url}")
        return episodes
