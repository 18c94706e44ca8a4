"""YouTube Data API video metadata lookup."""

import datetime
import logging

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from castlog.utils.errors import NetworkError, VideoNotFoundError
from castlog.utils.http import fetch_json

logger = logging.getLogger(__name__)

VIDEOS_URL = "https://www.googleapis.com/youtube/v3/videos"


class VideoInfo(BaseModel):
    """Snippet metadata for one YouTube video."""

    id: str = ""
    published_at: datetime.datetime | None = Field(default=None, alias="publishedAt")
    channel_id: str = Field(default="", alias="channelId")
    channel_title: str = Field(default="", alias="channelTitle")
    title: str = ""
    description: str = ""

    model_config = ConfigDict(populate_by_name=True)


def fetch_video_info(
    video_id: str,
    api_key: str,
    session: requests.Session | None = None,
    timeout: int = 30,
) -> VideoInfo:
    """Fetch the snippet for video_id.

    Args:
        video_id: YouTube video ID
        api_key: YouTube Data API key
        session: Optional requests session
        timeout: Request timeout in seconds

    Returns:
        VideoInfo for the video

    Raises:
        VideoNotFoundError: If the API does not know the video
        UpstreamError: If the API rejected the request
        NetworkError: If the request failed or the reply is malformed
    """
    data = fetch_json(
        VIDEOS_URL,
        params={"id": video_id, "key": api_key, "part": "snippet"},
        headers={"Accept": "application/json"},
        timeout=timeout,
        session=session,
    )

    for item in data.get("items") or []:
        if item.get("id") == video_id:
            try:
                info = VideoInfo.model_validate(item.get("snippet") or {})
            except ValidationError as e:
                raise NetworkError(f"Malformed snippet for video {video_id}: {e}") from e
            info.id = video_id
            logger.debug(f"Video {video_id}: {info.title!r} ({len(info.description)} bytes)")
            return info

    raise VideoNotFoundError(f"Video {video_id} not found")
