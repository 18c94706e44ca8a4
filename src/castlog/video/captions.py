"""YouTube caption retrieval.

Captions come from youtube-transcript-api. English is preferred; otherwise
the first listed transcript is used.
"""

import logging

from pydantic import BaseModel, Field
from youtube_transcript_api import YouTubeTranscriptApi
from youtube_transcript_api._errors import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    TranscriptsDisabled,
    VideoUnavailable,
)

from castlog.utils.errors import NetworkError, NoCaptionsError, VideoNotFoundError

logger = logging.getLogger(__name__)


class Caption(BaseModel):
    """One timed caption segment."""

    start: float
    duration: float
    text: str

    def to_json(self) -> dict:
        return {"startSec": self.start, "durationSec": self.duration, "text": self.text}


class Transcript(BaseModel):
    """All captions of one video."""

    video_id: str
    language: str = ""
    captions: list[Caption] = Field(default_factory=list)

    def to_json(self) -> dict:
        """Encode in the published transcript format."""
        return {
            "transcript": {
                "videoID": self.video_id,
                "captions": [c.to_json() for c in self.captions],
            }
        }


class CaptionFetcher:
    """Fetch captions for YouTube videos."""

    def __init__(
        self,
        preferred_languages: list[str] | None = None,
        api: YouTubeTranscriptApi | None = None,
    ) -> None:
        self.preferred_languages = preferred_languages or ["en"]
        self.api = api or YouTubeTranscriptApi()

    def _pick(self, video_id: str):
        transcripts = self.api.list(video_id)
        try:
            return transcripts.find_transcript(self.preferred_languages)
        except NoTranscriptFound:
            pass
        for transcript in transcripts:
            return transcript
        raise NoCaptionsError(f"No captions found for video {video_id}")

    def fetch(self, video_id: str) -> Transcript:
        """Fetch the captions for video_id.

        Raises:
            NoCaptionsError: If the video has no captions
            VideoNotFoundError: If the video is unavailable
            NetworkError: If the captions could not be retrieved
        """
        try:
            chosen = self._pick(video_id)
            logger.info(f"Fetching {chosen.language_code} captions for video {video_id}")
            snippets = chosen.fetch()
        except TranscriptsDisabled as e:
            raise NoCaptionsError(f"Captions are disabled for video {video_id}") from e
        except VideoUnavailable as e:
            raise VideoNotFoundError(f"Video {video_id} is unavailable") from e
        except CouldNotRetrieveTranscript as e:
            raise NetworkError(f"Could not retrieve captions for {video_id}: {e}") from e

        captions = [
            Caption(start=s.start, duration=s.duration, text=s.text) for s in snippets
        ]
        logger.info(f"Found {len(captions)} captions for video {video_id}")
        return Transcript(
            video_id=video_id, language=chosen.language_code, captions=captions
        )
