"""YouTube metadata and captions."""

from castlog.video.captions import Caption, CaptionFetcher, Transcript
from castlog.video.youtube import VideoInfo, fetch_video_info

__all__ = ["Caption", "CaptionFetcher", "Transcript", "VideoInfo", "fetch_video_info"]
