"""Video capture utilities for the project."""

from video_module.video_stream import VideoStream

__all__ = [
    "VideoStream",
]
