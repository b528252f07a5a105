"""HTTP clients for YouTube."""

from .base import Downloader, Response, TransportError
from .youtube import YouTubeClient

__all__ = [
    "Downloader",
    "Response",
    "TransportError",
    "YouTubeClient",
]
