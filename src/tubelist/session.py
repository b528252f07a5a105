"""Wiring of transport, request layer and extractor from settings."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from .api.base import Downloader
from .api.youtube import YouTubeClient
from .core.settings import Settings
from .extractor.channel import YouTubeChannelExtractor
from .extractor.links import ChannelLink


@asynccontextmanager
async def open_extractor(
    channel: str | ChannelLink, settings: Settings | None = None
) -> AsyncIterator[YouTubeChannelExtractor]:
    """Create a channel extractor whose HTTP session closes on exit.

    Example:
        async with open_extractor("@SomeChannel") as extractor:
            await extractor.fetch_page()
            print(extractor.get_channel().name)
    """
    settings = settings or Settings()
    link = channel if isinstance(channel, ChannelLink) else ChannelLink.from_input(channel)
    downloader = Downloader(settings.http)
    try:
        client = YouTubeClient(downloader, settings.client)
        yield YouTubeChannelExtractor(
            link,
            client,
            refetch_channel_on_page=settings.extractor.refetch_channel_on_page,
        )
    finally:
        await downloader.close()
