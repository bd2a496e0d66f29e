"""
YandexMusicClient — the public entry point.

Holds one immutable ClientConfig.  Use it directly (each call opens and
closes its own HTTP session) or as an async context manager (one session
for the lifetime of the block):

    config = ClientConfig(token=token, is_oauth=True)
    async with YandexMusicClient(config) as client:
        track_id = await client.get_current_track_id()
        info = await client.get_track_info(track_id)

Every method checks the token before touching the network and raises
TokenNotSetError when it is missing or blank.
"""

import logging

from .config import ClientConfig
from .fetch import fetch_track_info, fetch_track_raw
from .models import TrackInfo
from .session import USE_CONFIG_TIMEOUT, new_session
from .ynison import resolve_current_track_id

log = logging.getLogger('yamusic.client')


class YandexMusicClient:
    """Async client for "what is playing now" plus track metadata."""

    def __init__(self, config: ClientConfig | None = None, **options):
        if config is None:
            config = ClientConfig(**options)
        elif options:
            config = config.replace(**options)
        self.config = config
        self._session = None

    def with_config(self, **changes) -> 'YandexMusicClient':
        """Return a new, unopened client whose config has *changes* applied."""
        return YandexMusicClient(self.config.replace(**changes))

    async def start(self):
        if self._session is None:
            self._session = new_session()
            log.debug("HTTP session opened")

    async def stop(self):
        if self._session is not None:
            await self._session.close()
            self._session = None
            log.debug("HTTP session closed")

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()

    async def get_current_track_id(self, *, timeout=USE_CONFIG_TIMEOUT) -> str:
        self.config.require_token()
        return await resolve_current_track_id(self.config, session=self._session, timeout=timeout)

    async def get_track_raw_info(self, track_id, *, timeout=USE_CONFIG_TIMEOUT) -> dict:
        self.config.require_token()
        return await fetch_track_raw(self.config, track_id, session=self._session, timeout=timeout)

    async def get_track_info(self, track_id, *, timeout=USE_CONFIG_TIMEOUT) -> TrackInfo:
        self.config.require_token()
        return await fetch_track_info(self.config, track_id, session=self._session, timeout=timeout)

    async def get_current_track_info(self, *, timeout=USE_CONFIG_TIMEOUT) -> TrackInfo:
        """Resolve the current track id, then fetch its metadata."""
        track_id = await self.get_current_track_id(timeout=timeout)
        return await self.get_track_info(track_id, timeout=timeout)

    def __repr__(self):
        return f"YandexMusicClient({self.config!r})"
