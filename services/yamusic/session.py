"""
aiohttp session handling shared by the WebSocket and REST stages.

Every operation accepts an optional ``session``.  When the caller passes one
(YandexMusicClient does while it is open) it is borrowed and left open;
otherwise a private session is created for the call and closed afterwards.
WebSocket connections are never pooled, so concurrent calls never share a
socket either way.
"""

import asyncio
import contextlib
import logging

import aiohttp

from .errors import TransportError

logger = logging.getLogger(__name__)

USER_AGENT = 'yamusic-now/1.0'

# Sentinel: "use config.timeout".  None means "no deadline".
USE_CONFIG_TIMEOUT = object()


def new_session() -> aiohttp.ClientSession:
    connector = aiohttp.TCPConnector(
        limit=10,
        ttl_dns_cache=300,
    )
    return aiohttp.ClientSession(
        connector=connector,
        headers={'User-Agent': USER_AGENT},
    )


@contextlib.asynccontextmanager
async def session_scope(session: aiohttp.ClientSession | None = None):
    """Yield *session* unchanged, or a fresh one that is closed on exit."""
    if session is not None:
        yield session
        return
    own = new_session()
    try:
        yield own
    finally:
        await own.close()


def resolve_timeout(config, timeout):
    return config.timeout if timeout is USE_CONFIG_TIMEOUT else timeout


async def with_deadline(coro, timeout, what: str):
    """Await *coro*, turning timeouts and connection failures into TransportError.

    Domain errors raised inside *coro* pass through untouched.
    """
    try:
        if timeout is None:
            return await coro
        return await asyncio.wait_for(coro, timeout)
    except asyncio.TimeoutError as e:
        logger.warning('%s timed out after %ss', what, timeout)
        raise TransportError(f'{what} timed out after {timeout}s') from e
    except (aiohttp.ClientError, OSError) as e:
        logger.warning('%s failed: %s', what, e)
        raise TransportError(f'{what} failed: {e}') from e
