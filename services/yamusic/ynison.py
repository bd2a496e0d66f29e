"""
Ynison handshake — learn which track is currently playing.

Two one-shot WebSocket exchanges, strictly in sequence:

  1. Redirector  (wss://ynison.music.yandex.ru/redirector...)
     → first message carries the regional ``host`` and a ``redirect_ticket``.
  2. State service (wss://<host>/ynison_state.YnisonStateService/PutYnisonState)
     ← we announce ourselves as a passive shadow device with an empty queue,
     → first message carries the authoritative player queue.

Both stages send ``Authorization: OAuth <token>``, ``Origin`` and the
``Sec-WebSocket-Protocol: Bearer, v2, {...}`` handshake header, use the same
device id, and close the socket (code 1000) right after the first inbound
message.

Usage:
    from yamusic.config import ClientConfig
    from yamusic.ynison import resolve_current_track_id

    track_id = await resolve_current_track_id(ClientConfig(token="..."))
"""

import logging

import aiohttp

from .errors import MalformedResponseError, TransportError
from .payloads import (
    HandshakeHeader,
    RedirectResponse,
    StateResponse,
    StateSnapshotPayload,
    generate_device_id,
)
from .session import USE_CONFIG_TIMEOUT, resolve_timeout, session_scope, with_deadline

log = logging.getLogger('yamusic.ynison')


def _headers(config, header: HandshakeHeader) -> dict:
    return {
        'Sec-WebSocket-Protocol': header.protocol_header(),
        'Origin': config.origin,
        **config.auth_headers(),
    }


async def _first_text(ws, what) -> str:
    """Wait for the first inbound message; anything but text is a failure."""
    msg = await ws.receive()
    if msg.type == aiohttp.WSMsgType.TEXT:
        return msg.data
    if msg.type == aiohttp.WSMsgType.BINARY:
        raise MalformedResponseError(f'{what}: expected a text message, got binary')
    if msg.type == aiohttp.WSMsgType.ERROR:
        raise TransportError(f'{what}: socket error: {ws.exception()}')
    raise TransportError(f'{what}: connection closed before any message (code {ws.close_code})')


# ── stage 1: redirector ──────────────────────────────────────────────────────

async def _redirect(session, config, header) -> RedirectResponse:
    async with session.ws_connect(
        config.redirector_url,
        headers=_headers(config, header),
        proxy=config.proxy,
        proxy_auth=config.proxy_auth,
    ) as ws:
        try:
            text = await _first_text(ws, 'Redirector')
        finally:
            await ws.close(code=aiohttp.WSCloseCode.OK)
    return RedirectResponse.parse(text)


async def get_redirect(config, header: HandshakeHeader, *, session=None,
                       timeout=USE_CONFIG_TIMEOUT) -> RedirectResponse:
    """Ask the redirector which host serves this device's state session."""
    config.require_token()
    timeout = resolve_timeout(config, timeout)
    async with session_scope(session) as s:
        redirect = await with_deadline(_redirect(s, config, header), timeout, 'Ynison redirect')
    log.debug("Redirected to %s", redirect.host)
    return redirect


# ── stage 2: state service ───────────────────────────────────────────────────

async def _sync(session, config, url, header, payload) -> str:
    async with session.ws_connect(
        url,
        headers=_headers(config, header),
        proxy=config.proxy,
        proxy_auth=config.proxy_auth,
    ) as ws:
        try:
            await ws.send_str(payload.to_json())
            text = await _first_text(ws, 'State service')
        finally:
            await ws.close(code=aiohttp.WSCloseCode.OK)
    return StateResponse.parse(text).current_playable_id()


async def sync_state(config, redirect: RedirectResponse, header: HandshakeHeader, *,
                     session=None, timeout=USE_CONFIG_TIMEOUT) -> str:
    """Announce a shadow device to the state service and return the current playable id.

    *header* is the stage-one handshake header; the redirect ticket is added
    here so both stages share one device id.
    """
    config.require_token()
    timeout = resolve_timeout(config, timeout)
    url = config.state_url_template.format(host=redirect.host)
    header = header.with_ticket(redirect.redirect_ticket)
    payload = StateSnapshotPayload.for_device(header.device_id)
    async with session_scope(session) as s:
        return await with_deadline(_sync(s, config, url, header, payload), timeout, 'Ynison state sync')


# ── public API ───────────────────────────────────────────────────────────────

async def resolve_current_track_id(config, *, session=None, timeout=USE_CONFIG_TIMEOUT) -> str:
    """Run both handshake stages with a fresh device id; return the playable id."""
    config.require_token()
    header = HandshakeHeader(device_id=generate_device_id())
    async with session_scope(session) as s:
        redirect = await get_redirect(config, header, session=s, timeout=timeout)
        playable_id = await sync_state(config, redirect, header, session=s, timeout=timeout)
    log.info("Current track id: %s", playable_id)
    return playable_id
