"""
Track metadata lookup — GET https://api.music.yandex.net/tracks/<id>.

Success body:

  { "result": [ { "id", "title", "durationMs", "artists": [{"name"}], "coverUri" }, ... ] }

Failures are classified, never retried:

  non-2xx + OAuth mode + "Unavailable For Legal Reasons" in body → GeoRestrictedError
  any other non-2xx                                              → ProtocolError(status)
  body is not JSON                                               → MalformedResponseError
  result[0] missing                                              → TrackNotFoundError
  connection/timeout                                             → TransportError
"""

import json
import logging
from urllib.parse import quote

from .errors import TrackNotFoundError, MalformedResponseError, classify_http_failure
from .models import TrackInfo
from .session import USE_CONFIG_TIMEOUT, resolve_timeout, session_scope, with_deadline

log = logging.getLogger('yamusic.fetch')


def _first_result(data):
    result = data.get('result') if isinstance(data, dict) else None
    if isinstance(result, list) and result and result[0] is not None:
        return result[0]
    return None


async def _get_track(session, config, track_id) -> dict:
    url = f"{config.api_base.rstrip('/')}/tracks/{quote(str(track_id), safe=':')}"
    headers = {**config.auth_headers(), 'Accept': 'application/json'}

    async with session.get(url, headers=headers,
                           proxy=config.proxy, proxy_auth=config.proxy_auth) as resp:
        body = await resp.text(errors='replace')
        if not 200 <= resp.status < 300:
            log.warning("Track %s lookup failed: HTTP %d", track_id, resp.status)
            raise classify_http_failure(resp.status, body, config.is_oauth)

    try:
        data = json.loads(body)
    except ValueError as e:
        raise MalformedResponseError(f'Track {track_id}: response is not JSON') from e

    node = _first_result(data)
    if node is None:
        raise TrackNotFoundError(f'Track {track_id} not found in response')
    return node


async def fetch_track_raw(config, track_id, *, session=None, timeout=USE_CONFIG_TIMEOUT) -> dict:
    """Return the raw ``result[0]`` JSON object for *track_id*."""
    config.require_token()
    timeout = resolve_timeout(config, timeout)
    async with session_scope(session) as s:
        node = await with_deadline(_get_track(s, config, track_id), timeout, f'Track {track_id} lookup')
    log.debug("Fetched raw info for track %s", track_id)
    return node


async def fetch_track_info(config, track_id, *, session=None, timeout=USE_CONFIG_TIMEOUT) -> TrackInfo:
    """Fetch and normalize one track."""
    node = await fetch_track_raw(config, track_id, session=session, timeout=timeout)
    return TrackInfo.from_json(node)
