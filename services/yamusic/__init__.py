"""
yamusic — "now playing" for Yandex Music.

Resolves the track a user is currently playing through the Ynison
real-time state protocol, and fetches normalized metadata for a track id.

Modules:
  config.py    ClientConfig (immutable) + JSON config file loader
  ynison.py    two-stage WebSocket handshake → current playable id
  fetch.py     REST track lookup with error classification
  models.py    TrackInfo and the raw-JSON normalizer
  payloads.py  typed Ynison wire messages, device id generation
  errors.py    YandexMusicError and the closed ErrorKind set
  client.py    YandexMusicClient facade
"""

from .client import YandexMusicClient
from .config import ClientConfig
from .errors import (
    ErrorKind,
    GeoRestrictedError,
    MalformedResponseError,
    NoCurrentTrackError,
    ProtocolError,
    TokenNotSetError,
    TrackNotFoundError,
    TransportError,
    YandexMusicError,
)
from .models import TrackInfo, normalize_track

__all__ = [
    'ClientConfig',
    'ErrorKind',
    'GeoRestrictedError',
    'MalformedResponseError',
    'NoCurrentTrackError',
    'ProtocolError',
    'TokenNotSetError',
    'TrackInfo',
    'TrackNotFoundError',
    'TransportError',
    'YandexMusicClient',
    'YandexMusicError',
    'normalize_track',
]
