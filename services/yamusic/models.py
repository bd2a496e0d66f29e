"""Track metadata as returned to callers."""

import re
from dataclasses import asdict, dataclass

UNKNOWN_ID = 'Unknown ID'
UNKNOWN_TITLE = 'Unknown title'
UNKNOWN_ARTIST = 'Unknown Artist'
COVER_SIZE = '1000x1000'   # substituted for the %% placeholder in coverUri

_SCHEME_RE = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*://')


def as_text(value, default: str) -> str:
    """Scalar JSON value as text; null and containers give *default*."""
    if value is None or isinstance(value, (dict, list)):
        return default
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def as_int(value, default: int = 0) -> int:
    """JSON number or numeric text as int; anything else gives *default*."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def _cover_url(cover_uri: str) -> str:
    cover = cover_uri.replace('%%', COVER_SIZE)
    if not _SCHEME_RE.match(cover):
        cover = 'https://' + cover
    return cover


@dataclass(frozen=True)
class TrackInfo:
    id: str
    title: str
    artist: str
    duration_ms: int
    cover_url: str

    @classmethod
    def from_json(cls, node) -> 'TrackInfo':
        """Build from one raw ``result[]`` entry; missing fields get defaults."""
        if not isinstance(node, dict):
            node = {}

        artist = UNKNOWN_ARTIST
        artists = node.get('artists')
        if isinstance(artists, list) and artists:
            first = artists[0]
            if isinstance(first, dict):
                artist = as_text(first.get('name'), UNKNOWN_ARTIST)

        return cls(
            id=as_text(node.get('id'), UNKNOWN_ID),
            title=as_text(node.get('title'), UNKNOWN_TITLE),
            artist=artist,
            duration_ms=as_int(node.get('durationMs')),
            cover_url=_cover_url(as_text(node.get('coverUri'), '')),
        )

    def to_dict(self) -> dict:
        return asdict(self)


def normalize_track(node) -> TrackInfo:
    return TrackInfo.from_json(node)
