"""
Error kinds raised by the Yandex Music client.

Every failure is a YandexMusicError with a ``kind`` from a closed set, so
callers can branch on ``err.kind`` instead of on class names:

  PRECONDITION       token missing/blank, raised before any network activity
  TRANSPORT          connection refused/reset/timed out, socket closed early
  PROTOCOL           non-2xx HTTP response (carries ``status``)
  GEO_RESTRICTED     HTTP failure + "Unavailable For Legal Reasons" in OAuth mode
  NO_CURRENT_TRACK   the player queue has no current entry
  NOT_FOUND          track lookup returned an empty result
  MALFORMED_RESPONSE the wire call succeeded but the payload has the wrong shape

The underlying exception, when there is one, is chained (``raise ... from e``)
and available as ``__cause__``.
"""

import enum

LEGAL_RESTRICTION_MARKER = 'Unavailable For Legal Reasons'


class ErrorKind(enum.Enum):
    PRECONDITION = 'precondition'
    TRANSPORT = 'transport'
    PROTOCOL = 'protocol'
    GEO_RESTRICTED = 'geo_restricted'
    NO_CURRENT_TRACK = 'no_current_track'
    NOT_FOUND = 'not_found'
    MALFORMED_RESPONSE = 'malformed_response'


class YandexMusicError(Exception):
    kind: ErrorKind = ErrorKind.TRANSPORT

    def __init__(self, message, *, status=None):
        super().__init__(message)
        self.status = status


class TokenNotSetError(YandexMusicError):
    kind = ErrorKind.PRECONDITION

    def __init__(self, message='Token is not set. Set a token before calling methods that require authorization.'):
        super().__init__(message)


class TransportError(YandexMusicError):
    kind = ErrorKind.TRANSPORT


class ProtocolError(YandexMusicError):
    kind = ErrorKind.PROTOCOL


class GeoRestrictedError(YandexMusicError):
    kind = ErrorKind.GEO_RESTRICTED


class NoCurrentTrackError(YandexMusicError):
    kind = ErrorKind.NO_CURRENT_TRACK

    def __init__(self, message='No current track'):
        super().__init__(message)


class TrackNotFoundError(YandexMusicError):
    kind = ErrorKind.NOT_FOUND


class MalformedResponseError(YandexMusicError):
    kind = ErrorKind.MALFORMED_RESPONSE


def classify_http_failure(status: int, body: str, is_oauth: bool) -> YandexMusicError:
    """Build the error for a non-2xx track lookup response.

    The marker check is case-sensitive and only applies to OAuth-mode clients.
    """
    if is_oauth and body and LEGAL_RESTRICTION_MARKER in body:
        return GeoRestrictedError(
            f'Access to the resource is restricted for legal reasons ({LEGAL_RESTRICTION_MARKER})',
            status=status)
    return ProtocolError(f'Failed to fetch track info: HTTP {status}', status=status)
