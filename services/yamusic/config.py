"""
Configuration for the Yandex Music client.

Only the ``yandex_music`` section of a JSON config file is read.  The first
file that exists wins:
  1. $YAMUSIC_CONFIG                 (explicit override)
  2. /etc/yamusic/config.json        (system-wide install)
  3. config.json                     (CWD — handy for local dev)

The OAuth token is a secret and stays in the YANDEX_MUSIC_TOKEN environment
variable; the config file only carries the non-secret knobs:

  {
    "yandex_music": {
      "oauth": true,
      "proxy": "http://proxy.host:8080",
      "proxy_user": "user",
      "timeout": 10
    }
  }

Usage:
    from yamusic.config import ClientConfig, cfg

    proxy   = cfg("proxy")                        # None when unset
    config  = ClientConfig.from_config()          # token from env
    config  = config.replace(token="...")         # new value, old one untouched
"""

import dataclasses
import json
import logging
import os
from dataclasses import dataclass

import aiohttp

from .errors import TokenNotSetError

logger = logging.getLogger(__name__)

SECTION = "yandex_music"
REDIRECTOR_URL = "wss://ynison.music.yandex.ru/redirector.YnisonRedirectService/GetRedirectToYnison"
STATE_URL_TEMPLATE = "wss://{host}/ynison_state.YnisonStateService/PutYnisonState"
API_BASE = "https://api.music.yandex.net"
ORIGIN = "http://music.yandex.ru"
DEFAULT_TIMEOUT = 10.0  # seconds, per network operation

_section: dict | None = None


def _search_paths() -> list:
    paths = []
    override = os.getenv("YAMUSIC_CONFIG")
    if override:
        paths.append(override)
    paths.extend(["/etc/yamusic/config.json", "config.json"])
    return paths


def _validate(section: dict, path: str) -> None:
    """Warn about settings that will be ignored or are risky."""
    if "token" in section:
        logger.warning("Config %s: token found in config file — prefer YANDEX_MUSIC_TOKEN", path)
    if section.get("proxy_user") and not section.get("proxy"):
        logger.warning("Config %s: proxy_user set without proxy — proxy auth disabled", path)


def _read_section(path: str) -> dict | None:
    """The yandex_music section of *path*; None when the file is missing or unreadable."""
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError:
        return None
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in %s: %s", path, e)
        return None

    section = data.get(SECTION) if isinstance(data, dict) else None
    if section is None:
        logger.warning("Config %s: no '%s' section — using defaults", path, SECTION)
        return {}
    if not isinstance(section, dict):
        logger.warning("Config %s: '%s' is not an object — using defaults", path, SECTION)
        return {}
    _validate(section, path)
    return section


def load_config() -> dict:
    """Return the yandex_music settings, reading the config file on first use."""
    global _section
    if _section is None:
        for path in _search_paths():
            section = _read_section(path)
            if section is not None:
                logger.info("Config loaded from %s", path)
                _section = section
                break
        else:
            logger.info("No config file found — using defaults and environment")
            _section = {}
    return _section


def cfg(key: str, *, default=None):
    """One yandex_music setting; *default* when it is missing or null."""
    val = load_config().get(key)
    return default if val is None else val


def reload_config():
    """Drop the cached settings and read the config file again."""
    global _section
    _section = None
    return load_config()


def _timeout(value) -> float | None:
    """Config timeout in seconds; invalid values fall back to DEFAULT_TIMEOUT."""
    if value is None:
        return DEFAULT_TIMEOUT
    try:
        if isinstance(value, bool):
            raise ValueError(value)
        seconds = float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid yandex_music.timeout %r — using %ss", value, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    if seconds <= 0:
        logger.warning("Non-positive yandex_music.timeout %r — using %ss", value, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    return seconds


@dataclass(frozen=True)
class ClientConfig:
    """Everything one call needs to reach Yandex Music.

    Immutable: concurrent calls can share a value safely, and a "setter" is
    just ``replace()`` returning a new config.
    """

    token: str | None = None
    is_oauth: bool = False
    proxy: str | None = None
    proxy_user: str | None = None
    proxy_password: str | None = None
    timeout: float | None = DEFAULT_TIMEOUT
    redirector_url: str = REDIRECTOR_URL
    state_url_template: str = STATE_URL_TEMPLATE
    api_base: str = API_BASE
    origin: str = ORIGIN

    @classmethod
    def from_config(cls, **overrides) -> "ClientConfig":
        """Build from the config file plus YANDEX_MUSIC_TOKEN / YANDEX_MUSIC_PROXY_PASSWORD."""
        values = {
            "token": os.getenv("YANDEX_MUSIC_TOKEN") or cfg("token"),
            "is_oauth": bool(cfg("oauth", default=False)),
            "proxy": cfg("proxy"),
            "proxy_user": cfg("proxy_user"),
            "proxy_password": os.getenv("YANDEX_MUSIC_PROXY_PASSWORD") or cfg("proxy_password"),
            "timeout": _timeout(cfg("timeout")),
            "redirector_url": cfg("redirector_url", default=REDIRECTOR_URL),
            "state_url_template": cfg("state_url_template", default=STATE_URL_TEMPLATE),
            "api_base": cfg("api_base", default=API_BASE),
        }
        values.update(overrides)
        return cls(**values)

    def replace(self, **changes) -> "ClientConfig":
        return dataclasses.replace(self, **changes)

    @property
    def has_token(self) -> bool:
        return bool(self.token and self.token.strip())

    def require_token(self) -> None:
        """Raise TokenNotSetError when the token is missing or blank."""
        if not self.has_token:
            raise TokenNotSetError()

    @property
    def proxy_auth(self) -> aiohttp.BasicAuth | None:
        """Basic proxy credentials, only when both user and password are set."""
        if self.proxy and self.proxy_user and self.proxy_password is not None:
            return aiohttp.BasicAuth(self.proxy_user, self.proxy_password)
        return None

    def auth_headers(self) -> dict:
        return {"Authorization": f"OAuth {self.token}"}

    def __repr__(self):
        # Keep the token out of logs and tracebacks
        token = "<set>" if self.has_token else "<unset>"
        return (f"ClientConfig(token={token}, is_oauth={self.is_oauth}, "
                f"proxy={self.proxy!r}, timeout={self.timeout!r})")
