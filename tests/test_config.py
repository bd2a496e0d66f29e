import json

import aiohttp
import pytest

from yamusic import config as config_module
from yamusic.config import DEFAULT_TIMEOUT, ClientConfig, cfg, reload_config
from yamusic.errors import TokenNotSetError


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / 'config.json'
    monkeypatch.setenv('YAMUSIC_CONFIG', str(path))
    monkeypatch.delenv('YANDEX_MUSIC_TOKEN', raising=False)
    monkeypatch.delenv('YANDEX_MUSIC_PROXY_PASSWORD', raising=False)
    monkeypatch.chdir(tmp_path)

    def write(data):
        path.write_text(json.dumps(data))
        reload_config()

    yield write
    config_module._section = None


def test_cfg_reads_yandex_music_section(config_file) -> None:
    config_file({'yandex_music': {'oauth': True, 'proxy': None}, 'other': {'proxy': 'x'}})
    assert cfg('oauth') is True
    assert cfg('missing', default=7) == 7
    assert cfg('proxy', default='none') == 'none'


def test_missing_section_uses_defaults(config_file) -> None:
    config_file({'other': {}})
    assert cfg('oauth', default=False) is False
    assert ClientConfig.from_config().timeout == DEFAULT_TIMEOUT


def test_from_config_reads_file_and_env(config_file, monkeypatch) -> None:
    config_file({'yandex_music': {
        'oauth': True,
        'timeout': 3,
        'proxy': 'http://proxy.local:8080',
        'proxy_user': 'bob',
    }})
    monkeypatch.setenv('YANDEX_MUSIC_TOKEN', 'env-token')
    monkeypatch.setenv('YANDEX_MUSIC_PROXY_PASSWORD', 'pw')

    config = ClientConfig.from_config()
    assert config.token == 'env-token'
    assert config.is_oauth is True
    assert config.timeout == 3
    assert config.proxy_auth == aiohttp.BasicAuth('bob', 'pw')


def test_from_config_overrides_win(config_file) -> None:
    config_file({'yandex_music': {'timeout': 3}})
    assert ClientConfig.from_config(token='t', timeout=None).timeout is None


def test_invalid_json_falls_back_to_empty(config_file, tmp_path) -> None:
    (tmp_path / 'config.json').write_text('{not json')
    assert reload_config() == {}
    assert ClientConfig.from_config().token is None


def test_config_is_immutable() -> None:
    config = ClientConfig(token='a')
    with pytest.raises(AttributeError):
        config.token = 'b'
    assert config.replace(token='b').token == 'b'
    assert config.token == 'a'


def test_require_token() -> None:
    ClientConfig(token='a').require_token()
    for token in (None, '', ' \t'):
        with pytest.raises(TokenNotSetError):
            ClientConfig(token=token).require_token()


def test_proxy_auth_needs_proxy_and_credentials() -> None:
    assert ClientConfig(proxy_user='bob', proxy_password='pw').proxy_auth is None
    assert ClientConfig(proxy='http://p:1', proxy_user='bob').proxy_auth is None


def test_auth_headers() -> None:
    assert ClientConfig(token='abc').auth_headers() == {'Authorization': 'OAuth abc'}


@pytest.mark.parametrize('value, expected', [
    (3, 3.0),
    ('10', 10.0),
    (' 2.5 ', 2.5),
    ('ten', DEFAULT_TIMEOUT),
    (True, DEFAULT_TIMEOUT),
    (0, DEFAULT_TIMEOUT),
    (-1, DEFAULT_TIMEOUT),
    ([5], DEFAULT_TIMEOUT),
    (None, DEFAULT_TIMEOUT),
])
def test_from_config_coerces_timeout(config_file, value, expected) -> None:
    config_file({'yandex_music': {'timeout': value}})
    timeout = ClientConfig.from_config().timeout
    assert isinstance(timeout, float)
    assert timeout == expected
