#!/usr/bin/env python3
"""
Print what is playing on Yandex Music right now.

    YANDEX_MUSIC_TOKEN=... python -m yamusic
    python -m yamusic --track-id 12345 --raw

Token lookup order: --token, YANDEX_MUSIC_TOKEN, config file.
Output is JSON on stdout; failures print "ERROR: ..." to stderr and exit 1.
"""

import argparse
import asyncio
import json
import logging
import sys

from .client import YandexMusicClient
from .config import ClientConfig
from .errors import YandexMusicError


def build_parser():
    parser = argparse.ArgumentParser(prog='yamusic-now',
                                     description='Show the current Yandex Music track')
    parser.add_argument('--token', help='OAuth token (default: $YANDEX_MUSIC_TOKEN)')
    parser.add_argument('--oauth', action='store_true', default=None,
                        help='Token is an OAuth token (enables geo-restriction detection)')
    parser.add_argument('--proxy', help='Proxy URL, e.g. http://proxy.host:8080')
    parser.add_argument('--timeout', type=float,
                        help='Seconds per network operation (0 = no timeout)')
    parser.add_argument('--track-id', help='Look up this track instead of the current one')
    parser.add_argument('--raw', action='store_true', help='Print the raw track JSON')
    parser.add_argument('-v', '--verbose', action='store_true')
    return parser


def config_from_args(args) -> ClientConfig:
    overrides = {}
    if args.token:
        overrides['token'] = args.token
    if args.oauth is not None:
        overrides['is_oauth'] = args.oauth
    if args.proxy:
        overrides['proxy'] = args.proxy
    if args.timeout is not None:
        overrides['timeout'] = args.timeout or None
    return ClientConfig.from_config(**overrides)


async def run(args) -> dict:
    async with YandexMusicClient(config_from_args(args)) as client:
        track_id = args.track_id or await client.get_current_track_id()
        if args.raw:
            return await client.get_track_raw_info(track_id)
        info = await client.get_track_info(track_id)
        return info.to_dict()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='[%(levelname)s] %(message)s')

    try:
        data = asyncio.run(run(args))
    except YandexMusicError as e:
        print(f"ERROR ({e.kind.value}): {e}", file=sys.stderr)
        return 1

    json.dump(data, sys.stdout, indent=2, ensure_ascii=False)
    print()   # trailing newline
    return 0


if __name__ == '__main__':
    sys.exit(main())
