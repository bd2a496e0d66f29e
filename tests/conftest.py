"""
Fake Yandex Music endpoints for the test suite.

One aiohttp.web app plays all three roles:

  /redirector    WebSocket — sends ``redirect_message`` as its first message
  /state         WebSocket — reads the client's snapshot, replies ``state_message``
  /tracks/{id}   REST      — replies from ``tracks`` (status, body)

Every request is captured (headers, client messages, close codes) so tests
can assert on what the client actually put on the wire.
"""

import asyncio
import json

import pytest
import pytest_asyncio
from aiohttp import WSMsgType, web

from yamusic.config import ClientConfig

TOKEN = 'test-token'

HANG = object()   # "never send anything"
CLOSE = object()  # "close without sending anything"


class YnisonCapture:
    def __init__(self):
        self.host = None
        self.config = None
        self.redirect_message = None      # dict, str, HANG or CLOSE
        self.state_message = None
        self.tracks = {}                  # track id -> (status, body)
        self.redirect_requests = []       # request headers
        self.state_requests = []
        self.state_received = []          # text sent by the client on /state
        self.track_requests = []
        self.close_codes = {'redirector': [], 'state': []}
        self.closed = {'redirector': asyncio.Event(), 'state': asyncio.Event()}

    @property
    def request_count(self):
        return len(self.redirect_requests) + len(self.state_requests) + len(self.track_requests)

    def default_redirect(self, ticket='ticket-1'):
        self.redirect_message = {'host': self.host, 'redirect_ticket': ticket}

    async def _reply(self, ws, message):
        if message is HANG:
            return
        if message is CLOSE:
            await ws.close()
            return
        if isinstance(message, str):
            await ws.send_str(message)
        else:
            await ws.send_str(json.dumps(message))

    async def _drain(self, ws, stage):
        async for _ in ws:
            pass
        self.close_codes[stage].append(ws.close_code)
        self.closed[stage].set()

    async def handle_redirector(self, request):
        self.redirect_requests.append(dict(request.headers))
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        await self._reply(ws, self.redirect_message)
        await self._drain(ws, 'redirector')
        return ws

    async def handle_state(self, request):
        self.state_requests.append(dict(request.headers))
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        msg = await ws.receive()
        if msg.type == WSMsgType.TEXT:
            self.state_received.append(msg.data)
            await self._reply(ws, self.state_message)
        await self._drain(ws, 'state')
        return ws

    async def handle_track(self, request):
        self.track_requests.append({'id': request.match_info['track_id'], **dict(request.headers)})
        status, body = self.tracks.get(request.match_info['track_id'], (404, 'Not Found'))
        if not isinstance(body, str):
            body = json.dumps(body)
        return web.Response(status=status, text=body, content_type='application/json')


@pytest_asyncio.fixture
async def ynison(aiohttp_server):
    capture = YnisonCapture()
    app = web.Application()
    app.router.add_get('/redirector', capture.handle_redirector)
    app.router.add_get('/state', capture.handle_state)
    app.router.add_get('/tracks/{track_id}', capture.handle_track)
    server = await aiohttp_server(app)

    capture.host = f'{server.host}:{server.port}'
    capture.config = ClientConfig(
        token=TOKEN,
        is_oauth=True,
        timeout=5,
        redirector_url=f'ws://{capture.host}/redirector',
        state_url_template='ws://{host}/state',
        api_base=f'http://{capture.host}',
    )
    capture.default_redirect()
    return capture


@pytest.fixture
def raw_track():
    return {
        'id': '12345',
        'title': 'Song',
        'durationMs': 215000,
        'artists': [{'name': 'First Artist'}, {'name': 'Second Artist'}],
        'coverUri': 'avatars.yandex.net/get-music/123/%%',
    }
