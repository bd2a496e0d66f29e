"""
Ynison wire messages.

Each message the handshake sends or receives has its own type here, and this
module is the only place JSON is produced or parsed for the WebSocket stages:

  HandshakeHeader       → Sec-WebSocket-Protocol value (both stages)
  RedirectResponse      ← first message from the redirector
  StateSnapshotPayload  → the one message sent to the state service
  StateResponse         ← first message from the state service

The snapshot's literal values (version seeds, enum strings, capability
flags) are what the service expects from a web client and must not change.
"""

import json
import random
import string
import uuid
from dataclasses import dataclass

from .errors import MalformedResponseError, NoCurrentTrackError
from .models import as_int, as_text

DEVICE_ID_LENGTH = 16
APP_NAME = 'Chrome'
DEVICE_TITLE = 'Chrome Browser'

# Logical-clock seeds for the queue and status versions
QUEUE_VERSION = 9021243204784341000
STATUS_VERSION = 8321822175199937000


def to_json(obj) -> str:
    """Compact JSON, no spaces after separators."""
    return json.dumps(obj, separators=(',', ':'), ensure_ascii=False)


def generate_device_id(length=DEVICE_ID_LENGTH) -> str:
    """Random lowercase alphabetic id for one resolution attempt."""
    return ''.join(random.choices(string.ascii_lowercase, k=length))


@dataclass(frozen=True)
class HandshakeHeader:
    device_id: str
    app_name: str = APP_NAME
    device_type: int = 1
    redirect_ticket: str | None = None

    def with_ticket(self, redirect_ticket: str) -> 'HandshakeHeader':
        return HandshakeHeader(self.device_id, self.app_name, self.device_type, redirect_ticket)

    def to_dict(self) -> dict:
        data = {
            'Ynison-Device-Id': self.device_id,
            'Ynison-Device-Info': to_json({'app_name': self.app_name, 'type': self.device_type}),
        }
        if self.redirect_ticket is not None:
            data['Ynison-Redirect-Ticket'] = self.redirect_ticket
        return data

    def protocol_header(self) -> str:
        return f'Bearer, v2, {to_json(self.to_dict())}'


def _parse_object(text, what) -> dict:
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f'{what}: invalid JSON') from e
    if not isinstance(data, dict):
        raise MalformedResponseError(f'{what}: expected a JSON object, got {type(data).__name__}')
    return data


@dataclass(frozen=True)
class RedirectResponse:
    host: str
    redirect_ticket: str

    @classmethod
    def parse(cls, text) -> 'RedirectResponse':
        data = _parse_object(text, 'Redirect response')
        host = data.get('host')
        ticket = data.get('redirect_ticket')
        if not isinstance(host, str) or not host:
            raise MalformedResponseError("Redirect response has no 'host'")
        if not isinstance(ticket, str) or not ticket:
            raise MalformedResponseError("Redirect response has no 'redirect_ticket'")
        return cls(host=host, redirect_ticket=ticket)


@dataclass(frozen=True)
class StateSnapshotPayload:
    """Full player state announcing a passive shadow device with nothing queued."""

    device_id: str
    rid: str

    @classmethod
    def for_device(cls, device_id) -> 'StateSnapshotPayload':
        return cls(device_id=device_id, rid=str(uuid.uuid4()))

    def to_dict(self) -> dict:
        player_queue = {
            'current_playable_index': -1,
            'entity_id': '',
            'entity_type': 'VARIOUS',
            'playable_list': [],
            'options': {'repeat_mode': 'NONE'},
            'entity_context': 'BASED_ON_ENTITY_BY_DEFAULT',
            'version': {'device_id': self.device_id, 'version': QUEUE_VERSION, 'timestamp_ms': 0},
            'from_optional': '',
        }
        status = {
            'duration_ms': 0,
            'paused': True,
            'playback_speed': 1,
            'progress_ms': 0,
            'version': {'device_id': self.device_id, 'version': STATUS_VERSION, 'timestamp_ms': 0},
        }
        device = {
            'capabilities': {
                'can_be_player': True,
                'can_be_remote_controller': False,
                'volume_granularity': 16,
            },
            'info': {
                'device_id': self.device_id,
                'type': 'WEB',
                'title': DEVICE_TITLE,
                'app_name': APP_NAME,
            },
            'volume_info': {'volume': 0},
            'is_shadow': True,
        }
        return {
            'update_full_state': {
                'player_state': {'player_queue': player_queue, 'status': status},
                'device': device,
                'is_currently_active': False,
            },
            'rid': self.rid,
            'player_action_timestamp_ms': 0,
            'activity_interception_type': 'DO_NOT_INTERCEPT_BY_DEFAULT',
        }

    def to_json(self) -> str:
        return to_json(self.to_dict())


@dataclass(frozen=True)
class StateResponse:
    current_playable_index: int
    playable_list: tuple

    @classmethod
    def parse(cls, text) -> 'StateResponse':
        data = _parse_object(text, 'State response')
        player_state = data.get('player_state')
        queue = player_state.get('player_queue') if isinstance(player_state, dict) else None
        if not isinstance(queue, dict):
            queue = {}

        index = as_int(queue.get('current_playable_index'), -1)
        playables = queue.get('playable_list')
        if not isinstance(playables, list):
            playables = []
        return cls(current_playable_index=index, playable_list=tuple(playables))

    def current_playable_id(self) -> str:
        """Id of the queue entry the server says is current."""
        index = self.current_playable_index
        if index < 0:
            raise NoCurrentTrackError()
        if index >= len(self.playable_list):
            raise MalformedResponseError(
                f'current_playable_index {index} is out of range ({len(self.playable_list)} playables)')
        entry = self.playable_list[index]
        playable_id = as_text(entry.get('playable_id'), '') if isinstance(entry, dict) else ''
        if not playable_id:
            raise MalformedResponseError(f"Playable at index {index} has no 'playable_id'")
        return playable_id
