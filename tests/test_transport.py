import base64
import json

import pytest
from websockets.protocol import State

from livetrans.realtime.transport import RealtimeConnection


class FakeSocket:
    def __init__(self):
        self.state = State.OPEN
        self.sent = []
        self.closed = False

    async def send(self, message):
        self.sent.append(message)

    async def close(self):
        self.closed = True
        self.state = State.CLOSED


def test_is_open_follows_socket_state() -> None:
    assert RealtimeConnection().is_open is False

    ws = FakeSocket()
    connection = RealtimeConnection(ws)
    assert connection.is_open is True

    ws.state = State.CLOSING
    assert connection.is_open is False


@pytest.mark.asyncio
async def test_append_audio_and_commit() -> None:
    ws = FakeSocket()
    connection = RealtimeConnection(ws)

    await connection.append_audio(b"")
    await connection.append_audio(b"\x01\x00\x02\x00")
    await connection.commit()

    messages = [json.loads(m) for m in ws.sent]
    assert messages[0]["type"] == "input_audio_buffer.append"
    assert base64.b64decode(messages[0]["audio"]) == b"\x01\x00\x02\x00"
    assert messages[1] == {"type": "input_audio_buffer.commit"}
    assert len(messages) == 2


@pytest.mark.asyncio
async def test_close_marks_connection_closed() -> None:
    ws = FakeSocket()
    connection = RealtimeConnection(ws)
    await connection.close()
    assert ws.closed is True
    assert connection.is_open is False
