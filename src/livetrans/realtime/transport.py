# realtime/transport.py
"""
Upstream WebSocket connection to the OpenAI Realtime API.

Used by the /ws/translate relay: the server holds the realtime session,
forwards microphone audio, and feeds inbound events to TranslationSession.
Implements the EventChannel protocol (is_open + send).
"""

import asyncio
import base64
import json
import os

import websockets
from websockets.protocol import State

DEFAULT_REALTIME_URL = "wss://api.openai.com/v1/realtime"
CONNECTION_TIMEOUT = 10.0


class RealtimeConnection:
    """Persistent WebSocket to the Realtime API."""

    def __init__(self, ws=None):
        self._ws = ws

    @classmethod
    async def connect(
        cls,
        api_key: str,
        session_config: dict,
        url: str | None = None,
        timeout: float = CONNECTION_TIMEOUT,
    ) -> "RealtimeConnection":
        """
        Open the socket and configure the session.

        Args:
            api_key: OpenAI API key
            session_config: Session object (see languages.build_session_config)
            url: Realtime endpoint (default: OPENAI_REALTIME_URL or api.openai.com)
            timeout: Connection timeout in seconds

        Raises:
            asyncio.TimeoutError: If the handshake does not complete in time
        """
        base = url or os.getenv("OPENAI_REALTIME_URL", DEFAULT_REALTIME_URL)
        model = session_config.get("model", "gpt-realtime")
        ws = await asyncio.wait_for(
            websockets.connect(
                f"{base}?model={model}",
                additional_headers={"Authorization": f"Bearer {api_key}"},
            ),
            timeout=timeout,
        )
        print("🔌 Realtime API WebSocket connected")

        connection = cls(ws)
        await connection.send_json({"type": "session.update", "session": session_config})
        return connection

    @property
    def is_open(self) -> bool:
        return self._ws is not None and self._ws.state is State.OPEN

    async def send(self, message: str) -> None:
        await self._ws.send(message)

    async def send_json(self, payload: dict) -> None:
        await self.send(json.dumps(payload))

    async def append_audio(self, pcm16: bytes) -> None:
        """Send a chunk of 24kHz PCM16 audio."""
        if not pcm16:
            return
        await self.send_json({
            "type": "input_audio_buffer.append",
            "audio": base64.b64encode(pcm16).decode("utf-8"),
        })

    async def commit(self) -> None:
        """Commit pending audio so the last phrase gets transcribed."""
        await self.send_json({"type": "input_audio_buffer.commit"})

    def __aiter__(self):
        return self._ws.__aiter__()

    async def close(self):
        if self._ws is not None:
            await self._ws.close()
            print("🔌 Realtime API WebSocket closed")
