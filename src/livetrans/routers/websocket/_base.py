# routers/websocket/_base.py
"""
Shared utilities for WebSocket translation routes.

Provides client message parsing and the outbound message formats
(segment updates, final transcript, errors).
"""

import json
from typing import Any

from fastapi import WebSocket

from livetrans.realtime.engine import SegmentUpdate
from livetrans.realtime.segments import Channel
from livetrans.realtime.session import TranslationSession


async def parse_websocket_message(ws: WebSocket) -> dict[str, Any]:
    """
    Parse incoming WebSocket message.

    Returns:
        dict with either:
        - {"type": "audio", "data": bytes} for binary PCM16 audio
        - {"type": "end_stream"} for end stream signal
        - {"type": "metadata", "data": {...}} for other JSON messages
        - {"type": "disconnect"} when the client went away
        - {"type": "unknown"} for anything unparseable
    """
    message = await ws.receive()

    if message.get("type") == "websocket.disconnect":
        return {"type": "disconnect"}

    if message.get("bytes") is not None:
        return {"type": "audio", "data": message["bytes"]}

    if message.get("text") is not None:
        try:
            data = json.loads(message["text"])
        except ValueError:
            return {"type": "unknown"}
        if not isinstance(data, dict):
            return {"type": "unknown"}
        if data.get("type") == "end_stream":
            return {"type": "end_stream"}
        return {"type": "metadata", "data": data}

    return {"type": "unknown"}


async def send_segment_update(ws: WebSocket, update: SegmentUpdate) -> None:
    """
    Send a segments_update message to the client.

    Args:
        ws: WebSocket connection
        update: Output from TranslationSession.dispatch()
    """
    await ws.send_json(update.to_dict())


async def send_transcript_final(ws: WebSocket, session: TranslationSession) -> None:
    """
    Send both transcripts at the end of the stream.

    Args:
        ws: WebSocket connection
        session: Session holding the reconciled segments
    """
    await ws.send_json({
        "type": "transcript_final",
        "source": session.full_text(Channel.SOURCE),
        "target": session.full_text(Channel.TARGET),
        "segments": session.transcript(),
    })


async def send_error(ws: WebSocket, message: str) -> None:
    await ws.send_json({"type": "error", "message": message})
