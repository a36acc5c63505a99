# routers/websocket/translate.py
"""
WebSocket route for live speech translation.

The client streams PCM16 microphone audio; the server relays it to the
OpenAI Realtime API and pushes reconciled source/target segments back.

Client -> server:
- binary frames: PCM16 mono audio at `input_sample_rate`
- {"type": "end_stream"}: commit pending audio and finish

Server -> client:
- {"type": "session_started", "language": ...}
- {"type": "segments_update", "channel": ..., "segment": {...}}
- {"type": "transcript_final", "source": ..., "target": ..., "segments": {...}}
- {"type": "error", "message": ...}
"""

import asyncio
import json
import os

import websockets
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from livetrans.realtime.audio import resample_pcm16
from livetrans.realtime.languages import build_session_config, language_name, normalize_language
from livetrans.realtime.session import TranslationSession
from livetrans.realtime.transport import RealtimeConnection

from ._base import (
    parse_websocket_message,
    send_error,
    send_segment_update,
    send_transcript_final,
)

router = APIRouter()

DEFAULT_INPUT_SAMPLE_RATE = 16000
END_STREAM_GRACE = 2.0  # Seconds to wait for the last finals after commit


def _sample_rate(value: str | None) -> int:
    try:
        rate = int(value) if value else DEFAULT_INPUT_SAMPLE_RATE
    except ValueError:
        return DEFAULT_INPUT_SAMPLE_RATE
    return rate if rate > 0 else DEFAULT_INPUT_SAMPLE_RATE


@router.websocket("/translate")
async def translate_stream(ws: WebSocket):
    """
    WebSocket endpoint for live translation.

    Query params:
        language: Source language code (default: nl)
        input_sample_rate: Sample rate of the client audio (default: 16000)
    """
    await ws.accept()
    print("WebSocket /ws/translate connected")

    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        await send_error(ws, "OPENAI_API_KEY not configured")
        await ws.close()
        return

    language = normalize_language(ws.query_params.get("language"))
    input_sample_rate = _sample_rate(ws.query_params.get("input_sample_rate"))
    session_config = build_session_config(
        language,
        target_language=os.getenv("TRANSLATION_TARGET_LANGUAGE", "English"),
        model=os.getenv("OPENAI_REALTIME_MODEL", "gpt-realtime"),
        transcription_model=os.getenv("OPENAI_TRANSCRIBE_MODEL", "gpt-4o-transcribe"),
    )

    session = TranslationSession()
    upstream: RealtimeConnection | None = None
    closed = False

    async def forward_audio(upstream: RealtimeConnection) -> str:
        """Relay client audio upstream until end_stream or disconnect."""
        while True:
            msg = await parse_websocket_message(ws)

            if msg["type"] == "audio":
                await upstream.append_audio(resample_pcm16(msg["data"], input_sample_rate))

            elif msg["type"] == "end_stream":
                print("Client requested stream end")
                await upstream.commit()
                return "end_stream"

            elif msg["type"] == "disconnect":
                return "disconnect"

            elif msg["type"] == "metadata":
                print(f"Metadata: {msg['data']}")

    async def forward_events(upstream: RealtimeConnection) -> None:
        """Reconcile upstream events and push segment updates to the client."""
        try:
            async for raw in upstream:
                try:
                    event = json.loads(raw)
                except ValueError:
                    continue
                if not isinstance(event, dict):
                    continue

                if event.get("type") == "error":
                    error = event.get("error") or {}
                    message = error.get("message", error) if isinstance(error, dict) else error
                    print(f"❌ Realtime API error: {message}")
                    continue

                update = await session.dispatch(event)
                if update and not closed:
                    await send_segment_update(ws, update)
        except websockets.ConnectionClosed as e:
            print(f"❌ Realtime WebSocket closed: {e}")

    audio_task = None
    events_task = None

    try:
        upstream = await RealtimeConnection.connect(api_key, session_config)
        session.start(upstream)
        await ws.send_json({
            "type": "session_started",
            "language": language,
            "language_name": language_name(language),
        })

        audio_task = asyncio.create_task(forward_audio(upstream))
        events_task = asyncio.create_task(forward_events(upstream))

        done, _ = await asyncio.wait(
            {audio_task, events_task},
            return_when=asyncio.FIRST_COMPLETED,
        )

        if audio_task in done and audio_task.result() == "end_stream":
            # Let the last completion events arrive before the summary
            await asyncio.wait({events_task}, timeout=END_STREAM_GRACE)
            await send_transcript_final(ws, session)
            await ws.close()
        elif events_task in done:
            events_task.result()
            await send_error(ws, "Realtime session ended")

    except asyncio.TimeoutError:
        await send_error(ws, "Realtime API connection timeout")
    except websockets.InvalidStatus as e:
        print(f"Realtime API connection failed: {e}")
        await send_error(ws, str(e))
    except WebSocketDisconnect:
        print("Client disconnected: WebSocketDisconnect")
    except RuntimeError as e:
        if "disconnect message has been received" in str(e):
            print("Client disconnected: Runtime")
        else:
            print(f"WebSocket error: RuntimeError: {e}")
    except Exception as e:
        print(f"WebSocket error: {type(e).__name__}: {e}")
    finally:
        closed = True
        pending = [task for task in (audio_task, events_task) if task]
        for task in pending:
            if not task.done():
                task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        session.stop()
        if upstream:
            await upstream.close()
        print("WebSocket /ws/translate closed")
