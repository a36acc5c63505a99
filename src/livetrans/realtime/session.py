# realtime/session.py
"""
Session lifecycle for one live translation run.

TranslationSession binds the reconciliation engine to an outbound event
channel. It resets all state on start, drops everything on stop, and turns
every newly finalized source phrase into exactly one `response.create`
command so the model translates one phrase at a time.
"""

import json
import time
from typing import Any, Callable, Protocol

import websockets

from .engine import ReconciliationEngine, SegmentUpdate
from .segments import Channel, Segment

TRIGGER_COMMAND = json.dumps({"type": "response.create"})


class EventChannel(Protocol):
    """
    Outbound side of the realtime event channel.

    send() raises websockets.ConnectionClosed or ConnectionError when the
    channel went away.
    """

    @property
    def is_open(self) -> bool: ...

    async def send(self, message: str) -> None: ...


class TranslationSession:
    """
    Owns the engine and the outbound channel for the lifetime of a session.

    Usage:
        session = TranslationSession()
        session.start(connection)
        async for raw in connection:
            update = await session.dispatch(raw)
        session.stop()
    """

    def __init__(
        self,
        engine: ReconciliationEngine | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.engine = engine or ReconciliationEngine(clock=clock)
        self._channel: EventChannel | None = None
        self.triggers_sent = 0
        self.triggers_dropped = 0

    @property
    def active(self) -> bool:
        return self.engine.active

    def start(self, channel: EventChannel | None, started_at: float | None = None) -> None:
        """
        Begin a new session, discarding anything left from a previous one.

        Args:
            channel: Outbound channel used for translation requests
            started_at: Session start instant (defaults to the engine clock)
        """
        self.engine.start(started_at)
        self._channel = channel
        self.triggers_sent = 0
        self.triggers_dropped = 0
        print("🎙️ Translation session started")

    def stop(self) -> None:
        """Clear all session state and release the outbound channel."""
        if not self.engine.active and self._channel is None:
            return
        self.engine.stop()
        self._channel = None
        print("🛑 Translation session stopped")

    async def dispatch(self, event: Any) -> SegmentUpdate | None:
        """
        Process one inbound event and send a translation request if needed.

        Args:
            event: Event dict or raw JSON message from the channel

        Returns:
            SegmentUpdate for the client, or None if nothing changed
        """
        if not self.engine.active:
            return None

        update = self.engine.handle_event(event)
        if update and update.should_trigger:
            await self._send_trigger()
        return update

    async def _send_trigger(self) -> None:
        channel = self._channel
        if channel is None or not channel.is_open:
            self.triggers_dropped += 1
            print("⚠️ Channel not open, translation request dropped")
            return
        try:
            await channel.send(TRIGGER_COMMAND)
        except (websockets.ConnectionClosed, ConnectionError) as e:
            self.triggers_dropped += 1
            print(f"⚠️ Channel closed while sending, translation request dropped: {e}")
            return
        self.triggers_sent += 1

    def segments(self, channel: Channel) -> list[Segment]:
        return self.engine.segments(channel)

    def full_text(self, channel: Channel) -> str:
        return self.engine.full_text(channel)

    def transcript(self) -> dict:
        return self.engine.transcript()
