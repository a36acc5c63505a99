# realtime/engine.py
"""
Event reconciliation engine for the realtime translation session.

Consumes OpenAI Realtime events one at a time and maintains two transcripts:
- source: input audio transcription (what the speaker said)
- target: response audio transcript (the translation)

Each channel keeps a partial text buffer per item id. Deltas append to the
buffer and upsert a partial segment; completion events upsert the final text
and drop the buffer. The protocol carries the same final text on several
overlapping events, so every fallback path is applied and the store's
finalize-once rule keeps the first one.

The engine never sends anything itself. A newly finalized source segment is
reported with should_trigger=True and the session decides whether to send
the translation request.
"""

import json
import time
from dataclasses import dataclass
from typing import Any, Callable

from .extract import extract_text
from .segments import Channel, ItemState, Segment, SegmentStore

# Event types
ITEM_CREATED = "conversation.item.created"
INPUT_TRANSCRIPTION_DELTA = "conversation.item.input_audio_transcription.delta"
INPUT_TRANSCRIPTION_COMPLETED = "conversation.item.input_audio_transcription.completed"
RESPONSE_OUTPUT_ITEM_ADDED = "response.output_item.added"
RESPONSE_TRANSCRIPT_DELTA = (
    "response.audio_transcript.delta",
    "response.output_audio_transcript.delta",
)
RESPONSE_TRANSCRIPT_DONE = (
    "response.audio_transcript.done",
    "response.output_audio_transcript.done",
)
RESPONSE_CONTENT_PART_DONE = "response.content_part.done"
RESPONSE_OUTPUT_ITEM_DONE = "response.output_item.done"


def format_elapsed(seconds: float) -> str:
    """Format elapsed seconds as m:ss (e.g. 7.4 -> "0:07", 125 -> "2:05")."""
    total = max(0, int(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


@dataclass
class SegmentUpdate:
    """One segment change produced by an event."""

    channel: Channel
    segment: Segment
    should_trigger: bool = False

    def to_dict(self) -> dict:
        return {
            "type": "segments_update",
            "channel": self.channel.value,
            "segment": self.segment.to_dict(),
        }


def _parse_event(event: Any) -> dict | None:
    if isinstance(event, dict):
        return event
    if isinstance(event, (str, bytes, bytearray)):
        try:
            parsed = json.loads(event)
        except (ValueError, UnicodeDecodeError):
            return None
        return parsed if isinstance(parsed, dict) else None
    return None


def _item_id(msg: dict) -> str | None:
    """Correlation key: top-level item_id, falling back to item.id."""
    item_id = msg.get("item_id")
    if isinstance(item_id, str) and item_id:
        return item_id
    item = msg.get("item")
    if isinstance(item, dict):
        item_id = item.get("id")
        if isinstance(item_id, str) and item_id:
            return item_id
    return None


class ReconciliationEngine:
    """
    Reconciles the realtime event stream into source/target segment stores.

    Single consumer: call handle_event() for each event in delivery order.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """
        Initialize the engine (inactive until start() is called).

        Args:
            clock: Returns "now" in seconds, used for segment timestamps
        """
        self._clock = clock
        self._stores = {channel: SegmentStore(channel) for channel in Channel}
        self._buffers: dict[Channel, dict[str, str]] = {
            channel: {} for channel in Channel
        }
        self.session_start: float | None = None
        self.active = False

    # Lifecycle

    def start(self, started_at: float | None = None) -> None:
        """Reset all state and begin a new session."""
        self._reset()
        self.session_start = self._clock() if started_at is None else started_at
        self.active = True

    def stop(self) -> None:
        """Clear all state. Events arriving afterwards are ignored."""
        self.active = False
        self._reset()
        self.session_start = None

    def _reset(self) -> None:
        for store in self._stores.values():
            store.clear()
        for buffers in self._buffers.values():
            buffers.clear()

    # Queries

    def segments(self, channel: Channel) -> list[Segment]:
        return self._stores[channel].segments

    def full_text(self, channel: Channel) -> str:
        return self._stores[channel].full_text()

    def buffer(self, channel: Channel, item_id: str) -> str | None:
        return self._buffers[channel].get(item_id)

    def item_state(self, channel: Channel, item_id: str) -> ItemState:
        state = self._stores[channel].state(item_id)
        if state == ItemState.ABSENT and item_id in self._buffers[channel]:
            return ItemState.ACCUMULATING
        return state

    def transcript(self) -> dict:
        return {
            channel.value: [seg.to_dict() for seg in self._stores[channel].segments]
            for channel in Channel
        }

    # Event handling

    def handle_event(self, event: Any) -> SegmentUpdate | None:
        """
        Process one inbound event.

        Args:
            event: Event dict, or its JSON text/bytes

        Returns:
            SegmentUpdate if a segment was created or changed, None otherwise
        """
        if not self.active:
            return None

        msg = _parse_event(event)
        if msg is None:
            return None

        event_type = msg.get("type")

        if event_type == ITEM_CREATED:
            item = msg.get("item")
            item_id = item.get("id") if isinstance(item, dict) else None
            if isinstance(item_id, str) and item_id:
                self._open_buffer(Channel.SOURCE, item_id)
                self._open_buffer(Channel.TARGET, item_id)
            return None

        elif event_type == INPUT_TRANSCRIPTION_DELTA:
            return self._append(Channel.SOURCE, _item_id(msg), extract_text(msg.get("delta")))

        elif event_type == INPUT_TRANSCRIPTION_COMPLETED:
            item_id = _item_id(msg)
            if not item_id:
                return None
            update = self._finalize(
                Channel.SOURCE,
                item_id,
                extract_text(msg.get("transcript")),
                buffer_fallback=True,
            )
            if update:
                update.should_trigger = True
            return update

        elif event_type == RESPONSE_OUTPUT_ITEM_ADDED:
            item_id = _item_id(msg)
            if item_id:
                self._open_buffer(Channel.TARGET, item_id)
            return None

        elif event_type in RESPONSE_TRANSCRIPT_DELTA:
            return self._append(Channel.TARGET, _item_id(msg), extract_text(msg.get("delta")))

        elif event_type in RESPONSE_TRANSCRIPT_DONE:
            item_id = _item_id(msg)
            if not item_id:
                return None
            return self._finalize(
                Channel.TARGET,
                item_id,
                extract_text(msg.get("transcript")),
                buffer_fallback=True,
            )

        elif event_type == RESPONSE_CONTENT_PART_DONE:
            item_id = _item_id(msg)
            if not item_id:
                return None
            return self._finalize(Channel.TARGET, item_id, extract_text(msg.get("part")))

        elif event_type == RESPONSE_OUTPUT_ITEM_DONE:
            item_id = _item_id(msg)
            if not item_id:
                return None
            output = msg["output"] if "output" in msg else msg.get("item")
            return self._finalize(Channel.TARGET, item_id, extract_text(output))

        return None

    def _open_buffer(self, channel: Channel, item_id: str) -> None:
        if self._stores[channel].is_finalized(item_id):
            return
        self._buffers[channel].setdefault(item_id, "")

    def _append(
        self, channel: Channel, item_id: str | None, delta: str
    ) -> SegmentUpdate | None:
        if not item_id or not delta:
            return None
        if self._stores[channel].is_finalized(item_id):
            return None

        buffers = self._buffers[channel]
        buffers[item_id] = buffers.get(item_id, "") + delta

        segment = self._stores[channel].upsert(item_id, buffers[item_id], is_partial=True)
        if segment is None:
            return None
        return SegmentUpdate(channel=channel, segment=segment)

    def _finalize(
        self,
        channel: Channel,
        item_id: str,
        text: str,
        buffer_fallback: bool = False,
    ) -> SegmentUpdate | None:
        store = self._stores[channel]
        buffers = self._buffers[channel]

        if buffer_fallback:
            buffered = buffers.pop(item_id, "")
            final = text if text.strip() else buffered
        else:
            if not text.strip():
                return None
            final = text

        if store.is_finalized(item_id):
            return None

        segment = store.upsert(
            item_id,
            final,
            is_partial=False,
            timestamp=self._elapsed(),
        )
        if segment is None:
            return None

        buffers.pop(item_id, None)
        print(f"✅ [{channel.value}] {segment.timestamp} {item_id}: \"{segment.text}\"")
        return SegmentUpdate(channel=channel, segment=segment)

    def _elapsed(self) -> str | None:
        if self.session_start is None:
            return None
        return format_elapsed(self._clock() - self.session_start)
