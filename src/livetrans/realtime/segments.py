# realtime/segments.py
"""
Per-channel segment store for the live transcript.

Each channel (source speech, target translation) keeps an ordered list of
segments keyed by the protocol item id:
- Partial segments are overwritten in place as deltas arrive
- Final segments are written once and never change afterwards
- Order is first appearance, not last edit

Key invariant: once an id is finalized, nothing in the session touches it again.
"""

from dataclasses import dataclass
from enum import Enum


class Channel(str, Enum):
    SOURCE = "source"
    TARGET = "target"


class ItemState(str, Enum):
    """Lifecycle of one item id within one channel."""

    ABSENT = "absent"
    ACCUMULATING = "accumulating"
    FINALIZED = "finalized"


@dataclass
class Segment:
    id: str
    text: str
    is_partial: bool
    timestamp: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "text": self.text,
            "is_partial": self.is_partial,
            "timestamp": self.timestamp,
        }


class SegmentStore:
    """
    Ordered, upsert-by-id segment collection for one channel.

    The list returned by `segments` is always the renderable transcript;
    there is no separate commit step.
    """

    def __init__(self, channel: Channel):
        self.channel = channel
        self._segments: list[Segment] = []
        self._positions: dict[str, int] = {}
        self._states: dict[str, ItemState] = {}
        self._counter = 0  # Monotonic counter for generated ids

    def _generate_id(self) -> str:
        self._counter += 1
        return f"{self.channel.value}-{self._counter}"

    def upsert(
        self,
        segment_id: str | None,
        text: str,
        is_partial: bool,
        timestamp: str | None = None,
    ) -> Segment | None:
        """
        Insert or update a segment.

        Args:
            segment_id: Item id, or None to generate a channel-scoped one
            text: Segment text (trimmed before storing)
            is_partial: False to finalize the segment
            timestamp: Elapsed-time label, usually set on finalize

        Returns:
            The stored segment, or None if the call was a no-op
        """
        text = (text or "").strip()
        if not text:
            return None

        if segment_id is None:
            segment_id = self._generate_id()

        if self._states.get(segment_id) == ItemState.FINALIZED:
            return None

        self._states[segment_id] = (
            ItemState.ACCUMULATING if is_partial else ItemState.FINALIZED
        )

        segment = Segment(
            id=segment_id,
            text=text,
            is_partial=is_partial,
            timestamp=timestamp,
        )

        position = self._positions.get(segment_id)
        if position is not None:
            self._segments[position] = segment
        else:
            self._positions[segment_id] = len(self._segments)
            self._segments.append(segment)

        return segment

    def state(self, segment_id: str) -> ItemState:
        return self._states.get(segment_id, ItemState.ABSENT)

    def is_finalized(self, segment_id: str) -> bool:
        return self.state(segment_id) == ItemState.FINALIZED

    def get(self, segment_id: str) -> Segment | None:
        position = self._positions.get(segment_id)
        if position is None:
            return None
        return self._segments[position]

    @property
    def segments(self) -> list[Segment]:
        return self._segments.copy()

    def full_text(self) -> str:
        """Join all finalized segment texts in transcript order."""
        return " ".join(seg.text for seg in self._segments if not seg.is_partial)

    def clear(self):
        """Drop all segments and lifecycle state."""
        self._segments = []
        self._positions = {}
        self._states = {}
        self._counter = 0

    def __len__(self) -> int:
        return len(self._segments)
