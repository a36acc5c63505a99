"""
Realtime session reconciliation for live translation
"""

from .engine import ReconciliationEngine, SegmentUpdate, format_elapsed
from .extract import extract_text
from .segments import Channel, ItemState, Segment, SegmentStore
from .session import TranslationSession

__all__ = [
    "ReconciliationEngine",
    "SegmentUpdate",
    "format_elapsed",
    "extract_text",
    "Channel",
    "ItemState",
    "Segment",
    "SegmentStore",
    "TranslationSession",
]
