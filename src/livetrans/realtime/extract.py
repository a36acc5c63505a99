# realtime/extract.py
"""
Text extraction for realtime event payloads.

The realtime protocol nests text at different depths depending on the event:
a direct leaf string, a `transcript` summary field, or a `content` list of
parts. extract_text() walks any of these shapes and returns plain text.
"""

from typing import Any


def extract_text(payload: Any) -> str:
    """
    Return the best available plain text for a payload fragment.

    Precedence for dicts: `text` (str) > `transcript` (str) > `content`
    (recursed) > every value in key order. Lists are concatenated without a
    separator. Anything else yields "".

    Args:
        payload: str, list, dict (arbitrarily nested) or None

    Returns:
        Extracted text, "" when nothing usable is found
    """
    if payload is None:
        return ""

    if isinstance(payload, str):
        return payload

    if isinstance(payload, (list, tuple)):
        return "".join(extract_text(part) for part in payload)

    if isinstance(payload, dict):
        text = payload.get("text")
        if isinstance(text, str):
            return text

        transcript = payload.get("transcript")
        if isinstance(transcript, str):
            return transcript

        if "content" in payload:
            return extract_text(payload["content"])

        return "".join(extract_text(value) for value in payload.values())

    return ""
