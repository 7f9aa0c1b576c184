"""Envelope codec: `{text, timestamp}` <-> broker payload bytes."""
from __future__ import annotations

import time

from iggy_bridge.core.exceptions import DecodeFallback
from iggy_bridge.domain.models.message import Envelope

EMPTY_PAYLOAD = "<empty>"


def now_millis() -> int:
    return int(time.time() * 1000)


def encode_envelope(text: str, timestamp: int) -> bytes:
    """Serialise an envelope as compact UTF-8 JSON."""
    return Envelope(text=text, timestamp=timestamp).model_dump_json().encode("utf-8")


def decode_envelope(payload: bytes) -> Envelope:
    """Parse *payload* as an envelope.

    Raises
    ------
    DecodeFallback
        If the payload is not UTF-8 JSON with a string `text` and an
        integer `timestamp`.
    """
    try:
        return Envelope.model_validate_json(payload)
    except ValueError as exc:  # ValidationError, bad UTF-8
        raise DecodeFallback("payload is not an envelope") from exc


def raw_text(payload: bytes) -> str:
    """Lenient text rendering of an arbitrary payload; never empty."""
    text = payload.decode("utf-8", errors="replace")
    return text or EMPTY_PAYLOAD
