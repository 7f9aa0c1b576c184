"""Consumer: poll a batch for the consumer group and decode envelopes."""
from __future__ import annotations

import logging
from typing import List

from iggy_bridge.core.exceptions import DecodeFallback, PollError
from iggy_bridge.domain.codec import decode_envelope, now_millis, raw_text
from iggy_bridge.domain.models.message import Message
from iggy_bridge.domain.models.topology import Topology
from iggy_bridge.infra.iggy.transport import BrokerTransport, RawMessage

logger = logging.getLogger(__name__)

START_OFFSET = 0
UNKNOWN_ID = "unknown"


def to_message(raw: RawMessage) -> Message:
    """Decode *raw* into a Message, degrading to raw text if it is not an envelope."""
    message_id = str(raw.id) if raw.id else UNKNOWN_ID
    try:
        envelope = decode_envelope(raw.payload)
    except DecodeFallback:
        logger.debug("Offset %d is not an envelope; surfacing raw payload", raw.offset)
        return Message(
            id=message_id,
            payload=raw_text(raw.payload),
            timestamp=now_millis(),
            offset=raw.offset,
        )
    return Message(
        id=message_id,
        payload=envelope.text or raw_text(raw.payload),
        timestamp=envelope.timestamp,
        offset=raw.offset,
    )


class Consumer:
    """Polls with auto-commit; the broker owns the group cursor.

    Every poll asks for "offset 0". The broker is expected to resume the
    named group from its committed position, so the start offset only matters
    for the group's first poll. No cursor is kept client-side.
    """

    def __init__(self, transport: BrokerTransport, topology: Topology, consumer_group: str) -> None:
        self._transport = transport
        self._topology = topology
        self._consumer_group = consumer_group

    async def poll(self, max_count: int) -> List[Message]:
        if max_count < 0:
            raise ValueError("max_count must be >= 0")
        if max_count == 0:
            return []
        try:
            raw_messages = await self._transport.poll_messages(
                self._topology.stream,
                self._topology.topic,
                self._topology.partition_id,
                consumer_group=self._consumer_group,
                offset=START_OFFSET,
                count=max_count,
                auto_commit=True,
            )
        except Exception as exc:
            logger.error("Failed to poll messages: %s", exc)
            raise PollError(f"polling messages failed: {exc}") from exc

        messages = [to_message(raw) for raw in raw_messages]
        logger.info("Polled %d messages", len(messages))
        return messages
