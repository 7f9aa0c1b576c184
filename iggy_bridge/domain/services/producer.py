"""Producer: wrap text in an envelope and send it to the fixed partition."""
from __future__ import annotations

import logging
import uuid

from iggy_bridge.core.exceptions import SendError
from iggy_bridge.domain.codec import encode_envelope, now_millis
from iggy_bridge.domain.models.message import Message
from iggy_bridge.domain.models.topology import Topology
from iggy_bridge.infra.iggy.transport import BrokerTransport

logger = logging.getLogger(__name__)


def new_message_id(timestamp: int) -> str:
    """Return `msg-<millis>-<suffix>`.

    A label, not a dedup key: there is no collision detection.
    """
    return f"msg-{timestamp}-{uuid.uuid4().hex[:7]}"


class Producer:
    def __init__(self, transport: BrokerTransport, topology: Topology) -> None:
        self._transport = transport
        self._topology = topology

    async def send(self, text: str) -> Message:
        """Send one message. Empty text is the caller's problem, not checked here."""
        timestamp = now_millis()
        message_id = new_message_id(timestamp)
        payload = encode_envelope(text, timestamp)
        try:
            await self._transport.send_messages(
                self._topology.stream,
                self._topology.topic,
                self._topology.partition_id,
                [payload],
            )
        except Exception as exc:
            logger.error("Failed to send message: %s", exc)
            raise SendError(f"sending message failed: {exc}") from exc
        logger.info("Message sent: %s", message_id)
        return Message(id=message_id, payload=text, timestamp=timestamp)
