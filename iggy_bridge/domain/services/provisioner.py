"""Idempotent stream/topic provisioning."""
from __future__ import annotations

import logging

from iggy_bridge.core.exceptions import ProvisioningError
from iggy_bridge.infra.iggy.transport import (
    BrokerTransport,
    TopologyAlreadyExists,
    TopologyNotFound,
)

logger = logging.getLogger(__name__)


class TopologyProvisioner:
    """Ensures a stream and its topic exist before traffic flows.

    This is check-then-act, not a transaction. Concurrent first-use from
    several clients can see "not found" together and all try to create; the
    broker rejects every create but one with "already exists", which counts
    as success here. The broker's uniqueness check is the source of truth.
    """

    def __init__(self, transport: BrokerTransport) -> None:
        self._transport = transport

    async def ensure_topology(self, stream: str, topic: str, partition_count: int) -> None:
        await self._ensure_stream(stream)
        await self._ensure_topic(stream, topic, partition_count)

    # ------------------------------------------------------------------ #
    # Stream                                                              #
    # ------------------------------------------------------------------ #
    async def _ensure_stream(self, stream: str) -> None:
        try:
            await self._transport.get_stream(stream)
            logger.debug("Stream %s already exists", stream)
            return
        except TopologyNotFound:
            pass
        except Exception as exc:
            logger.error("Failed to look up stream %s: %s", stream, exc)
            raise ProvisioningError(f"looking up stream {stream!r} failed: {exc}") from exc

        logger.info("Creating stream %s...", stream)
        try:
            await self._transport.create_stream(stream)
        except TopologyAlreadyExists:
            logger.info("Stream %s was created concurrently", stream)
            return
        except Exception as exc:
            logger.error("Failed to create stream %s: %s", stream, exc)
            raise ProvisioningError(f"creating stream {stream!r} failed: {exc}") from exc
        logger.info("Stream %s created", stream)

    # ------------------------------------------------------------------ #
    # Topic                                                               #
    # ------------------------------------------------------------------ #
    async def _ensure_topic(self, stream: str, topic: str, partition_count: int) -> None:
        try:
            await self._transport.get_topic(stream, topic)
            logger.debug("Topic %s already exists", topic)
            return
        except TopologyNotFound:
            pass
        except Exception as exc:
            logger.error("Failed to look up topic %s: %s", topic, exc)
            raise ProvisioningError(f"looking up topic {topic!r} failed: {exc}") from exc

        logger.info("Creating topic %s...", topic)
        try:
            await self._transport.create_topic(stream, topic, partitions_count=partition_count)
        except TopologyAlreadyExists:
            logger.info("Topic %s was created concurrently", topic)
            return
        except Exception as exc:
            logger.error("Failed to create topic %s: %s", topic, exc)
            raise ProvisioningError(f"creating topic {topic!r} failed: {exc}") from exc
        logger.info("Topic %s created", topic)
