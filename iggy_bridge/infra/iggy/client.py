"""Iggy transport built on the apache-iggy SDK's TCP client."""
from __future__ import annotations

import logging
import re
from typing import Any, Sequence

from apache_iggy import Consumer, IggyClient, PollingStrategy, SendMessage

from iggy_bridge.core.config import Settings
from iggy_bridge.infra.iggy.transport import (
    RawMessage,
    TopologyAlreadyExists,
    TopologyNotFound,
    TransportError,
)

logger = logging.getLogger(__name__)

_NOT_FOUND = re.compile(r"not[ _]found|does not exist", re.IGNORECASE)
_ALREADY_EXISTS = re.compile(r"already[ _]exists", re.IGNORECASE)

# Scalar fields of the SDK's `Stats` object, exported as-is.
STATS_FIELDS = (
    "process_id",
    "cpu_usage",
    "total_cpu_usage",
    "memory_usage",
    "total_memory",
    "available_memory",
    "start_time",
    "read_bytes",
    "written_bytes",
    "messages_size_bytes",
    "streams_count",
    "topics_count",
    "partitions_count",
    "segments_count",
    "messages_count",
    "clients_count",
    "consumer_groups_count",
    "threads_count",
    "free_disk_space",
    "total_disk_space",
    "hostname",
    "os_name",
    "os_version",
    "kernel_version",
    "iggy_server_version",
    "iggy_server_semver",
)


def classify_lookup_error(exc: Exception) -> Exception:
    """Map an SDK error raised by a get_* lookup onto the transport signals."""
    if _NOT_FOUND.search(str(exc)):
        return TopologyNotFound(str(exc))
    return exc


def classify_create_error(exc: Exception) -> Exception:
    """Map an SDK error raised by a create_* call onto the transport signals."""
    if _ALREADY_EXISTS.search(str(exc)):
        return TopologyAlreadyExists(str(exc))
    return exc


def stats_to_dict(stats: Any) -> dict[str, Any]:
    """Flatten the SDK's `Stats` object into a JSON-friendly dict."""
    out = {name: getattr(stats, name) for name in STATS_FIELDS}
    out["run_time"] = stats.run_time.total_seconds()
    return out


class IggyTransport:
    """Encapsulates broker operations against an Iggy server.

    Everything, stats included, goes over one authenticated TCP session.
    """

    def __init__(self, settings: Settings) -> None:
        self._address = settings.iggy_address
        self._client: IggyClient | None = None

    def _require_client(self) -> IggyClient:
        if self._client is None:
            raise TransportError("transport is not connected")
        return self._client

    # ---------- Connection -------------------------------------------------

    async def connect(self, username: str, password: str) -> None:
        client = IggyClient(self._address)
        await client.connect()
        await client.login_user(username, password)
        self._client = client

    async def disconnect(self) -> None:
        # The SDK closes its socket when the client is dropped.
        self._client = None

    # ---------- Topology ---------------------------------------------------

    async def get_stream(self, stream: str) -> Any:
        try:
            details = await self._require_client().get_stream(stream)
        except TransportError:
            raise
        except Exception as exc:
            raise classify_lookup_error(exc) from exc
        if details is None:
            raise TopologyNotFound(f"stream {stream!r} not found")
        return details

    async def create_stream(self, stream: str) -> None:
        try:
            await self._require_client().create_stream(name=stream)
        except TransportError:
            raise
        except Exception as exc:
            raise classify_create_error(exc) from exc

    async def get_topic(self, stream: str, topic: str) -> Any:
        try:
            details = await self._require_client().get_topic(stream, topic)
        except TransportError:
            raise
        except Exception as exc:
            raise classify_lookup_error(exc) from exc
        if details is None:
            raise TopologyNotFound(f"topic {topic!r} not found in stream {stream!r}")
        return details

    async def create_topic(self, stream: str, topic: str, partitions_count: int) -> None:
        try:
            await self._require_client().create_topic(
                stream=stream,
                name=topic,
                partitions_count=partitions_count,
            )
        except TransportError:
            raise
        except Exception as exc:
            raise classify_create_error(exc) from exc

    # ---------- Messages ---------------------------------------------------

    async def send_messages(
        self, stream: str, topic: str, partition_id: int, payloads: Sequence[bytes]
    ) -> None:
        await self._require_client().send_messages(
            stream=stream,
            topic=topic,
            partitioning=partition_id,
            messages=[SendMessage(p) for p in payloads],
        )

    async def poll_messages(
        self,
        stream: str,
        topic: str,
        partition_id: int,
        consumer_group: str,
        offset: int,
        count: int,
        auto_commit: bool,
    ) -> list[RawMessage]:
        logger.debug("Polling %s/%s p%d for group %s", stream, topic, partition_id, consumer_group)
        polled = await self._require_client().poll_messages(
            stream,
            topic,
            consumer=Consumer.Group(consumer_group),
            polling_strategy=PollingStrategy.Offset(offset),
            count=count,
            auto_commit=auto_commit,
            partition_id=partition_id,
        )
        return [
            RawMessage(id=m.id() or None, offset=int(m.offset()), payload=bytes(m.payload()))
            for m in polled
        ]

    # ---------- System -----------------------------------------------------

    async def get_stats(self) -> dict[str, Any]:
        return stats_to_dict(await self._require_client().get_stats())
