"""Broker transport port: the async surface the client core talks to."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence


class TransportError(Exception):
    """Base class for errors raised by a broker transport."""


class TopologyNotFound(TransportError):
    """The looked-up stream or topic does not exist."""


class TopologyAlreadyExists(TransportError):
    """A create was rejected because the stream or topic already exists."""


@dataclass(frozen=True)
class RawMessage:
    """A message as returned by the broker, before envelope decoding."""

    id: int | None
    offset: int
    payload: bytes


class BrokerTransport(Protocol):
    """Operations the core needs from a stream/topic broker.

    Implementations raise `TopologyNotFound` from the lookups and
    `TopologyAlreadyExists` from the creates; anything else is a failure.
    """

    async def connect(self, username: str, password: str) -> None: ...

    async def disconnect(self) -> None: ...

    async def get_stream(self, stream: str) -> Any: ...

    async def create_stream(self, stream: str) -> None: ...

    async def get_topic(self, stream: str, topic: str) -> Any: ...

    async def create_topic(self, stream: str, topic: str, partitions_count: int) -> None: ...

    async def send_messages(
        self, stream: str, topic: str, partition_id: int, payloads: Sequence[bytes]
    ) -> None: ...

    async def poll_messages(
        self,
        stream: str,
        topic: str,
        partition_id: int,
        consumer_group: str,
        offset: int,
        count: int,
        auto_commit: bool,
    ) -> list[RawMessage]: ...

    async def get_stats(self) -> dict[str, Any]: ...
