"""
Shared fixtures: an in-memory broker implementing the transport port.

The fake yields to the event loop between every await so concurrent callers
interleave the way they would over a real socket.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Sequence

import pytest

from iggy_bridge.core.config import Settings
from iggy_bridge.infra.iggy.transport import (
    RawMessage,
    TopologyAlreadyExists,
    TopologyNotFound,
    TransportError,
)
from iggy_bridge.services.iggy_service import IggyService


class FakeBroker:
    """Single-process stand-in for an Iggy server."""

    def __init__(self) -> None:
        self.streams: Dict[str, Dict[str, int]] = {}  # stream -> {topic: partitions}
        self.partitions: Dict[tuple, List[RawMessage]] = {}
        self.cursors: Dict[tuple, int] = {}
        self.connected = False
        self.calls: Dict[str, int] = {}
        self.stats: Dict[str, Any] = {"process_id": 4242, "messages_size_bytes": 0, "streams_count": 0}
        self._next_id = 1

    def _count(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1

    def _require_connection(self) -> None:
        if not self.connected:
            raise TransportError("not connected")

    # ---------- connection ----------
    async def connect(self, username: str, password: str) -> None:
        self._count("connect")
        await asyncio.sleep(0)
        if (username, password) != ("iggy", "iggy"):
            raise RuntimeError("Invalid credentials")
        self.connected = True

    async def disconnect(self) -> None:
        self._count("disconnect")
        self.connected = False

    # ---------- topology ----------
    async def get_stream(self, stream: str) -> Any:
        self._count("get_stream")
        self._require_connection()
        await asyncio.sleep(0)
        if stream not in self.streams:
            raise TopologyNotFound(stream)
        return {"name": stream}

    async def create_stream(self, stream: str) -> None:
        self._count("create_stream")
        await asyncio.sleep(0)
        if stream in self.streams:
            raise TopologyAlreadyExists(stream)
        self.streams[stream] = {}

    async def get_topic(self, stream: str, topic: str) -> Any:
        self._count("get_topic")
        await asyncio.sleep(0)
        if topic not in self.streams.get(stream, {}):
            raise TopologyNotFound(topic)
        return {"name": topic, "partitions_count": self.streams[stream][topic]}

    async def create_topic(self, stream: str, topic: str, partitions_count: int) -> None:
        self._count("create_topic")
        await asyncio.sleep(0)
        if stream not in self.streams:
            raise TransportError(f"stream {stream} does not exist")
        if topic in self.streams[stream]:
            raise TopologyAlreadyExists(topic)
        self.streams[stream][topic] = partitions_count
        for pid in range(1, partitions_count + 1):
            self.partitions[(stream, topic, pid)] = []

    # ---------- messages ----------
    def append_raw(self, stream: str, topic: str, partition_id: int, payload: bytes) -> RawMessage:
        log = self.partitions[(stream, topic, partition_id)]
        raw = RawMessage(id=self._next_id, offset=len(log), payload=payload)
        self._next_id += 1
        log.append(raw)
        return raw

    async def send_messages(
        self, stream: str, topic: str, partition_id: int, payloads: Sequence[bytes]
    ) -> None:
        self._count("send_messages")
        await asyncio.sleep(0)
        for p in payloads:
            self.append_raw(stream, topic, partition_id, p)

    async def poll_messages(
        self,
        stream: str,
        topic: str,
        partition_id: int,
        consumer_group: str,
        offset: int,
        count: int,
        auto_commit: bool,
    ) -> List[RawMessage]:
        self._count("poll_messages")
        await asyncio.sleep(0)
        key = (stream, topic, partition_id, consumer_group)
        # Committed cursor wins over the requested start offset
        start = self.cursors.get(key, offset)
        batch = self.partitions[(stream, topic, partition_id)][start:start + count]
        if auto_commit and batch:
            self.cursors[key] = batch[-1].offset + 1
        return list(batch)

    async def get_stats(self) -> Dict[str, Any]:
        self._count("get_stats")
        await asyncio.sleep(0)
        return dict(self.stats, streams_count=len(self.streams))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        iggy_username="iggy",
        iggy_password="iggy",
        stream_name="test-stream",
        topic_name="test-topic",
        partition_count=1,
        consumer_group="test-group",
    )


@pytest.fixture
def broker() -> FakeBroker:
    return FakeBroker()


@pytest.fixture
def service(settings: Settings, broker: FakeBroker) -> IggyService:
    return IggyService(settings, broker)
