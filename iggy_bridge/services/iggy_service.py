from __future__ import annotations

from typing import Any, Dict, List

from iggy_bridge.core.config import Settings
from iggy_bridge.domain.models.message import Message
from iggy_bridge.domain.models.topology import Topology
from iggy_bridge.domain.services.connection import ConnectionManager
from iggy_bridge.domain.services.consumer import Consumer
from iggy_bridge.domain.services.producer import Producer
from iggy_bridge.domain.services.provisioner import TopologyProvisioner
from iggy_bridge.domain.services.stats import StatsReporter
from iggy_bridge.infra.iggy.transport import BrokerTransport


class IggyService:
    """
    Client facade over one Iggy connection.
    Connects lazily and re-checks the topology before every produce/poll,
    so callers never have to sequence setup themselves.

    Construct once at startup and pass it to whoever needs it; there is no
    module-level instance.
    """

    def __init__(self, settings: Settings, transport: BrokerTransport) -> None:
        self._topology = settings.topology()
        self._connection = ConnectionManager(transport, settings.iggy_username, settings.iggy_password)
        self._provisioner = TopologyProvisioner(transport)
        self._producer = Producer(transport, self._topology)
        self._consumer = Consumer(transport, self._topology, settings.consumer_group)
        self._stats = StatsReporter(transport)

    @property
    def connected(self) -> bool:
        return self._connection.connected

    @property
    def topology(self) -> Topology:
        return self._topology

    # ---------- lifecycle ----------
    async def connect(self) -> None:
        await self._connection.connect()

    async def disconnect(self) -> None:
        await self._connection.disconnect()

    async def __aenter__(self) -> "IggyService":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.disconnect()

    # ---------- topology ----------
    async def ensure_topology(self) -> None:
        await self.connect()
        await self._provisioner.ensure_topology(
            self._topology.stream, self._topology.topic, self._topology.partition_count
        )

    # ---------- messages ----------
    async def send(self, text: str) -> Message:
        await self.ensure_topology()
        return await self._producer.send(text)

    async def poll(self, max_count: int = 10) -> List[Message]:
        await self.ensure_topology()
        return await self._consumer.poll(max_count)

    # ---------- system ----------
    async def get_stats(self) -> Dict[str, Any]:
        await self.connect()
        return await self._stats.get_stats()
