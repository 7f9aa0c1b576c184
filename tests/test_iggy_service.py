"""End-to-end tests of the IggyService facade over the in-memory broker."""
import asyncio
from unittest.mock import AsyncMock

import pytest

from iggy_bridge.core.exceptions import BrokerConnectionError, ProvisioningError
from iggy_bridge.services.iggy_service import IggyService


async def test_send_connects_and_provisions_lazily(service, broker):
    assert service.connected is False

    await service.send("hello")

    assert service.connected is True
    assert broker.streams == {"test-stream": {"test-topic": 1}}


async def test_round_trip(service):
    await service.send("hello")

    polled = await service.poll()

    assert [m.payload for m in polled] == ["hello"]
    assert polled[0].offset >= 0


async def test_poll_zero_returns_empty(service):
    assert await service.poll(0) == []


async def test_concurrent_sends_from_fresh_broker(service, broker):
    sent = await asyncio.gather(*(service.send(f"m{i}") for i in range(5)))

    assert broker.streams == {"test-stream": {"test-topic": 1}}
    assert len(broker.partitions[("test-stream", "test-topic", 1)]) == 5
    assert len({m.id for m in sent}) == 5


async def test_two_clients_share_one_topology(settings, broker):
    a = IggyService(settings, broker)
    b = IggyService(settings, broker)

    await asyncio.gather(a.ensure_topology(), b.ensure_topology())

    assert broker.streams == {"test-stream": {"test-topic": 1}}


async def test_stats_connects_without_provisioning(service, broker):
    stats = await service.get_stats()

    assert stats["process_id"] == 4242
    assert broker.streams == {}


async def test_connection_failure_surfaces_before_any_traffic(settings, broker):
    broker.connect = AsyncMock(side_effect=RuntimeError("Connection refused"))
    svc = IggyService(settings, broker)

    with pytest.raises(BrokerConnectionError):
        await svc.send("hello")

    assert "send_messages" not in broker.calls
    await svc.disconnect()  # safe after a failed connect


async def test_provisioning_failure_blocks_send(service, broker):
    broker.create_topic = AsyncMock(side_effect=RuntimeError("invalid partitions count"))

    with pytest.raises(ProvisioningError):
        await service.send("hello")

    assert "send_messages" not in broker.calls


async def test_context_manager_connects_and_disconnects(settings, broker):
    async with IggyService(settings, broker) as svc:
        assert svc.connected is True

    assert svc.connected is False
    assert broker.calls["disconnect"] == 1


def test_topology_comes_from_settings(service):
    assert service.topology.stream == "test-stream"
    assert service.topology.topic == "test-topic"
    assert service.topology.partition_id == 1
