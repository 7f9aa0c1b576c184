"""Broker-wide statistics, passed through untouched."""
from __future__ import annotations

import logging
from typing import Any, Dict

from iggy_bridge.core.exceptions import StatsError
from iggy_bridge.infra.iggy.transport import BrokerTransport

logger = logging.getLogger(__name__)


class StatsReporter:
    def __init__(self, transport: BrokerTransport) -> None:
        self._transport = transport

    async def get_stats(self) -> Dict[str, Any]:
        try:
            return await self._transport.get_stats()
        except Exception as exc:
            logger.error("Failed to get stats: %s", exc)
            raise StatsError(f"fetching stats failed: {exc}") from exc
