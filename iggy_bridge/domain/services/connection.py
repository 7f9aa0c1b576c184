"""Connection lifecycle for the single broker transport."""
from __future__ import annotations

import logging

from iggy_bridge.core.exceptions import BrokerConnectionError
from iggy_bridge.infra.iggy.transport import BrokerTransport

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Owns the connected/disconnected flag; nothing else may change it.

    Both transitions are idempotent. No retries: a failed connect leaves the
    manager disconnected and the caller decides whether to try again.
    """

    def __init__(self, transport: BrokerTransport, username: str, password: str) -> None:
        self._transport = transport
        self._username = username
        self._password = password
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        if self._connected:
            return
        try:
            await self._transport.connect(self._username, self._password)
        except Exception as exc:
            logger.error("Failed to connect to Iggy: %s", exc)
            raise BrokerConnectionError(f"could not connect to broker: {exc}") from exc
        self._connected = True
        logger.info("Connected to Iggy server")

    async def disconnect(self) -> None:
        if not self._connected:
            return
        try:
            await self._transport.disconnect()
            logger.info("Disconnected from Iggy server")
        except Exception as exc:
            # Teardown must not block shutdown
            logger.warning("Failed to disconnect from Iggy: %s", exc)
        finally:
            self._connected = False
