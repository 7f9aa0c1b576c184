"""Async client facade and HTTP API over an Apache Iggy stream/topic broker."""
from iggy_bridge.services.iggy_service import IggyService

__all__ = ["IggyService"]
