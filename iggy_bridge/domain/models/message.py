"""Message DTOs: the wire envelope and the client-visible message."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


class Envelope(BaseModel):
    """Payload wrapper carried inside the broker's opaque message body.

    Attributes
    ----------
    text : str
        Message text as supplied by the producer.
    timestamp : int
        Producer send time in epoch milliseconds. Unrelated to the broker's
        own offset/time metadata.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    text: StrictStr
    timestamp: StrictInt


class Message(BaseModel):
    """Immutable snapshot of a produced or polled message.

    `offset` is only known for messages read back from the broker.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., examples=["msg-1718000000000-k3j9x2a"])
    payload: str
    timestamp: int = Field(..., description="Epoch milliseconds")
    offset: int | None = Field(default=None, ge=0)
