"""Error taxonomy for the Iggy client core and RFC 7807 *Problem Details*."""
from __future__ import annotations

from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


# --------------------------------------------------------------------------- #
# Core errors                                                                 #
# --------------------------------------------------------------------------- #
class IggyBridgeError(Exception):
    """Root of every error the client core propagates."""


class BrokerConnectionError(IggyBridgeError, ConnectionError):
    """Transport or authentication failure while connecting."""


class ProvisioningError(IggyBridgeError):
    """Stream/topic lookup or creation failed for a reason other than a lost race."""


class SendError(IggyBridgeError):
    """Submitting a message to the broker failed."""


class PollError(IggyBridgeError):
    """Retrieving messages from the broker failed."""


class StatsError(IggyBridgeError):
    """Retrieving broker statistics failed."""


class DecodeFallback(ValueError):
    """A polled payload is not a valid envelope.

    Never propagated out of a poll: the consumer degrades the message to its
    raw text instead.
    """


# --------------------------------------------------------------------------- #
# Problem details (HTTP layer)                                                #
# --------------------------------------------------------------------------- #
class ProblemDetail(BaseModel):
    """Data model that serialises to RFC 7807 JSON.

    Attributes
    ----------
    type : str
        A URI reference that identifies the problem type.
    title : str
        A short human-readable summary of the problem type.
    status : int
        The HTTP status code.
    detail : str | None
        A human-readable explanation specific to this occurrence.
    instance : str
        A URI reference that identifies the specific occurrence.
    """

    model_config = ConfigDict(json_schema_extra={"required": ["type", "title", "status"]})

    type: str = Field(..., examples=["/broker-unavailable"])
    title: str
    status: int = Field(..., ge=400, le=599)
    detail: Optional[str] = None
    instance: str = Field(default_factory=lambda: f"urn:uuid:{uuid4()}")
