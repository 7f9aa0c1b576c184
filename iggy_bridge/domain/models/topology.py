"""Topology value object: the stream/topic pair every operation targets."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Topology(BaseModel):
    """Immutable description of the stream, topic and partition layout."""

    model_config = ConfigDict(frozen=True)

    stream: str = Field(..., min_length=1, examples=["demo-stream"])
    topic: str = Field(..., min_length=1, examples=["demo-topic"])
    partition_count: int = Field(1, ge=1)
    # Iggy partition ids are 1-based
    partition_id: int = Field(1, ge=1)

    @model_validator(mode="after")
    def _partition_in_range(self) -> "Topology":
        if self.partition_id > self.partition_count:
            raise ValueError(
                f"partition_id {self.partition_id} exceeds partition_count {self.partition_count}"
            )
        return self
