from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator

from iggy_bridge.domain.models.message import Message


class SendMessageRequest(BaseModel):
    message: Any = Field(default=None, validate_default=True)

    @field_validator("message")
    @classmethod
    def _require_text(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Message is required")
        return v


class SendMessageResponse(BaseModel):
    success: bool = True
    message: Message


class PollMessagesResponse(BaseModel):
    success: bool = True
    messages: List[Message]
    count: int


class StatsResponse(BaseModel):
    success: bool = True
    stats: Dict[str, Any]
