from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from iggy_bridge.api.dependencies import get_iggy, get_app_settings
from iggy_bridge.core.config import Settings
from iggy_bridge.models.messages import (
    PollMessagesResponse,
    SendMessageRequest,
    SendMessageResponse,
)
from iggy_bridge.services.iggy_service import IggyService

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post("", response_model=SendMessageResponse)
async def send_message(
    body: SendMessageRequest,
    iggy: IggyService = Depends(get_iggy),
):
    """Produce one message; blank text is rejected before reaching the client."""
    sent = await iggy.send(body.message)
    return SendMessageResponse(message=sent)


@router.get("", response_model=PollMessagesResponse)
async def poll_messages(
    count: int | None = Query(None, ge=0, description="Max messages to return"),
    iggy: IggyService = Depends(get_iggy),
    settings: Settings = Depends(get_app_settings),
):
    n = settings.poll_default_count if count is None else count
    if n > settings.poll_max_count:
        raise ValueError(f"count must be <= {settings.poll_max_count}")
    messages = await iggy.poll(n)
    return PollMessagesResponse(messages=messages, count=len(messages))
