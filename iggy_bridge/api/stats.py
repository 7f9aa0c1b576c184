from fastapi import APIRouter, Depends

from iggy_bridge.api.dependencies import get_iggy
from iggy_bridge.models.messages import StatsResponse
from iggy_bridge.services.iggy_service import IggyService

router = APIRouter(tags=["stats"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(iggy: IggyService = Depends(get_iggy)):
    return StatsResponse(stats=await iggy.get_stats())
