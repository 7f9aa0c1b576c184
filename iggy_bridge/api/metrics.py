import re

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Gauge, generate_latest

from iggy_bridge.api.dependencies import get_iggy
from iggy_bridge.services.iggy_service import IggyService

router = APIRouter()

_INVALID = re.compile(r"[^a-zA-Z0-9_]")


def _metric_name(key: str) -> str:
    return "iggy_" + _INVALID.sub("_", key).lower()


@router.get("/metrics")
async def metrics(iggy: IggyService = Depends(get_iggy)):
    stats = await iggy.get_stats()

    reg = CollectorRegistry()
    seen: set[str] = set()
    for key, value in stats.items():
        # Only top-level numeric counters; nested/text fields are skipped
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        name = _metric_name(key)
        if name in seen:
            # keys that clean up to the same name: first one wins
            continue
        seen.add(name)
        g = Gauge(name, f"Iggy server stat '{key}'", registry=reg)
        g.set(value)

    return Response(generate_latest(reg), media_type=CONTENT_TYPE_LATEST)
