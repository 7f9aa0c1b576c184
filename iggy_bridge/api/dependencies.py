"""Global reusable FastAPI dependencies."""
from fastapi import Request

from iggy_bridge.core.config import Settings
from iggy_bridge.services.iggy_service import IggyService


def get_iggy(request: Request) -> IggyService:
    """Return the client created by the application lifespan."""
    return request.app.state.iggy


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
