"""API routes."""

from .entities import entity_routers, build_entity_router
from .folders import router as folders_router
from .selected import router as selected_router, location_router
from .organize import router as organize_router
from .settings import router as settings_router

__all__ = [
    "entity_routers",
    "build_entity_router",
    "folders_router",
    "selected_router",
    "location_router",
    "organize_router",
    "settings_router",
]
