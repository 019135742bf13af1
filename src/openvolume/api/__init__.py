"""Plugin API endpoints."""

from openvolume.api.health import router as health_router
from openvolume.api.plugin import router as plugin_router

__all__ = [
    "health_router",
    "plugin_router",
]
