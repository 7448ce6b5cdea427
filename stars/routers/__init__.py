"""
API routers for endpoint organization.
"""
from .health import router as health_router
from .auth import router as auth_router
from .organizations import router as organizations_router
from .positions import router as positions_router
from .candidates import router as candidates_router
from .pipeline import router as pipeline_router
from .activity import router as activity_router
from .notifications import router as notifications_router
from .emails import router as emails_router
from .manatal import router as manatal_router

__all__ = [
    "health_router",
    "auth_router",
    "organizations_router",
    "positions_router",
    "candidates_router",
    "pipeline_router",
    "activity_router",
    "notifications_router",
    "emails_router",
    "manatal_router",
]
