"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: auth is applied per route with Depends(require_identity) or
Depends(require_project_owner). The message router takes no token at
all; its password gate lives in MessageService.
"""

from fastapi import APIRouter

from sealnote.api.admin_messages import router as admin_messages_router
from sealnote.api.dev import router as dev_router
from sealnote.api.health import router as health_router
from sealnote.api.messages import router as messages_router
from sealnote.api.projects import router as projects_router


def build_api_router(include_dev: bool = False) -> APIRouter:
    api_router = APIRouter(prefix="/api/v1")

    # Open routes
    api_router.include_router(health_router, tags=["health"])
    api_router.include_router(messages_router, tags=["messages"])

    # Gateway token (+ project ownership) required
    api_router.include_router(projects_router, tags=["projects"])
    api_router.include_router(admin_messages_router, tags=["admin"])

    if include_dev:
        api_router.include_router(dev_router, tags=["dev"])

    return api_router
