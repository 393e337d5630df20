"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers. Each one builds a
RequestContext from the raw request and runs a GuardChain over it:

    require_identity       → AuthGuard
    require_project_owner  → AuthGuard → ProjectGuard

The resolved identity is also stashed on request.state for anything
downstream (logging, dev endpoints).
"""

import uuid
from dataclasses import dataclass

import structlog
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from sealnote.auth.guards import (
    AuthGuard,
    GuardChain,
    Identity,
    ProjectGuard,
    RequestContext,
)
from sealnote.config import settings
from sealnote.db.engine import get_db
from sealnote.db.repository import ProjectRepository


@dataclass(frozen=True)
class ProjectAccess:
    """An authenticated owner and the project they were cleared for."""

    identity: Identity
    project_id: uuid.UUID


def build_auth_guard() -> AuthGuard:
    return AuthGuard(
        header_name=settings.auth_header_name,
        secret=settings.auth_secret,
        algorithm=settings.jwt_algorithm,
    )


def build_auth_chain() -> GuardChain:
    return GuardChain(build_auth_guard())


def request_context(request: Request) -> RequestContext:
    return RequestContext(headers=request.headers, path_params=request.path_params)


async def require_identity(request: Request) -> Identity:
    """Gateway token required — 401 otherwise."""
    ctx = await build_auth_chain().run(request_context(request))
    request.state.identity = ctx.identity
    structlog.contextvars.bind_contextvars(user_id=str(ctx.identity.uuid))
    return ctx.identity


async def require_project_owner(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> ProjectAccess:
    """Gateway token + ownership of {project_id} — 401/400/403 otherwise."""
    chain = build_auth_chain().then(ProjectGuard(ProjectRepository(db).is_owned_by))
    ctx = await chain.run(request_context(request))
    request.state.identity = ctx.identity
    structlog.contextvars.bind_contextvars(user_id=str(ctx.identity.uuid))
    return ProjectAccess(identity=ctx.identity, project_id=ctx.project_id)
