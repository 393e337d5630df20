"""Project API routes.

Learn: every route here needs a gateway token. Routes that name a
project in the path additionally depend on require_project_owner, which
runs AuthGuard → ProjectGuard before the handler body executes.

- GET /project/list/all → caller's projects
- POST /project → create (name must be unique)
- GET /project/:id → one project
- PATCH /project/update/:id → rename
- DELETE /project/:id → delete project + its messages
"""

from fastapi import APIRouter, Depends

from sealnote.api.deps import get_project_service
from sealnote.auth.dependencies import ProjectAccess, require_identity, require_project_owner
from sealnote.auth.guards import Identity
from sealnote.schemas.message import Ack
from sealnote.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate
from sealnote.services.project_service import ProjectService

router = APIRouter(prefix="/project")


@router.get("/list/all", response_model=list[ProjectRead])
async def list_projects(
    identity: Identity = Depends(require_identity),
    svc: ProjectService = Depends(get_project_service),
):
    return await svc.list_projects(identity.uuid)


@router.post("", response_model=ProjectRead, status_code=201)
async def create_project(
    body: ProjectCreate,
    identity: Identity = Depends(require_identity),
    svc: ProjectService = Depends(get_project_service),
):
    """Create a project owned by the caller. 409 on duplicate name."""
    return await svc.create_project(name=body.name, owner_id=identity.uuid)


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(
    access: ProjectAccess = Depends(require_project_owner),
    svc: ProjectService = Depends(get_project_service),
):
    return await svc.get_project(access.project_id)


@router.patch("/update/{project_id}", response_model=ProjectRead)
async def rename_project(
    body: ProjectUpdate,
    access: ProjectAccess = Depends(require_project_owner),
    svc: ProjectService = Depends(get_project_service),
):
    return await svc.rename_project(access.project_id, body.name)


@router.delete("/{project_id}", response_model=Ack)
async def delete_project(
    access: ProjectAccess = Depends(require_project_owner),
    svc: ProjectService = Depends(get_project_service),
):
    """Delete the project after deleting all of its messages."""
    await svc.delete_project(access.project_id)
    return {"message": "Project deleted successfully"}
