"""Message admin API — project owners manage their messages.

Learn: all routes run AuthGuard → ProjectGuard. Once ownership is
established the owner may overwrite anything, including the password,
without knowing the old one. Message ids are also checked against the
project in the path, so an owner can't reach into someone else's project
by guessing message ids.
"""

from fastapi import APIRouter, Depends

from sealnote.api.deps import get_message_service
from sealnote.auth.dependencies import ProjectAccess, require_project_owner
from sealnote.schemas.message import (
    Ack,
    AdminMessageSummary,
    MessageCreate,
    MessageUpdate,
)
from sealnote.services.message_service import MessageService

router = APIRouter(prefix="/admin/message")


@router.get("/list/{project_id}", response_model=list[AdminMessageSummary])
async def list_messages(
    access: ProjectAccess = Depends(require_project_owner),
    svc: MessageService = Depends(get_message_service),
):
    """Message summaries for a project, oldest first. No content."""
    return await svc.list_messages(access.project_id)


@router.post("/{project_id}", response_model=AdminMessageSummary, status_code=201)
async def create_message(
    body: MessageCreate,
    access: ProjectAccess = Depends(require_project_owner),
    svc: MessageService = Depends(get_message_service),
):
    return await svc.create_message(
        project_id=access.project_id,
        message_id=body.message_id,
        content=body.content,
        initial_password=body.initial_password,
        hint=body.hint,
        sender=body.sender,
        recipient=body.recipient,
    )


@router.patch("/{project_id}/{message_id}", response_model=Ack)
async def update_message(
    message_id: str,
    body: MessageUpdate,
    access: ProjectAccess = Depends(require_project_owner),
    svc: MessageService = Depends(get_message_service),
):
    """Partial update — omitted fields keep their stored values."""
    await svc.update_message(message_id, access.project_id, **body.changes())
    return {"message": "Message updated successfully"}


@router.delete("/{project_id}/{message_id}", response_model=Ack)
async def delete_message(
    message_id: str,
    access: ProjectAccess = Depends(require_project_owner),
    svc: MessageService = Depends(get_message_service),
):
    await svc.delete_message(message_id, access.project_id)
    return {"message": "Message deleted successfully"}


@router.delete("/{project_id}", response_model=Ack)
async def delete_project_messages(
    access: ProjectAccess = Depends(require_project_owner),
    svc: MessageService = Depends(get_message_service),
):
    await svc.delete_messages_by_project(access.project_id)
    return {"message": "Messages deleted successfully"}
