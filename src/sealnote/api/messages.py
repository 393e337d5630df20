"""Public message API — anyone holding a message id.

Learn: no gateway token here. The message password (when one is set) is
the only gate, enforced inside MessageService:
- GET /message/:id → summary (never content)
- POST /message/:id → content, body {password?}
- PATCH /message/:id/password → rotate, proving the current password
- POST /message/:id/image → upload image (multipart: file, password?)
- GET /message/:id/image → download image (header x-message-password)
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Header, UploadFile
from fastapi.responses import StreamingResponse

from sealnote.api.deps import get_message_service
from sealnote.schemas.message import (
    Ack,
    MessageDetail,
    MessageSummary,
    MessageUnlock,
    PasswordUpdate,
    UploadAck,
)
from sealnote.services.message_service import MessageService

router = APIRouter(prefix="/message")


@router.get("/{message_id}", response_model=MessageSummary)
async def get_message_summary(
    message_id: str,
    svc: MessageService = Depends(get_message_service),
):
    return await svc.get_summary(message_id)


@router.post("/{message_id}", response_model=MessageDetail)
async def read_message(
    message_id: str,
    body: MessageUnlock,
    svc: MessageService = Depends(get_message_service),
):
    """Return the full message, content included, if the password checks out."""
    return await svc.read_message(message_id, body.password)


@router.patch("/{message_id}/password", response_model=Ack)
async def update_message_password(
    message_id: str,
    body: PasswordUpdate,
    svc: MessageService = Depends(get_message_service),
):
    await svc.update_password(
        message_id,
        current_password=body.current_password,
        new_password=body.new_password,
        new_hint=body.new_hint,
    )
    return {"message": "Password updated successfully"}


@router.post("/{message_id}/image", response_model=UploadAck)
async def upload_message_image(
    message_id: str,
    file: UploadFile = File(...),
    password: Optional[str] = Form(None),
    svc: MessageService = Depends(get_message_service),
):
    """Attach (or replace) the message's image."""
    # One byte past the limit is enough to know it's too big
    limit = svc.max_upload_size
    data = await file.read(limit + 1 if limit is not None else -1)
    await svc.store_attachment(
        message_id,
        data=data,
        content_type=file.content_type,
        password=password or None,
    )
    return {"message": "Image uploaded successfully", "file_name": file.filename}


@router.get("/{message_id}/image")
async def download_message_image(
    message_id: str,
    password: Optional[str] = Header(None, alias="x-message-password"),
    svc: MessageService = Depends(get_message_service),
):
    chunks = await svc.open_attachment(message_id, password or None)
    return StreamingResponse(
        chunks,
        media_type="application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{message_id}"'},
    )
