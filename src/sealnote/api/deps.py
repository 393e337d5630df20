"""Service factories shared by the routers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sealnote.auth.password import CredentialVerifier
from sealnote.config import settings
from sealnote.db.engine import get_db
from sealnote.services.message_service import MessageService
from sealnote.services.project_service import ProjectService
from sealnote.storage.blob_store import BlobStore, get_blob_store


def get_credential_verifier() -> CredentialVerifier:
    return CredentialVerifier(rounds=settings.bcrypt_rounds)


def get_message_service(
    db: AsyncSession = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
    credentials: CredentialVerifier = Depends(get_credential_verifier),
) -> MessageService:
    return MessageService(
        db,
        credentials=credentials,
        blobs=blobs,
        max_upload_size=settings.max_upload_size,
        allowed_content_types=settings.allowed_content_types,
    )


def get_project_service(
    db: AsyncSession = Depends(get_db),
    messages: MessageService = Depends(get_message_service),
) -> ProjectService:
    return ProjectService(db, messages=messages)
