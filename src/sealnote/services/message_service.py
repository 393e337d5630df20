"""Message service — who may read or change a message's protected payload.

Learn: the only security-relevant state on a message is whether
password_hash is set. Everything gated on it goes through _unlock():

    no hash            → open to anyone holding the id
    hash, no password  → Unauthenticated ("please provide a password")
    hash, bad password → Unauthenticated ("invalid password")
    hash, good password → open

Admin paths (create/update/delete) skip the password entirely; they are
reached only through AuthGuard + ProjectGuard. The one way a non-owner
can change access is update_password(), which requires the current
password.
"""

import uuid
from typing import Any, Iterator, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from sealnote.auth.password import CredentialVerifier
from sealnote.db.models import Message
from sealnote.db.repository import MessageRepository
from sealnote.errors import (
    NotFound,
    PayloadTooLarge,
    Unauthenticated,
    UnsupportedMediaType,
)
from sealnote.storage.blob_store import MESSAGE_NAMESPACE, BlobStore

logger = structlog.get_logger()

PASSWORD_REQUIRED = "This message is password protected. Please provide a password."
PASSWORD_INVALID = "Invalid password. Please try again."


class _Unset:
    """Marker for "field not supplied" (distinct from an explicit None)."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


class MessageService:
    """Read/update/password-rotation lifecycle of messages."""

    def __init__(
        self,
        db: AsyncSession,
        credentials: CredentialVerifier,
        blobs: Optional[BlobStore] = None,
        max_upload_size: Optional[int] = None,
        allowed_content_types: Optional[list[str]] = None,
    ):
        self.db = db
        self.messages = MessageRepository(db)
        self.credentials = credentials
        self.blobs = blobs
        self.max_upload_size = max_upload_size
        self.allowed_content_types = allowed_content_types

    # ─── Public (secret-gated) ──────────────────────────

    async def get_summary(self, message_id: str) -> Message:
        """Metadata only. Callers must not expose content from this."""
        return await self.messages.get(message_id)

    async def read_message(
        self, message_id: str, password: Optional[str] = None
    ) -> Message:
        message = await self.messages.get(message_id)
        self._unlock(message, password)
        return message

    async def verify_message_password(
        self, message_id: str, password: Optional[str] = None
    ) -> bool:
        """Same gate as read_message, as a boolean. NotFound still raises."""
        message = await self.messages.get(message_id)
        try:
            self._unlock(message, password)
        except Unauthenticated:
            return False
        return True

    async def update_password(
        self,
        message_id: str,
        current_password: str,
        new_password: str,
        new_hint: Optional[str] = None,
    ) -> None:
        """Self-service rotation: prove the current password, set a new one."""
        message = await self.messages.get(message_id)
        if not message.password_hash:
            raise Unauthenticated("This message does not have a password set.")
        if not self.credentials.compare(current_password, message.password_hash):
            logger.info("message.password_rotation_denied", message_id=message_id)
            raise Unauthenticated("Invalid current password.")

        new_hash = self.credentials.hash(new_password)
        swapped = await self.messages.swap_password(
            message_id,
            expected_hash=message.password_hash,
            new_hash=new_hash,
            hint=new_hint,
        )
        if not swapped:
            # Someone rotated (or removed) it between our read and write
            await self.db.rollback()
            logger.warning("message.password_rotation_raced", message_id=message_id)
            raise Unauthenticated("Invalid current password.")

        await self.db.commit()
        logger.info("message.password_rotated", message_id=message_id)

    # ─── Attachments ────────────────────────────────────

    async def store_attachment(
        self,
        message_id: str,
        data: bytes,
        content_type: Optional[str],
        password: Optional[str] = None,
    ) -> None:
        if not await self.verify_message_password(message_id, password):
            raise Unauthenticated(
                "This message is password protected. Please provide a valid password."
            )
        if self.allowed_content_types is not None and (
            content_type not in self.allowed_content_types
        ):
            raise UnsupportedMediaType(f"Invalid file type: {content_type}")
        if self.max_upload_size is not None and len(data) > self.max_upload_size:
            raise PayloadTooLarge(
                f"File exceeds the maximum size of {self.max_upload_size} bytes"
            )
        self._require_blobs().put(MESSAGE_NAMESPACE, message_id, data)

    async def open_attachment(
        self, message_id: str, password: Optional[str] = None
    ) -> Iterator[bytes]:
        if not await self.verify_message_password(message_id, password):
            raise Unauthenticated(
                "This message is password protected. Please provide a valid password."
            )
        return self._require_blobs().get(MESSAGE_NAMESPACE, message_id)

    # ─── Admin ──────────────────────────────────────────

    async def list_messages(self, project_id: uuid.UUID) -> list[Message]:
        return await self.messages.list_by_project(project_id)

    async def create_message(
        self,
        project_id: uuid.UUID,
        message_id: Optional[str] = None,
        content: Any = None,
        initial_password: Optional[str] = None,
        hint: Optional[str] = None,
        sender: Optional[str] = None,
        recipient: Optional[str] = None,
    ) -> Message:
        message = await self.messages.create(
            project_id=project_id,
            message_id=message_id,
            content=content,
            password_hash=(
                self.credentials.hash(initial_password) if initial_password else None
            ),
            hint=hint,
            sender=sender,
            recipient=recipient,
        )
        await self.db.commit()
        logger.info(
            "message.created",
            message_id=message.id,
            project_id=str(project_id),
            protected=message.password_hash is not None,
        )
        return message

    async def update_message(
        self,
        message_id: str,
        project_id: Optional[uuid.UUID] = None,
        *,
        content: Any = UNSET,
        password: Any = UNSET,
        hint: Any = UNSET,
        sender: Any = UNSET,
        recipient: Any = UNSET,
    ) -> None:
        """Admin update with merge-on-absence.

        Fields left as UNSET keep their stored value; anything passed
        (None included) replaces it. A supplied password is re-hashed
        without checking the old one.
        """
        message = await self._get_for_admin(message_id, project_id)

        changes: dict[str, Any] = {}
        for column, value in (
            ("content", content),
            ("hint", hint),
            ("sender", sender),
            ("recipient", recipient),
        ):
            if value is not UNSET:
                changes[column] = value
        if password is not UNSET:
            changes["password_hash"] = self.credentials.hash(password)

        if not changes:
            return
        await self.messages.apply(message, changes)
        await self.db.commit()
        logger.info(
            "message.updated",
            message_id=message_id,
            fields=sorted(c for c in changes if c != "password_hash"),
            password_changed="password_hash" in changes,
        )

    async def delete_message(
        self, message_id: str, project_id: Optional[uuid.UUID] = None
    ) -> None:
        if project_id is not None:
            await self._get_for_admin(message_id, project_id)
        await self.messages.delete(message_id)
        await self.db.commit()
        self.discard_attachments([message_id])
        logger.info("message.deleted", message_id=message_id)

    async def delete_messages_by_project(
        self, project_id: uuid.UUID, commit: bool = True
    ) -> list[str]:
        """Delete every message in a project. Returns the removed ids.

        With commit=False the caller owns the transaction (and should
        discard attachments once it commits).
        """
        message_ids = await self.messages.ids_by_project(project_id)
        await self.messages.delete_by_project(project_id)
        if commit:
            await self.db.commit()
            self.discard_attachments(message_ids)
            logger.info(
                "message.project_purged",
                project_id=str(project_id),
                count=len(message_ids),
            )
        return message_ids

    def discard_attachments(self, message_ids: list[str]) -> None:
        if self.blobs is None:
            return
        for message_id in message_ids:
            # Rows are already gone; a leftover file is unreachable
            try:
                self.blobs.delete(MESSAGE_NAMESPACE, message_id)
            except OSError as e:
                logger.warning(
                    "blob.delete_failed",
                    namespace=MESSAGE_NAMESPACE,
                    key=message_id,
                    error=str(e),
                )

    # ─── Internals ──────────────────────────────────────

    def _unlock(self, message: Message, password: Optional[str]) -> None:
        if not message.password_hash:
            return
        if password is None:
            raise Unauthenticated(PASSWORD_REQUIRED)
        if not self.credentials.compare(password, message.password_hash):
            logger.info("message.password_rejected", message_id=message.id)
            raise Unauthenticated(PASSWORD_INVALID)

    async def _get_for_admin(
        self, message_id: str, project_id: Optional[uuid.UUID]
    ) -> Message:
        message = await self.messages.get(message_id)
        if project_id is not None and message.project_id != project_id:
            # Same answer as a missing row: don't confirm ids across projects
            raise NotFound(f"Message with ID {message_id} not found")
        return message

    def _require_blobs(self) -> BlobStore:
        if self.blobs is None:
            raise RuntimeError("MessageService was built without a blob store")
        return self.blobs
