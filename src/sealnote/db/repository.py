"""Repositories — the only code that talks to the ORM session.

Learn: storage-engine signals (IntegrityError, "0 rows affected", a
missing primary key) are translated here into the domain's NotFound and
Conflict errors. Services never import sqlalchemy.exc.

Repositories flush; services decide when to commit.
"""

import uuid
from typing import Any, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sealnote.db.models import Message, Project, utcnow
from sealnote.errors import Conflict, NotFound


class ProjectRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, name: str, owner_id: uuid.UUID) -> Project:
        project = Project(name=name, owner_id=owner_id)
        self.db.add(project)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict(f'Project with name "{name}" already exists.')
        return project

    async def get(self, project_id: uuid.UUID) -> Project:
        project = await self.db.get(Project, project_id)
        if project is None:
            raise NotFound(f"Project with ID {project_id} not found.")
        return project

    async def list_by_owner(self, owner_id: uuid.UUID) -> list[Project]:
        result = await self.db.execute(
            select(Project)
            .where(Project.owner_id == owner_id)
            .order_by(Project.created_at)
        )
        return list(result.scalars().all())

    async def is_owned_by(self, project_id: uuid.UUID, owner_id: uuid.UUID) -> bool:
        """Single query: exists AND owned. Never cached."""
        result = await self.db.execute(
            select(Project.id).where(
                Project.id == project_id, Project.owner_id == owner_id
            )
        )
        return result.scalar_one_or_none() is not None

    async def rename(self, project_id: uuid.UUID, name: str) -> Project:
        project = await self.get(project_id)
        project.name = name
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict(f'Project with name "{name}" already exists.')
        return project

    async def delete(self, project_id: uuid.UUID) -> None:
        result = await self.db.execute(
            delete(Project).where(Project.id == project_id)
        )
        if result.rowcount == 0:
            raise NotFound(f"Project with ID {project_id} not found.")


class MessageRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        project_id: uuid.UUID,
        message_id: Optional[str] = None,
        **fields: Any,
    ) -> Message:
        message = Message(project_id=project_id, **fields)
        if message_id:
            if await self.db.get(Message, message_id) is not None:
                raise Conflict(f"Message with ID {message_id} already exists.")
            message.id = message_id
        self.db.add(message)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict(f"Message with ID {message_id} already exists.")
        return message

    async def get(self, message_id: str) -> Message:
        message = await self.db.get(Message, message_id)
        if message is None:
            raise NotFound(f"Message with ID {message_id} not found")
        return message

    async def list_by_project(self, project_id: uuid.UUID) -> list[Message]:
        result = await self.db.execute(
            select(Message)
            .where(Message.project_id == project_id)
            .order_by(Message.created_at.asc())
        )
        return list(result.scalars().all())

    async def ids_by_project(self, project_id: uuid.UUID) -> list[str]:
        result = await self.db.execute(
            select(Message.id).where(Message.project_id == project_id)
        )
        return list(result.scalars().all())

    async def apply(self, message: Message, changes: dict[str, Any]) -> Message:
        """Write only the columns present in `changes`."""
        for column, value in changes.items():
            setattr(message, column, value)
        await self.db.flush()
        return message

    async def swap_password(
        self,
        message_id: str,
        expected_hash: str,
        new_hash: str,
        hint: Optional[str] = None,
    ) -> bool:
        """Compare-and-swap the password hash.

        Only succeeds if the stored hash is still `expected_hash`, so two
        concurrent rotations can't both win. Returns False otherwise.
        """
        values: dict[str, Any] = {"password_hash": new_hash, "updated_at": utcnow()}
        if hint is not None:
            values["hint"] = hint
        result = await self.db.execute(
            update(Message)
            .where(Message.id == message_id, Message.password_hash == expected_hash)
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1

    async def delete(self, message_id: str) -> None:
        result = await self.db.execute(delete(Message).where(Message.id == message_id))
        if result.rowcount == 0:
            raise NotFound(f"Message with ID {message_id} not found")

    async def delete_by_project(self, project_id: uuid.UUID) -> int:
        """Idempotent — zero matches is fine."""
        result = await self.db.execute(
            delete(Message).where(Message.project_id == project_id)
        )
        return result.rowcount
