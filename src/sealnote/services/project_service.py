"""Project service — project CRUD with an explicit message cascade.

Learn: the database doesn't cascade for us. delete_project() removes a
project's messages and then the project row in one transaction, and only
after the commit drops the messages' image attachments from disk.
"""

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from sealnote.db.models import Project
from sealnote.db.repository import ProjectRepository
from sealnote.services.message_service import MessageService

logger = structlog.get_logger()


class ProjectService:
    """Business logic for projects. Ownership is checked by ProjectGuard."""

    def __init__(self, db: AsyncSession, messages: MessageService):
        self.db = db
        self.projects = ProjectRepository(db)
        self.messages = messages

    async def create_project(self, name: str, owner_id: uuid.UUID) -> Project:
        project = await self.projects.create(name=name, owner_id=owner_id)
        await self.db.commit()
        logger.info(
            "project.created", project_id=str(project.id), owner_id=str(owner_id)
        )
        return project

    async def get_project(self, project_id: uuid.UUID) -> Project:
        return await self.projects.get(project_id)

    async def list_projects(self, owner_id: uuid.UUID) -> list[Project]:
        return await self.projects.list_by_owner(owner_id)

    async def rename_project(self, project_id: uuid.UUID, name: str) -> Project:
        project = await self.projects.rename(project_id, name)
        await self.db.commit()
        logger.info("project.renamed", project_id=str(project_id))
        return project

    async def delete_project(self, project_id: uuid.UUID) -> None:
        message_ids = await self.messages.delete_messages_by_project(
            project_id, commit=False
        )
        try:
            await self.projects.delete(project_id)
        except Exception:
            await self.db.rollback()
            raise
        await self.db.commit()

        self.messages.discard_attachments(message_ids)
        logger.info(
            "project.deleted",
            project_id=str(project_id),
            messages_deleted=len(message_ids),
        )
