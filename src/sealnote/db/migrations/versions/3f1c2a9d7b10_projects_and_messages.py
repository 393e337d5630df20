"""projects and messages

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 09:12:41.503118
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'projects',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_index('ix_projects_owner_id', 'projects', ['owner_id'])

    # No ON DELETE CASCADE: ProjectService deletes messages first
    op.create_table(
        'messages',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('content', sa.JSON(), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('hint', sa.Text(), nullable=True),
        sa.Column('from', sa.String(length=255), nullable=True),
        sa.Column('to', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_messages_project_created', 'messages', ['project_id', 'created_at']
    )


def downgrade() -> None:
    op.drop_index('ix_messages_project_created', table_name='messages')
    op.drop_table('messages')
    op.drop_index('ix_projects_owner_id', table_name='projects')
    op.drop_table('projects')
