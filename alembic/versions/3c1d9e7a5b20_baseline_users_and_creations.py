"""baseline_users_and_creations

Revision ID: 3c1d9e7a5b20
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1d9e7a5b20'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, creations and creation_likes."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=True),
        sa.Column('plan', sa.String(), nullable=False, server_default='free'),
        sa.Column('free_usage', sa.Integer(), nullable=True),
        sa.Column('private_metadata', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'creations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('prompt', sa.Text(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('type', sa.String(length=32), nullable=False),
        sa.Column('publish', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index(op.f('ix_creations_id'), 'creations', ['id'], unique=False)
    op.create_index(op.f('ix_creations_user_id'), 'creations', ['user_id'], unique=False)
    op.create_index(op.f('ix_creations_created_at'), 'creations', ['created_at'], unique=False)
    op.create_index('idx_creations_publish_created', 'creations', ['publish', 'created_at'], unique=False)

    op.create_table(
        'creation_likes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('creation_id', sa.Integer(), sa.ForeignKey('creations.id'), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('creation_id', 'user_id', name='uq_creation_like'),
    )
    op.create_index(op.f('ix_creation_likes_creation_id'), 'creation_likes', ['creation_id'], unique=False)


def downgrade() -> None:
    """Drop creation_likes, creations and users."""
    op.drop_index(op.f('ix_creation_likes_creation_id'), table_name='creation_likes')
    op.drop_table('creation_likes')
    op.drop_index('idx_creations_publish_created', table_name='creations')
    op.drop_index(op.f('ix_creations_created_at'), table_name='creations')
    op.drop_index(op.f('ix_creations_user_id'), table_name='creations')
    op.drop_index(op.f('ix_creations_id'), table_name='creations')
    op.drop_table('creations')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
