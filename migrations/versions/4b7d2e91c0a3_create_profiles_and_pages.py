"""create_profiles_and_pages

Revision ID: 4b7d2e91c0a3
Revises:
Create Date: 2026-10-18 10:12:44.318207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b7d2e91c0a3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles and pages tables."""
    op.create_table('profiles',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), server_default='', nullable=False),
        sa.Column('title', sa.String(length=255), server_default='', nullable=False),
        sa.Column('bio', sa.Text(), server_default='', nullable=False),
        sa.Column('email', sa.String(length=255), server_default='', nullable=False),
        sa.Column('twitter', sa.String(length=255), server_default='', nullable=False),
        sa.Column('linkedin', sa.String(length=500), server_default='', nullable=False),
        sa.Column('github', sa.String(length=500), server_default='', nullable=False),
        sa.Column('avatar', sa.String(length=1000), server_default='', nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    # One page per user, addressed by a unique normalized path
    op.create_table('pages',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('path', sa.String(length=100), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("path ~ '^[a-z0-9_-]+$'", name='ck_pages_path_normalized'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', name='uq_pages_user_id'),
    )
    op.create_index('ix_pages_path', 'pages', ['path'], unique=True)


def downgrade() -> None:
    """Drop pages and profiles tables."""
    op.drop_index('ix_pages_path', table_name='pages')
    op.drop_table('pages')
    op.drop_table('profiles')
