"""create hiscores table

Revision ID: 5c2d7e9a1b30
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2d7e9a1b30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'hiscores' in set(insp.get_table_names()):
        return
    op.create_table(
        'hiscores',
        sa.Column('entryId', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('username', sa.String(length=64), nullable=True),
        sa.Column('timeTaken', sa.String(length=20), nullable=True),
        sa.PrimaryKeyConstraint('entryId'),
    )


def downgrade():
    op.drop_table('hiscores')
