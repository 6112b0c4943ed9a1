"""create game_state table

Revision ID: 5c2d9e7a41b3
Revises:
Create Date: 2026-10-18 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2d9e7a41b3'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'game_state' in set(insp.get_table_names()):
        return
    op.create_table(
        'game_state',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('game_code', sa.String(length=5), nullable=False),
        sa.Column('state', sa.Text(), nullable=False),
        sa.Column('created_at', sa.Float(), nullable=True),
        sa.Column('updated_at', sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('game_state') as batch_op:
        batch_op.create_index(batch_op.f('ix_game_state_game_code'), ['game_code'], unique=True)


def downgrade():
    with op.batch_alter_table('game_state') as batch_op:
        batch_op.drop_index(batch_op.f('ix_game_state_game_code'))
    op.drop_table('game_state')
