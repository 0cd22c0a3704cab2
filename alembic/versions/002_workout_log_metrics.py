"""add session metrics to workout logs

Revision ID: 002
Revises: 001
Create Date: 2025-01-15 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Perceived exertion, session length, energy and focus tags
    op.add_column('workout_logs', sa.Column('rpe', sa.Integer(), nullable=True))
    op.add_column('workout_logs', sa.Column('duration_minutes', sa.Integer(), nullable=True))
    op.add_column('workout_logs', sa.Column('calories_burned', sa.Integer(), nullable=True))
    op.add_column(
        'workout_logs',
        sa.Column('tags', sa.JSON().with_variant(postgresql.JSONB(), 'postgresql'), nullable=True),
    )
    op.create_index('ix_workout_logs_rpe', 'workout_logs', ['rpe'])
    op.create_index('ix_workout_logs_duration_minutes', 'workout_logs', ['duration_minutes'])


def downgrade() -> None:
    op.drop_index('ix_workout_logs_duration_minutes', table_name='workout_logs')
    op.drop_index('ix_workout_logs_rpe', table_name='workout_logs')
    op.drop_column('workout_logs', 'tags')
    op.drop_column('workout_logs', 'calories_burned')
    op.drop_column('workout_logs', 'duration_minutes')
    op.drop_column('workout_logs', 'rpe')
