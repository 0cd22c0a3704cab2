"""core schema: users, equipment, plans, workouts, workout logs

Revision ID: 001
Revises: 
Create Date: 2025-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('username', sa.Text(), nullable=False, unique=True),
        sa.Column('password', sa.Text(), nullable=False),
    )

    op.create_table(
        'equipment',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('type', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('weight', sa.Integer(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_equipment_user_id', 'equipment', ['user_id'])

    op.create_table(
        'workout_plans',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('goals', JSONType, nullable=True),
        sa.Column('restrictions', JSONType, nullable=True),
        sa.Column('weekly_minutes', sa.Integer(), nullable=False),
        sa.Column('daily_minutes', sa.Integer(), nullable=False),
        sa.Column('nutritional_guidance', sa.Text(), nullable=True),
        sa.Column('ai_metadata', JSONType, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_workout_plans_user_id', 'workout_plans', ['user_id'])

    op.create_table(
        'workouts',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('plan_id', sa.String(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('exercises', JSONType, nullable=True),
        sa.Column('estimated_duration', sa.Integer(), nullable=True),
        sa.Column('day_of_week', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['plan_id'], ['workout_plans.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_workouts_plan_id', 'workouts', ['plan_id'])

    op.create_table(
        'workout_logs',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('workout_id', sa.String(), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('exercises', JSONType, nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['workout_id'], ['workouts.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_workout_logs_user_id_completed_at', 'workout_logs', ['user_id', 'completed_at'])


def downgrade() -> None:
    op.drop_index('ix_workout_logs_user_id_completed_at', table_name='workout_logs')
    op.drop_table('workout_logs')
    op.drop_index('ix_workouts_plan_id', table_name='workouts')
    op.drop_table('workouts')
    op.drop_index('ix_workout_plans_user_id', table_name='workout_plans')
    op.drop_table('workout_plans')
    op.drop_index('ix_equipment_user_id', table_name='equipment')
    op.drop_table('equipment')
    op.drop_table('users')
