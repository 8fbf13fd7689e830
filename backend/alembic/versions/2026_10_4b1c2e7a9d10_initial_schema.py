"""initial schema - users, plan versions, completions, templates, meal logs

Revision ID: 4b1c2e7a9d10
Revises:
Create Date: 2026-10-19 10:12:41.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b1c2e7a9d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

OPEN_VERSION = sa.text("followed_till IS NULL")


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def _meal_columns():
    return [
        sa.Column('meal_type', sa.String(length=50), nullable=True),
        sa.Column('name', sa.String(length=200), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('protein_g', sa.Float(), nullable=True),
        sa.Column('carbs_g', sa.Float(), nullable=True),
        sa.Column('fat_g', sa.Float(), nullable=True),
        sa.Column('calories_kcal', sa.Float(), nullable=True),
        sa.Column('day_name', sa.String(length=20), nullable=True),
    ]


def _exercise_columns():
    return [
        sa.Column('day_name', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=True),
        sa.Column('category', sa.String(length=20), nullable=False),
        sa.Column('sets', sa.Integer(), nullable=True),
        sa.Column('reps', sa.String(length=50), nullable=True),
        sa.Column('duration', sa.String(length=50), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
    ]


def _create_plan_tables(kind: str, item_table: str, item_fk: str, item_columns) -> None:
    versions = f'{kind}_plan_versions'
    completions = f'{kind}_completions'
    version_fk = f'{kind}_plan_version_id'

    op.create_table(
        versions,
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('followed_from', sa.Date(), nullable=False),
        sa.Column('followed_till', sa.Date(), nullable=True),
        *_timestamps(),
        sa.Column('client_id', sa.Integer(), nullable=False),
        sa.Column('created_by_trainer_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['client_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by_trainer_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f(f'ix_{versions}_id'), versions, ['id'], unique=False)
    op.create_index(op.f(f'ix_{versions}_client_id'), versions, ['client_id'], unique=False)
    op.create_index(
        f'uq_{versions}_open_per_client', versions, ['client_id'], unique=True,
        postgresql_where=OPEN_VERSION, sqlite_where=OPEN_VERSION,
    )

    op.create_table(
        item_table,
        *item_columns(),
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column(version_fk, sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint([version_fk], [f'{versions}.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(version_fk, 'order_index'),
    )
    op.create_index(op.f(f'ix_{item_table}_id'), item_table, ['id'], unique=False)
    op.create_index(op.f(f'ix_{item_table}_{version_fk}'), item_table, [version_fk], unique=False)

    op.create_table(
        completions,
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('evidence_url', sa.String(length=255), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column(item_fk, sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint([item_fk], [f'{item_table}.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', item_fk, 'date', name=f'uq_{completions}_key'),
    )
    op.create_index(op.f(f'ix_{completions}_id'), completions, ['id'], unique=False)
    op.create_index(op.f(f'ix_{completions}_user_id'), completions, ['user_id'], unique=False)
    op.create_index(op.f(f'ix_{completions}_{item_fk}'), completions, [item_fk], unique=False)


def _create_template_tables(kind: str, item_table: str, item_columns) -> None:
    templates = f'{kind}_templates'
    template_fk = f'{kind}_template_id'

    op.create_table(
        templates,
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.Column('trainer_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['trainer_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f(f'ix_{templates}_id'), templates, ['id'], unique=False)
    op.create_index(op.f(f'ix_{templates}_trainer_id'), templates, ['trainer_id'], unique=False)

    op.create_table(
        item_table,
        *item_columns(),
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column(template_fk, sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint([template_fk], [f'{templates}.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f(f'ix_{item_table}_id'), item_table, ['id'], unique=False)
    op.create_index(op.f(f'ix_{item_table}_{template_fk}'), item_table, [template_fk], unique=False)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=False),
        sa.Column('password', sa.String(length=200), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('trainer_id', sa.Integer(), nullable=True),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('dob', sa.Date(), nullable=True),
        sa.Column('gender', sa.String(length=10), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('goal', sa.String(length=200), nullable=True),
        sa.Column('profile_image_url', sa.String(length=255), nullable=True),
        sa.Column('total_sessions', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('completed_sessions', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('validity_expires_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['trainer_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_trainer_id'), 'users', ['trainer_id'], unique=False)

    _create_plan_tables('diet', 'diet_plan_meals', 'diet_plan_meal_id', _meal_columns)
    _create_plan_tables('workout', 'workout_plan_exercises', 'workout_plan_exercise_id', _exercise_columns)
    _create_template_tables('diet', 'diet_template_meals', _meal_columns)
    _create_template_tables('workout', 'workout_template_exercises', _exercise_columns)

    op.create_table(
        'meal_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=True),
        sa.Column('time', sa.String(length=20), nullable=True),
        sa.Column('meal_type', sa.String(length=50), nullable=False),
        sa.Column('foods_detected', sa.JSON(), nullable=True),
        sa.Column('calories_est', sa.Float(), nullable=False),
        sa.Column('protein', sa.Float(), nullable=True),
        sa.Column('carbs', sa.Float(), nullable=True),
        sa.Column('fat', sa.Float(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_meal_logs_id'), 'meal_logs', ['id'], unique=False)
    op.create_index(op.f('ix_meal_logs_user_id'), 'meal_logs', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_table('meal_logs')
    for table in (
        'workout_template_exercises', 'workout_templates',
        'diet_template_meals', 'diet_templates',
        'workout_completions', 'workout_plan_exercises', 'workout_plan_versions',
        'diet_completions', 'diet_plan_meals', 'diet_plan_versions',
    ):
        op.drop_table(table)
    op.drop_table('users')
