"""Initial meal planner schema

Revision ID: 3b9d2c41e7a0
Revises:
Create Date: 2026-10-18 09:12:44.318205

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3b9d2c41e7a0'
down_revision = None
branch_labels = None
depends_on = None

DEFAULT_UNITS = ['g', 'kg', 'Stk', 'TL', 'EL', 'ml', 'l', 'Prise', 'Bund', 'Packung']


def upgrade():
    op.create_table(
        'recipes',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('recipe', sa.Text(), nullable=False),
        sa.Column('image', sa.String(length=500), nullable=True),
    )
    op.create_index('ix_recipes_name', 'recipes', ['name'])

    op.create_table(
        'ingredients',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('recipe_id', sa.String(length=36), sa.ForeignKey('recipes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('unit', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
    )
    op.create_index('ix_ingredients_recipe_id', 'ingredients', ['recipe_id'])
    op.create_index('ix_ingredients_name', 'ingredients', ['name'])

    op.create_table(
        'tags',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('color', sa.String(length=7), nullable=False),
    )
    op.create_index('ix_tags_name', 'tags', ['name'], unique=True)

    op.create_table(
        'recipe_tags',
        sa.Column('recipe_id', sa.String(length=36), sa.ForeignKey('recipes.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('tag_id', sa.Integer(), sa.ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True),
    )

    units = op.create_table(
        'units',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=20), nullable=False, unique=True),
    )
    op.bulk_insert(units, [{'name': name} for name in DEFAULT_UNITS])

    op.create_table(
        'settings',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column('weekly_planning_notification', sa.Boolean(), nullable=False),
        sa.Column('daily_recipe_notification', sa.Boolean(), nullable=False),
        sa.Column('shopping_list_notification', sa.Boolean(), nullable=False),
        sa.Column('dark_mode', sa.Boolean(), nullable=False),
        sa.Column('primary_color', sa.String(length=7), nullable=False),
        sa.Column('weekly_planning_time', sa.String(length=5), nullable=False),
        sa.Column('daily_recipe_time', sa.String(length=5), nullable=False),
        sa.Column('shopping_list_time', sa.String(length=5), nullable=False),
        sa.Column('weekly_planning_day', sa.Integer(), nullable=False),
        sa.Column('shopping_list_day', sa.Integer(), nullable=False),
        sa.CheckConstraint('id = 1', name='settings_singleton'),
    )

    op.create_table(
        'week_plans',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('week_start', sa.Date(), nullable=False),
        sa.Column('week_end', sa.Date(), nullable=False),
    )
    op.create_index('ix_week_plans_week_start', 'week_plans', ['week_start'])

    op.create_table(
        'week_plan_meals',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('week_plan_id', sa.String(length=36), sa.ForeignKey('week_plans.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day', sa.String(length=20), nullable=False),
        sa.Column('recipe_id', sa.String(length=36), sa.ForeignKey('recipes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
    )
    op.create_index('ix_week_plan_meals_week_plan_id', 'week_plan_meals', ['week_plan_id'])
    op.create_index('ix_week_plan_meals_recipe_id', 'week_plan_meals', ['recipe_id'])
    op.create_index('ix_week_plan_meals_date', 'week_plan_meals', ['date'])


def downgrade():
    op.drop_table('week_plan_meals')
    op.drop_table('week_plans')
    op.drop_table('settings')
    op.drop_table('units')
    op.drop_table('recipe_tags')
    op.drop_table('tags')
    op.drop_table('ingredients')
    op.drop_table('recipes')
