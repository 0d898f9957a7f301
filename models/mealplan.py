"""
Week Plan Models

Contains the WeekPlan model and the WeekPlanMeal day assignments it owns.
"""

from .base import db, generate_id


class WeekPlan(db.Model):
    """One calendar week of meal assignments (week_end inclusive)."""
    __tablename__ = 'week_plans'

    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    week_start = db.Column(db.Date, nullable=False, index=True)
    week_end = db.Column(db.Date, nullable=False)
    meals = db.relationship(
        'WeekPlanMeal', back_populates='week_plan', lazy='selectin',
        cascade='all, delete-orphan', order_by='WeekPlanMeal.date'
    )


class WeekPlanMeal(db.Model):
    """Recipe assigned to a concrete date of a week plan."""
    __tablename__ = 'week_plan_meals'

    id = db.Column(db.Integer, primary_key=True)
    week_plan_id = db.Column(db.String(36), db.ForeignKey('week_plans.id', ondelete='CASCADE'), nullable=False, index=True)
    day = db.Column(db.String(20), nullable=False)
    recipe_id = db.Column(db.String(36), db.ForeignKey('recipes.id', ondelete='CASCADE'), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False, index=True)
    week_plan = db.relationship('WeekPlan', back_populates='meals')
    recipe = db.relationship('Recipe', back_populates='meals', lazy='joined')
