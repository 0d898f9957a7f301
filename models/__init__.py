"""
Models Package

Exports all database models and the db instance for use throughout the application.
"""

from .base import db

from .recipe import Recipe, Ingredient, Tag, Unit, recipe_tags
from .mealplan import WeekPlan, WeekPlanMeal
from .settings import Settings

__all__ = [
    'db',
    'Recipe',
    'Ingredient',
    'Tag',
    'Unit',
    'recipe_tags',
    'WeekPlan',
    'WeekPlanMeal',
    'Settings',
]
