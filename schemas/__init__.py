"""
Schemas Package

Typed request/response contracts validated at the API boundary.
"""

from .base import ApiModel, InputModel, coerce_date, parse_date
from .recipe import IngredientIn, IngredientOut, RecipeCreate, RecipeUpdate, RecipeOut
from .settings import SettingsSchema
from .weekplan import RecipeRef, MealIn, WeekPlanCreate, MealOut, WeekPlanOut, RandomFillRequest
from .catalog import TagCreate, TagOut, UnitCreate, UnitOut, RecipeSummary, IngredientUsage

__all__ = [
    'ApiModel',
    'InputModel',
    'coerce_date',
    'parse_date',
    'IngredientIn',
    'IngredientOut',
    'RecipeCreate',
    'RecipeUpdate',
    'RecipeOut',
    'SettingsSchema',
    'RecipeRef',
    'MealIn',
    'WeekPlanCreate',
    'MealOut',
    'WeekPlanOut',
    'RandomFillRequest',
    'TagCreate',
    'TagOut',
    'UnitCreate',
    'UnitOut',
    'RecipeSummary',
    'IngredientUsage',
]
