"""
Week Plan Schemas

Contracts for saving and reading week plans and for random filling.
"""

import datetime
from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .base import ApiModel, InputModel, coerce_date
from .recipe import RecipeOut
from constants import MAX_LENGTHS


class RecipeRef(BaseModel):
    """Reference to an existing recipe; clients send either `_id` or `id`."""
    model_config = ConfigDict(extra='ignore')

    id: str = Field(min_length=1, validation_alias=AliasChoices('_id', 'id'))


class MealIn(InputModel):
    day: Optional[str] = Field(default=None, max_length=MAX_LENGTHS['day'])
    date: datetime.date
    recipe: RecipeRef

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, value):
        return coerce_date(value)


class WeekPlanCreate(InputModel):
    week_start: datetime.date
    week_end: Optional[datetime.date] = None
    meals: List[MealIn] = Field(default_factory=list)

    @field_validator('week_start', 'week_end', mode='before')
    @classmethod
    def normalize_dates(cls, value):
        return coerce_date(value)

    @model_validator(mode='after')
    def check_range(self):
        if self.week_end is None:
            self.week_end = self.week_start + datetime.timedelta(days=6)
        if self.week_end < self.week_start:
            raise ValueError('weekEnd must not be before weekStart')
        return self


class MealOut(ApiModel):
    day: str
    date: datetime.date
    recipe: RecipeOut

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, value):
        return coerce_date(value)

    @classmethod
    def from_model(cls, meal):
        return cls(day=meal.day, date=meal.date, recipe=RecipeOut.from_model(meal.recipe))


class WeekPlanOut(ApiModel):
    id: str
    week_start: datetime.date
    week_end: datetime.date
    meals: List[MealOut] = Field(default_factory=list)

    @field_validator('week_start', 'week_end', mode='before')
    @classmethod
    def normalize_dates(cls, value):
        return coerce_date(value)

    @classmethod
    def from_model(cls, plan):
        return cls(
            id=plan.id,
            week_start=plan.week_start,
            week_end=plan.week_end,
            meals=[MealOut.from_model(meal) for meal in plan.meals],
        )


class RandomFillRequest(InputModel):
    week_start: datetime.date
    # ISO date -> recipe id of days that are already planned
    assignments: Dict[datetime.date, str] = Field(default_factory=dict)

    @field_validator('week_start', mode='before')
    @classmethod
    def normalize_start(cls, value):
        return coerce_date(value)
