"""
Catalog Schemas

Tags, units and the ingredient overview.
"""

from typing import List

from pydantic import Field

from .base import ApiModel, InputModel
from constants import COLOR_PATTERN, DEFAULT_TAG_COLOR, MAX_LENGTHS


class TagCreate(InputModel):
    name: str = Field(default='', max_length=MAX_LENGTHS['tag_name'])
    color: str = Field(default=DEFAULT_TAG_COLOR, pattern=COLOR_PATTERN)


class TagOut(ApiModel):
    id: int
    name: str
    color: str
    recipe_count: int = 0


class UnitCreate(InputModel):
    name: str = Field(default='', max_length=MAX_LENGTHS['unit'])


class UnitOut(ApiModel):
    id: int
    name: str


class RecipeSummary(ApiModel):
    id: str
    name: str


class IngredientUsage(ApiModel):
    name: str
    units: List[str] = Field(default_factory=list)
    recipes: List[RecipeSummary] = Field(default_factory=list)
