"""
Recipe Schemas

Request and response contracts for recipes and their ingredients.
"""

from typing import List, Optional

from pydantic import Field

from .base import ApiModel, InputModel
from constants import MAX_LENGTHS, MAX_AMOUNT


class IngredientIn(InputModel):
    amount: float = Field(gt=0, le=MAX_AMOUNT)
    unit: str = Field(min_length=1, max_length=MAX_LENGTHS['unit'])
    name: str = Field(min_length=1, max_length=MAX_LENGTHS['ingredient_name'])


class IngredientOut(ApiModel):
    amount: float
    unit: str
    name: str


class RecipeCreate(InputModel):
    """Presence of name, recipe and ingredients is checked by RecipeService."""
    name: str = Field(default='', max_length=MAX_LENGTHS['recipe_name'])
    recipe: str = Field(default='', max_length=MAX_LENGTHS['instructions'])
    image: Optional[str] = Field(default=None, max_length=MAX_LENGTHS['image'])
    tags: List[str] = Field(default_factory=list)
    ingredients: List[IngredientIn] = Field(default_factory=list)


class RecipeUpdate(InputModel):
    """Partial update; only fields present in the body are applied."""
    name: Optional[str] = Field(default=None, max_length=MAX_LENGTHS['recipe_name'])
    recipe: Optional[str] = Field(default=None, max_length=MAX_LENGTHS['instructions'])
    image: Optional[str] = Field(default=None, max_length=MAX_LENGTHS['image'])
    tags: Optional[List[str]] = None
    ingredients: Optional[List[IngredientIn]] = None


class RecipeOut(ApiModel):
    id: str
    name: str
    recipe: str
    image: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    ingredients: List[IngredientOut] = Field(default_factory=list)

    @classmethod
    def from_model(cls, recipe):
        return cls(
            id=recipe.id,
            name=recipe.name,
            recipe=recipe.recipe,
            image=recipe.image,
            tags=recipe.tag_names,
            ingredients=[
                IngredientOut(amount=ing.amount, unit=ing.unit, name=ing.name)
                for ing in recipe.ingredients
            ],
        )
