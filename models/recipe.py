"""
Recipe Models

Contains the Recipe and Ingredient models, the Tag model with its
recipe_tags join table, and the Unit registry.
"""

from .base import db, generate_id
from constants import DEFAULT_TAG_COLOR


recipe_tags = db.Table(
    'recipe_tags',
    db.Column('recipe_id', db.String(36), db.ForeignKey('recipes.id', ondelete='CASCADE'), primary_key=True),
    db.Column('tag_id', db.Integer, db.ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True),
)


class Recipe(db.Model):
    """Recipe with instructions, tags and its own ingredient rows."""
    __tablename__ = 'recipes'

    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    name = db.Column(db.String(200), nullable=False, index=True)
    recipe = db.Column(db.Text, nullable=False)  # free-text instructions
    image = db.Column(db.String(500), nullable=True)
    ingredients = db.relationship(
        'Ingredient', back_populates='recipe', lazy='selectin',
        cascade='all, delete-orphan', order_by='Ingredient.id'
    )
    tags = db.relationship('Tag', secondary=recipe_tags, back_populates='recipes', lazy='selectin')
    meals = db.relationship('WeekPlanMeal', back_populates='recipe', cascade='all, delete')

    @property
    def tag_names(self):
        return sorted(tag.name for tag in self.tags)


class Ingredient(db.Model):
    """Ingredient line owned by exactly one recipe."""
    __tablename__ = 'ingredients'

    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.String(36), db.ForeignKey('recipes.id', ondelete='CASCADE'), nullable=False, index=True)
    amount = db.Column(db.Float, nullable=False)
    unit = db.Column(db.String(20), nullable=False)
    name = db.Column(db.String(200), nullable=False, index=True)
    recipe = db.relationship('Recipe', back_populates='ingredients')


class Tag(db.Model):
    """Named, colored label attached to recipes."""
    __tablename__ = 'tags'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False, index=True)
    color = db.Column(db.String(7), nullable=False, default=DEFAULT_TAG_COLOR)
    recipes = db.relationship('Recipe', secondary=recipe_tags, back_populates='tags')


class Unit(db.Model):
    """Registry of unit strings accepted for ingredients."""
    __tablename__ = 'units'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(20), unique=True, nullable=False)
