"""
Recipe Service

Create, read, search, update and delete recipes together with their
ingredient rows and tag links.
"""

import logging

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from models import Recipe, Ingredient, Tag, Unit
from constants import MAX_LENGTHS, DEFAULT_TAG_COLOR
from utils.sanitizer import sanitize_text, sanitize_instructions, sanitize_url
from .errors import ValidationFailure, NotFound

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = 'Name, instructions and at least one ingredient are required'


def _like_pattern(term):
    """Substring pattern for ILIKE with % and _ escaped."""
    escaped = term.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f"%{escaped}%"


def unique_tag_names(names):
    """Trim tag names and drop blanks and duplicates, keeping first-seen order."""
    seen = []
    for name in names or []:
        name = sanitize_text(name, MAX_LENGTHS['tag_name'])
        if name and name not in seen:
            seen.append(name)
    return seen


class RecipeService:
    """Recipe operations on an explicitly passed SQLAlchemy session."""

    def __init__(self, session):
        self.session = session

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_recipes(self):
        return self.session.query(Recipe).order_by(Recipe.name).all()

    def search(self, term=None, tags=None):
        """
        Recipes whose name, instructions or any ingredient name contains
        `term` (case-insensitive) and that carry every tag in `tags`.
        """
        query = self.session.query(Recipe)

        term = (term or '').strip()
        if term:
            pattern = _like_pattern(term)
            query = query.filter(or_(
                Recipe.name.ilike(pattern, escape='\\'),
                Recipe.recipe.ilike(pattern, escape='\\'),
                Recipe.ingredients.any(Ingredient.name.ilike(pattern, escape='\\')),
            ))

        for tag in unique_tag_names(tags):
            query = query.filter(Recipe.tags.any(Tag.name == tag))

        return query.order_by(Recipe.name).all()

    def get(self, recipe_id):
        recipe = self.session.get(Recipe, recipe_id)
        if recipe is None:
            raise NotFound(f'Recipe {recipe_id} not found')
        return recipe

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, data):
        """
        Insert a recipe with its ingredients and tags in one transaction.

        Args:
            data: RecipeCreate

        Returns:
            The persisted Recipe with its generated id

        Raises:
            ValidationFailure: name, instructions or ingredients missing,
                or an ingredient uses an unregistered unit
        """
        name = sanitize_text(data.name, MAX_LENGTHS['recipe_name'])
        instructions = sanitize_instructions(data.recipe, MAX_LENGTHS['instructions'])
        missing = [field for field, value in (
            ('name', name), ('recipe', instructions), ('ingredients', data.ingredients)
        ) if not value]
        if missing:
            raise ValidationFailure(REQUIRED_FIELDS_MESSAGE, details={'missing': missing})

        image = self._clean_image(data.image)
        ingredients = self._build_ingredients(data.ingredients)

        try:
            recipe = Recipe(name=name, recipe=instructions, image=image)
            recipe.ingredients = ingredients
            recipe.tags = self._resolve_tags(data.tags)
            self.session.add(recipe)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

        logger.info("Created recipe %s (%s) with %d ingredients", recipe.id, recipe.name, len(ingredients))
        return recipe

    def update(self, recipe_id, data):
        """
        Apply the fields present in a RecipeUpdate.

        A given ingredient list replaces the stored one completely; a given
        tag list replaces the tag set. Last write wins.
        """
        recipe = self.get(recipe_id)
        fields = data.model_fields_set
        changes = {}

        if 'name' in fields:
            changes['name'] = sanitize_text(data.name, MAX_LENGTHS['recipe_name'])
        if 'recipe' in fields:
            changes['recipe'] = sanitize_instructions(data.recipe, MAX_LENGTHS['instructions'])
        if 'image' in fields:
            changes['image'] = self._clean_image(data.image)

        missing = [field for field in ('name', 'recipe') if field in changes and not changes[field]]
        if 'ingredients' in fields and not data.ingredients:
            missing.append('ingredients')
        if missing:
            raise ValidationFailure(REQUIRED_FIELDS_MESSAGE, details={'missing': missing})

        new_ingredients = self._build_ingredients(data.ingredients) if 'ingredients' in fields else None

        try:
            for column, value in changes.items():
                setattr(recipe, column, value)
            if 'tags' in fields:
                recipe.tags = self._resolve_tags(data.tags)
            if new_ingredients is not None:
                # delete all, insert all
                recipe.ingredients.clear()
                self.session.flush()
                recipe.ingredients.extend(new_ingredients)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

        return recipe

    def set_image(self, recipe_id, filename):
        """Point the recipe at a stored image; returns the previous reference."""
        recipe = self.get(recipe_id)
        previous = recipe.image
        recipe.image = filename
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return previous

    def delete(self, recipe_id):
        """Delete a recipe; ingredients, tag links and planned meals go with it."""
        recipe = self.get(recipe_id)
        image = recipe.image
        try:
            self.session.delete(recipe)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        logger.info("Deleted recipe %s", recipe_id)
        return image

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _clean_image(self, image):
        if image is None or not image.strip():
            return None
        cleaned = sanitize_url(image)
        if not cleaned:
            raise ValidationFailure('Invalid image reference')
        return cleaned

    def _build_ingredients(self, items):
        known_units = {name for (name,) in self.session.query(Unit.name).all()}
        unknown = sorted({item.unit for item in items if item.unit not in known_units})
        if unknown:
            raise ValidationFailure(f"Unknown unit: {', '.join(unknown)}", details={'units': unknown})

        ingredients = []
        for item in items:
            name = sanitize_text(item.name, MAX_LENGTHS['ingredient_name'])
            if not name:
                raise ValidationFailure('Ingredient name is required')
            ingredients.append(Ingredient(amount=item.amount, unit=item.unit, name=name))
        return ingredients

    def _resolve_tags(self, names):
        """Tag rows for the given names, creating the ones that do not exist yet."""
        names = unique_tag_names(names)
        if not names:
            return []
        existing = {tag.name: tag for tag in self.session.query(Tag).filter(Tag.name.in_(names)).all()}
        tags = []
        for name in names:
            tag = existing.get(name)
            if tag is None:
                tag = Tag(name=name, color=DEFAULT_TAG_COLOR)
                self.session.add(tag)
            tags.append(tag)
        return tags
