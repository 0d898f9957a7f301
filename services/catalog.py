"""
Catalog Service

Tags, the unit registry and the ingredient overview across all recipes.
"""

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from models import Recipe, Ingredient, Tag, Unit, recipe_tags
from constants import DEFAULT_UNITS, MAX_LENGTHS
from utils.sanitizer import sanitize_text
from .errors import ValidationFailure, NotFound


class CatalogService:
    """Tag and unit management on an explicitly passed session."""

    def __init__(self, session):
        self.session = session

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def list_tags(self):
        """(Tag, recipe_count) pairs ordered by tag name."""
        counts = (
            self.session.query(Tag, func.count(recipe_tags.c.recipe_id))
            .outerjoin(recipe_tags, recipe_tags.c.tag_id == Tag.id)
            .group_by(Tag.id)
            .order_by(Tag.name)
        )
        return counts.all()

    def create_tag(self, name, color):
        name = sanitize_text(name, MAX_LENGTHS['tag_name'])
        if not name:
            raise ValidationFailure('Tag name is required')
        if self.session.query(Tag).filter_by(name=name).first():
            raise ValidationFailure(f'Tag "{name}" already exists')

        tag = Tag(name=name, color=color)
        self._commit_add(tag)
        return tag

    def delete_tag(self, tag_id):
        tag = self.session.get(Tag, tag_id)
        if tag is None:
            raise NotFound(f'Tag {tag_id} not found')
        self._commit_delete(tag)

    # ------------------------------------------------------------------
    # Units
    # ------------------------------------------------------------------

    def list_units(self):
        return self.session.query(Unit).order_by(Unit.id).all()

    def create_unit(self, name):
        name = sanitize_text(name, MAX_LENGTHS['unit'])
        if not name:
            raise ValidationFailure('Unit name is required')
        if self.session.query(Unit).filter_by(name=name).first():
            raise ValidationFailure(f'Unit "{name}" already exists')

        unit = Unit(name=name)
        self._commit_add(unit)
        return unit

    def delete_unit(self, unit_id):
        unit = self.session.get(Unit, unit_id)
        if unit is None:
            raise NotFound(f'Unit {unit_id} not found')
        self._commit_delete(unit)

    def ensure_default_units(self):
        """Seed the unit registry; units already present are left alone."""
        present = {name for (name,) in self.session.query(Unit.name).all()}
        added = [Unit(name=name) for name in DEFAULT_UNITS if name not in present]
        if added:
            self.session.add_all(added)
            try:
                self.session.commit()
            except SQLAlchemyError:
                self.session.rollback()
                raise
        return len(added)

    # ------------------------------------------------------------------
    # Ingredient overview
    # ------------------------------------------------------------------

    def ingredient_overview(self):
        """
        Every distinct ingredient name with the units it is used in and the
        recipes using it, sorted by name.
        """
        rows = (
            self.session.query(Ingredient.name, Ingredient.unit, Recipe.id, Recipe.name)
            .join(Recipe, Ingredient.recipe_id == Recipe.id)
            .order_by(Ingredient.name, Recipe.name)
            .all()
        )

        overview = {}
        for ingredient_name, unit, recipe_id, recipe_name in rows:
            entry = overview.setdefault(ingredient_name, {'name': ingredient_name, 'units': [], 'recipes': []})
            if unit not in entry['units']:
                entry['units'].append(unit)
            if all(r['id'] != recipe_id for r in entry['recipes']):
                entry['recipes'].append({'id': recipe_id, 'name': recipe_name})
        return list(overview.values())

    def _commit_add(self, obj):
        try:
            self.session.add(obj)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def _commit_delete(self, obj):
        try:
            self.session.delete(obj)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
