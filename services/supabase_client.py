"""
Hosted Backend Client

Reads and writes the meal planner data directly in a hosted Supabase
project, returning the same contracts as the REST API.
"""

import logging

import httpx
from postgrest.exceptions import APIError
from pydantic import ValidationError
from supabase import create_client

from constants import SETTINGS_ID, DEFAULT_SETTINGS
from schemas import RecipeOut, SettingsSchema, WeekPlanOut, MealOut
from .errors import StoreFailure

logger = logging.getLogger(__name__)

RECIPE_SELECT = (
    'id,name,recipe,image,'
    'ingredients(amount,unit,name),'
    'recipe_tags(tags(name))'
)


def _recipe_from_row(row):
    """Embedded tags arrive as recipe_tags: [{tags: {name}}]."""
    tags = [link['tags']['name'] for link in row.get('recipe_tags') or [] if link.get('tags')]
    return RecipeOut(
        id=str(row['id']),
        name=row['name'],
        recipe=row.get('recipe') or '',
        image=row.get('image'),
        tags=sorted(tags),
        ingredients=row.get('ingredients') or [],
    )


def _meal_from_row(row):
    return MealOut(day=row['day'], date=row['date'], recipe=_recipe_from_row(row['recipes']))


def _plan_start(row):
    return (row.get('week_plans') or {}).get('week_start') or ''


class SupabaseClient:
    """
    Meal planner tables of a Supabase project.

    Args:
        url: Project URL, e.g. https://xyz.supabase.co
        anon_key: Public anon key of the project
        client: Optional supabase Client (injected in tests)
    """

    def __init__(self, url, anon_key, client=None):
        self.client = client or create_client(url, anon_key)

    def _execute(self, table, query):
        try:
            return query.execute().data
        except (APIError, httpx.HTTPError) as e:
            logger.error("Hosted backend query on %s failed: %s", table, e)
            raise StoreFailure(f'Request to {table} failed') from e

    def _parse(self, build, *args):
        try:
            return build(*args)
        except (KeyError, TypeError, ValidationError) as e:
            raise StoreFailure('Unexpected response from hosted backend') from e

    # ------------------------------------------------------------------
    # Recipes
    # ------------------------------------------------------------------

    def fetch_recipes(self):
        rows = self._execute('recipes', self.client.table('recipes').select(RECIPE_SELECT).order('name'))
        return [self._parse(_recipe_from_row, row) for row in rows or []]

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def fetch_settings(self):
        """Stored settings, or the defaults when the row does not exist yet."""
        rows = self._execute('settings', self.client.table('settings').select('*').eq('id', SETTINGS_ID))
        if not rows:
            return SettingsSchema.defaults()
        return self._parse(self._settings_from_row, rows[0])

    def update_settings(self, settings):
        rows = self._execute(
            'settings',
            self.client.table('settings').upsert(dict(settings.to_columns(), id=SETTINGS_ID), on_conflict='id'),
        )
        if not rows:
            return settings
        return self._parse(self._settings_from_row, rows[0])

    @staticmethod
    def _settings_from_row(row):
        # Older rows may lack the reminder time/day columns
        known = {name: row[name] for name in SettingsSchema.model_fields if row.get(name) is not None}
        return SettingsSchema(**dict(DEFAULT_SETTINGS, **known))

    # ------------------------------------------------------------------
    # Week plans
    # ------------------------------------------------------------------

    def fetch_current_week_plan(self):
        plans = self._execute(
            'week_plans',
            self.client.table('week_plans')
            .select('id,week_start,week_end')
            .order('week_start', desc=True)
            .limit(1),
        )
        if not plans:
            return None
        plan = plans[0]

        rows = self._execute(
            'week_plan_meals',
            self.client.table('week_plan_meals')
            .select(f'day,date,recipes({RECIPE_SELECT})')
            .eq('week_plan_id', plan['id'])
            .order('date'),
        )
        meals = [self._parse(_meal_from_row, row) for row in rows or [] if row.get('recipes')]
        return self._parse(
            lambda p: WeekPlanOut(id=str(p['id']), week_start=p['week_start'], week_end=p['week_end'], meals=meals),
            plan,
        )

    def fetch_meal_for_date(self, day):
        """The meal planned for `day` (newest plan wins), or None."""
        rows = self._execute(
            'week_plan_meals',
            self.client.table('week_plan_meals')
            .select(f'day,date,week_plans(week_start),recipes({RECIPE_SELECT})')
            .eq('date', day.isoformat()),
        )
        rows = [row for row in rows or [] if row.get('recipes')]
        if not rows:
            return None
        return self._parse(_meal_from_row, max(rows, key=_plan_start))
