"""
Hosted backend client against a fake supabase client.
"""

from datetime import date

import httpx
import pytest
from postgrest.exceptions import APIError

from constants import DEFAULT_SETTINGS
from schemas import SettingsSchema
from services import StoreFailure, SupabaseClient


def settings_with(**changes):
    return SettingsSchema(**dict(DEFAULT_SETTINGS, **changes))


class FakeResult:

    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Chainable stand-in for a postgrest request builder."""

    def __init__(self, table, result):
        self.table = table
        self.result = result
        self.calls = []

    def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        return self._record('select', *args, **kwargs)

    def eq(self, *args, **kwargs):
        return self._record('eq', *args, **kwargs)

    def order(self, *args, **kwargs):
        return self._record('order', *args, **kwargs)

    def limit(self, *args, **kwargs):
        return self._record('limit', *args, **kwargs)

    def upsert(self, *args, **kwargs):
        return self._record('upsert', *args, **kwargs)

    def execute(self):
        if isinstance(self.result, Exception):
            raise self.result
        return FakeResult(self.result)


class FakeSupabase:

    def __init__(self, *results):
        self.results = list(results)
        self.queries = []

    def table(self, name):
        query = FakeQuery(name, self.results.pop(0))
        self.queries.append(query)
        return query


RECIPE_ROW = {
    'id': 'r1',
    'name': 'Lasagne',
    'recipe': 'Schichten.',
    'image': None,
    'ingredients': [{'amount': 250, 'unit': 'g', 'name': 'Nudeln'}],
    'recipe_tags': [{'tags': {'name': 'Ofen'}}, {'tags': {'name': 'Italienisch'}}],
}


def _client(*results):
    fake = FakeSupabase(*results)
    return SupabaseClient('https://demo.supabase.co', 'anon-key', client=fake), fake


def test_fetch_recipes_flattens_tags():
    client, fake = _client([RECIPE_ROW])

    recipe = client.fetch_recipes()[0]

    assert recipe.name == 'Lasagne'
    assert recipe.tags == ['Italienisch', 'Ofen']
    assert recipe.ingredients[0].amount == 250
    query = fake.queries[0]
    assert query.table == 'recipes'
    assert ('order', ('name',), {}) in query.calls


def test_fetch_settings_defaults_when_missing():
    client, fake = _client([])

    assert client.fetch_settings() == settings_with()
    assert ('eq', ('id', 1), {}) in fake.queries[0].calls


def test_fetch_settings_tolerates_missing_columns():
    client, _ = _client([{
        'id': 1,
        'weekly_planning_notification': True,
        'daily_recipe_notification': False,
        'shopping_list_notification': False,
        'dark_mode': True,
        'primary_color': '#000000',
    }])

    settings = client.fetch_settings()

    assert settings.weekly_planning_notification is True
    assert settings.dark_mode is True
    assert settings.weekly_planning_time == '18:00'


def test_update_settings_upserts_row_one():
    stored = dict(settings_with(dark_mode=True).to_columns(), id=1)
    client, fake = _client([stored])

    result = client.update_settings(settings_with(dark_mode=True))

    name, args, kwargs = fake.queries[0].calls[0]
    assert name == 'upsert'
    assert args[0]['id'] == 1
    assert kwargs == {'on_conflict': 'id'}
    assert result.dark_mode is True


def test_current_week_plan():
    client, fake = _client(
        [{'id': 'p1', 'week_start': '2025-01-06', 'week_end': '2025-01-12'}],
        [{'day': 'Montag', 'date': '2025-01-06', 'recipes': RECIPE_ROW}],
    )

    plan = client.fetch_current_week_plan()

    assert plan.id == 'p1'
    assert plan.week_start == date(2025, 1, 6)
    assert plan.meals[0].recipe.name == 'Lasagne'
    plans_query, meals_query = fake.queries
    assert ('order', ('week_start',), {'desc': True}) in plans_query.calls
    assert ('limit', (1,), {}) in plans_query.calls
    assert ('eq', ('week_plan_id', 'p1'), {}) in meals_query.calls


def test_current_week_plan_none():
    client, _ = _client([])
    assert client.fetch_current_week_plan() is None


def test_meal_for_date_prefers_newest_plan():
    older = dict(RECIPE_ROW, id='r0', name='Eintopf')
    client, fake = _client([
        {'day': 'Dienstag', 'date': '2025-01-07', 'week_plans': {'week_start': '2025-01-06'}, 'recipes': RECIPE_ROW},
        {'day': 'Dienstag', 'date': '2025-01-07', 'week_plans': {'week_start': '2025-01-01'}, 'recipes': older},
    ])

    meal = client.fetch_meal_for_date(date(2025, 1, 7))

    assert meal.recipe.name == 'Lasagne'
    assert ('eq', ('date', '2025-01-07'), {}) in fake.queries[0].calls


def test_meal_for_date_none():
    client, _ = _client([])
    assert client.fetch_meal_for_date(date(2025, 1, 7)) is None


def test_api_error_becomes_store_failure():
    client, _ = _client(APIError({'message': 'denied', 'code': '42501', 'hint': None, 'details': None}))

    with pytest.raises(StoreFailure):
        client.fetch_recipes()


def test_connection_error_becomes_store_failure():
    client, _ = _client(httpx.ConnectError('offline'))

    with pytest.raises(StoreFailure):
        client.fetch_settings()


def test_malformed_row_becomes_store_failure():
    client, _ = _client([{'name': 'ohne id'}])

    with pytest.raises(StoreFailure):
        client.fetch_recipes()
