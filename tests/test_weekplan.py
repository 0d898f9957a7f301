"""
Week plans: saving with replacement, lookups and random filling.
"""

import random
from datetime import date

import pytest

from models import WeekPlan, WeekPlanMeal
from schemas import WeekPlanCreate
from services import ValidationFailure, WeekPlanService, random_fill, week_days

MONDAY = date(2025, 1, 6)


def _plan(week_start, *meals):
    return {
        'weekStart': week_start,
        'meals': [
            {'date': day, 'recipe': {'_id': recipe_id}}
            for day, recipe_id in meals
        ],
    }


def test_current_is_null_without_plans(client):
    response = client.get('/api/weekplan/current')

    assert response.status_code == 200
    assert response.get_json() is None


def test_save_and_read_current(client, make_recipe):
    a = make_recipe('Lasagne')
    b = make_recipe('Risotto')

    response = client.post('/api/weekplan', json=_plan('2025-01-06', ('2025-01-06', a['id']), ('2025-01-07', b['id'])))

    assert response.status_code == 201
    saved = response.get_json()
    assert saved['weekStart'] == '2025-01-06'
    assert saved['weekEnd'] == '2025-01-12'
    current = client.get('/api/weekplan/current').get_json()
    assert current['id'] == saved['id']
    assert [(m['day'], m['date'], m['recipe']['name']) for m in current['meals']] == [
        ('Montag', '2025-01-06', 'Lasagne'),
        ('Dienstag', '2025-01-07', 'Risotto'),
    ]


def test_saving_same_week_replaces_previous_plan(client, session, make_recipe):
    a = make_recipe('Lasagne')
    b = make_recipe('Risotto')
    c = make_recipe('Tacos')

    client.post('/api/weekplan', json=_plan('2025-01-06', ('2025-01-06', a['id']), ('2025-01-07', b['id'])))
    client.post('/api/weekplan', json=_plan('2025-01-06', ('2025-01-06', c['id'])))

    assert session.query(WeekPlan).count() == 1
    assert session.query(WeekPlanMeal).count() == 1
    meals = client.get('/api/weekplan/current').get_json()['meals']
    assert [m['recipe']['id'] for m in meals] == [c['id']]


def test_partially_overlapping_plan_is_kept(session, make_recipe):
    a = make_recipe('Lasagne')
    service = WeekPlanService(session)
    service.save(WeekPlanCreate.model_validate(_plan('2025-01-08', ('2025-01-08', a['id']))))

    service.save(WeekPlanCreate.model_validate(_plan('2025-01-06', ('2025-01-06', a['id']))))

    assert session.query(WeekPlan).count() == 2


def test_iso_datetimes_and_plain_id_are_accepted(client, make_recipe):
    a = make_recipe('Lasagne')

    response = client.post('/api/weekplan', json={
        'weekStart': '2025-01-06T00:00:00.000Z',
        'weekEnd': '2025-01-12T00:00:00.000Z',
        'meals': [{'day': 'Montag', 'date': '2025-01-06T00:00:00.000Z', 'recipe': {'id': a['id'], 'name': 'Lasagne'}}],
    })

    assert response.status_code == 201
    assert response.get_json()['meals'][0]['date'] == '2025-01-06'


def test_unknown_recipe_is_rejected(client, session):
    response = client.post('/api/weekplan', json=_plan('2025-01-06', ('2025-01-06', 'nope')))

    assert response.status_code == 400
    assert response.get_json()['details'] == {'recipes': ['nope']}
    assert session.query(WeekPlan).count() == 0


def test_week_end_before_start_is_rejected(client):
    response = client.post('/api/weekplan', json={'weekStart': '2025-01-06', 'weekEnd': '2025-01-01', 'meals': []})
    assert response.status_code == 400


def test_current_is_latest_week_start(client, make_recipe):
    a = make_recipe('Lasagne')
    client.post('/api/weekplan', json=_plan('2025-01-13', ('2025-01-13', a['id'])))
    client.post('/api/weekplan', json=_plan('2025-01-06', ('2025-01-06', a['id'])))

    assert client.get('/api/weekplan/current').get_json()['weekStart'] == '2025-01-13'


def test_plan_for_week(client, make_recipe):
    a = make_recipe('Lasagne')
    client.post('/api/weekplan', json=_plan('2025-01-06', ('2025-01-08', a['id'])))

    found = client.get('/api/weekplan?weekStart=2025-01-06').get_json()
    missing = client.get('/api/weekplan?weekStart=2025-01-13').get_json()

    assert found['meals'][0]['date'] == '2025-01-08'
    assert missing is None
    assert client.get('/api/weekplan').status_code == 400
    assert client.get('/api/weekplan?weekStart=morgen').status_code == 400


def test_meal_for_date(session, make_recipe):
    a = make_recipe('Lasagne')
    service = WeekPlanService(session)
    service.save(WeekPlanCreate.model_validate(_plan('2025-01-06', ('2025-01-09', a['id']))))

    meal = service.get_meal_for_date(date(2025, 1, 9))

    assert meal.recipe.name == 'Lasagne'
    assert meal.day == 'Donnerstag'
    assert service.get_meal_for_date(date(2025, 1, 10)) is None


def test_today_endpoint_without_plan(client):
    response = client.get('/api/weekplan/today')

    assert response.status_code == 200
    assert response.get_json() is None


# ----------------------------------------------------------------------
# Random fill
# ----------------------------------------------------------------------

def test_week_days():
    days = week_days(MONDAY)
    assert len(days) == 7
    assert days[0] == MONDAY
    assert days[-1] == date(2025, 1, 12)


def test_random_fill_keeps_assignments_and_never_repeats():
    days = week_days(MONDAY)
    candidates = ['r1', 'r2', 'r3', 'r4', 'r5', 'r6', 'r7', 'r8']

    filled = random_fill(candidates, {days[2]: 'fixed'}, days, rng=random.Random(7))

    assert filled[days[2]] == 'fixed'
    assert set(filled) == set(days)
    drawn = [filled[day] for day in days if day != days[2]]
    assert len(drawn) == len(set(drawn)) == 6
    assert set(drawn) <= set(candidates)


def test_random_fill_stops_when_pool_is_exhausted():
    days = week_days(MONDAY)

    filled = random_fill(['r1', 'r2'], {}, days, rng=random.Random(1))

    assert sorted(filled.values()) == ['r1', 'r2']
    assert set(filled) == set(days[:2])


def test_random_fill_is_deterministic_for_a_seed():
    days = week_days(MONDAY)
    candidates = [f'r{i}' for i in range(10)]

    first = random_fill(candidates, {}, days, rng=random.Random(42))
    second = random_fill(candidates, {}, days, rng=random.Random(42))

    assert first == second


def test_random_fill_endpoint(client, make_recipe):
    ids = [make_recipe(name)['id'] for name in ('A', 'B', 'C', 'D', 'E', 'F', 'G')]

    response = client.post('/api/weekplan/random-fill', json={
        'weekStart': '2025-01-06',
        'assignments': {'2025-01-06': ids[0]},
    })

    assert response.status_code == 200
    assignments = response.get_json()['assignments']
    assert list(assignments) == [day.isoformat() for day in week_days(MONDAY)]
    assert assignments['2025-01-06']['id'] == ids[0]
    drawn = [recipe['id'] for day, recipe in assignments.items() if day != '2025-01-06']
    assert len(drawn) == len(set(drawn)) == 6
    assert set(drawn) <= set(ids)


def test_random_fill_unknown_assignment(session):
    with pytest.raises(ValidationFailure):
        WeekPlanService(session).random_fill_week(MONDAY, {MONDAY: 'missing'})
