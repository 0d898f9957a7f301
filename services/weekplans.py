"""
Week Plan Service

Saving and loading week plans, and random filling of unplanned days.
"""

import logging
import random
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from models import Recipe, WeekPlan, WeekPlanMeal
from constants import WEEKDAY_LABELS
from .errors import ValidationFailure

logger = logging.getLogger(__name__)


def week_days(week_start):
    """The seven dates of the week starting at week_start."""
    return [week_start + timedelta(days=offset) for offset in range(7)]


def day_label(day):
    return WEEKDAY_LABELS[day.weekday()]


def random_fill(candidates, assignments, days, rng=None):
    """
    Assign a random candidate to every day that has no assignment yet.

    Candidates are drawn without replacement, so no recipe is used twice in
    one pass. When the pool runs out the remaining days stay empty.

    Args:
        candidates: Recipes (or ids) to draw from
        assignments: Mapping of day -> recipe for days already planned
        days: Days to fill, in order
        rng: random.Random-compatible source (defaults to the random module)

    Returns:
        New mapping with the existing and the drawn assignments
    """
    rng = rng or random
    filled = dict(assignments)
    pool = list(candidates)

    for day in days:
        if not pool:
            break
        if day in filled:
            continue
        filled[day] = pool.pop(rng.randrange(len(pool)))

    return filled


class WeekPlanService:
    """Week plan persistence on an explicitly passed session."""

    def __init__(self, session):
        self.session = session

    def get_current(self):
        """The plan with the latest week start, or None."""
        return self.session.query(WeekPlan).order_by(WeekPlan.week_start.desc()).first()

    def get_for_week(self, week_start):
        """The plan lying within [week_start, week_start + 6], or None."""
        week_end = week_start + timedelta(days=6)
        return (
            self.session.query(WeekPlan)
            .filter(WeekPlan.week_start >= week_start, WeekPlan.week_end <= week_end)
            .order_by(WeekPlan.week_start.desc())
            .first()
        )

    def get_meal_for_date(self, day):
        """The meal planned for a calendar date (newest plan wins), or None."""
        return (
            self.session.query(WeekPlanMeal)
            .join(WeekPlan, WeekPlanMeal.week_plan_id == WeekPlan.id)
            .filter(WeekPlanMeal.date == day)
            .order_by(WeekPlan.week_start.desc())
            .first()
        )

    def save(self, data):
        """
        Store a week plan, replacing the plans already saved for that week.

        Every plan with week_start >= data.week_start and
        week_end <= data.week_end is deleted before the new plan and its
        meals are inserted, all in one transaction. A plan whose range only
        partially overlaps is kept.

        Args:
            data: WeekPlanCreate

        Raises:
            ValidationFailure: a meal references an unknown recipe
        """
        recipe_ids = {meal.recipe.id for meal in data.meals}
        if recipe_ids:
            found = {rid for (rid,) in self.session.query(Recipe.id).filter(Recipe.id.in_(recipe_ids)).all()}
            unknown = sorted(recipe_ids - found)
            if unknown:
                raise ValidationFailure('Unknown recipe in week plan', details={'recipes': unknown})

        try:
            replaced = (
                self.session.query(WeekPlan)
                .filter(WeekPlan.week_start >= data.week_start, WeekPlan.week_end <= data.week_end)
                .all()
            )
            for stale in replaced:
                self.session.delete(stale)
            self.session.flush()

            plan = WeekPlan(week_start=data.week_start, week_end=data.week_end)
            for meal in data.meals:
                plan.meals.append(WeekPlanMeal(
                    day=meal.day or day_label(meal.date),
                    date=meal.date,
                    recipe_id=meal.recipe.id,
                ))
            self.session.add(plan)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

        logger.info(
            "Saved week plan %s (%s - %s) with %d meals, replaced %d",
            plan.id, plan.week_start, plan.week_end, len(data.meals), len(replaced)
        )
        return plan

    def random_fill_week(self, week_start, assignments, rng=None):
        """
        Fill the unplanned days of a week from all recipes.

        Args:
            week_start: First day of the week
            assignments: Mapping of date -> recipe id already chosen

        Returns:
            Mapping of date -> Recipe
        """
        recipes = {recipe.id: recipe for recipe in self.session.query(Recipe).order_by(Recipe.name).all()}
        unknown = sorted(set(assignments.values()) - set(recipes))
        if unknown:
            raise ValidationFailure('Unknown recipe in assignments', details={'recipes': unknown})

        chosen = {day: recipes[recipe_id] for day, recipe_id in assignments.items()}
        return random_fill(recipes.values(), chosen, week_days(week_start), rng=rng)
