"""
Shopping List Service

Builds the shopping list of a week plan and models the session-only state
(purchased flags, manual amount changes, custom entries) on top of it.
Nothing here is persisted; a fresh list starts from the aggregation again.
"""

import uuid
from dataclasses import dataclass, field

from constants import DEFAULT_CUSTOM_UNIT


def _new_id():
    return str(uuid.uuid4())


def format_amount(value):
    """Amount for display: 150.0 -> '150', 0.25 -> '0.25'."""
    if value == int(value):
        return str(int(value))
    return f"{value:.2f}".rstrip('0').rstrip('.')


@dataclass
class ShoppingItem:
    name: str
    unit: str
    amount: float
    purchased: bool = False
    custom: bool = False
    id: str = field(default_factory=_new_id)

    def to_json(self):
        return {
            'id': self.id,
            'name': self.name,
            'unit': self.unit,
            'amount': self.amount,
            'purchased': self.purchased,
        }

    def line(self):
        mark = '✓' if self.purchased else '○'
        return f"{mark} {format_amount(self.amount)} {self.unit} {self.name}"


def aggregate_ingredients(meals):
    """
    Sum ingredient amounts of the recipes planned in `meals`.

    Ingredients are merged only when name and unit are exactly equal
    (case-sensitive, no unit conversion), so 500 g and 0.5 kg stay separate
    entries. The first ingredient seen for a key provides the display form.

    Args:
        meals: Iterable of objects with a `recipe` carrying `ingredients`
            (each with `name`, `unit`, `amount`)

    Returns:
        dict mapping (name, unit) -> ShoppingItem, in first-seen order
    """
    combined = {}
    for meal in meals:
        recipe = getattr(meal, 'recipe', None)
        if recipe is None:
            continue
        for ingredient in recipe.ingredients or []:
            key = (ingredient.name, ingredient.unit)
            if key in combined:
                combined[key].amount += ingredient.amount
            else:
                combined[key] = ShoppingItem(name=ingredient.name, unit=ingredient.unit, amount=ingredient.amount)
    return combined


def build_shopping_list(week_plan):
    """Aggregated items for a week plan; an empty list when there is no plan."""
    if week_plan is None:
        return []
    return list(aggregate_ingredients(week_plan.meals).values())


class ShoppingList:
    """
    In-session shopping list: aggregated items plus ad hoc custom items.

    Custom items are never merged into the aggregation; both lists are only
    combined when exporting.
    """

    def __init__(self, items=None):
        self.items = list(items or [])
        self.custom_items = []

    @classmethod
    def for_week_plan(cls, week_plan):
        return cls(build_shopping_list(week_plan))

    def _find(self, item_id):
        for item in self.items + self.custom_items:
            if item.id == item_id:
                return item
        raise KeyError(item_id)

    def add_custom(self, name, amount=1, unit=DEFAULT_CUSTOM_UNIT):
        name = (name or '').strip()
        if not name:
            return None
        item = ShoppingItem(name=name, unit=unit, amount=amount, custom=True)
        self.custom_items.append(item)
        return item

    def toggle_purchased(self, item_id):
        item = self._find(item_id)
        item.purchased = not item.purchased
        return item

    def increment(self, item_id):
        item = self._find(item_id)
        item.amount += 1
        return item

    def decrement(self, item_id):
        item = self._find(item_id)
        item.amount = max(0, item.amount - 1)
        return item

    def pending(self, custom=False):
        source = self.custom_items if custom else self.items
        return [item for item in source if not item.purchased]

    def purchased(self, custom=False):
        source = self.custom_items if custom else self.items
        return [item for item in source if item.purchased]

    def export_text(self):
        """One line per item, aggregated items first, then custom ones."""
        return '\n'.join(item.line() for item in self.items + self.custom_items)
