"""
Services Package

Business logic modules for the meal planner. Services that touch the
database take the SQLAlchemy session in their constructor.
"""

from .errors import (
    ServiceError,
    ValidationFailure,
    NotFound,
    StoreFailure,
)

from .recipes import RecipeService

from .catalog import CatalogService

from .settings import SettingsService

from .weekplans import (
    WeekPlanService,
    random_fill,
    week_days,
)

from .shopping import (
    ShoppingItem,
    ShoppingList,
    aggregate_ingredients,
    build_shopping_list,
    format_amount,
)

from .notifications import (
    NotificationKind,
    NotificationState,
    NotificationScheduler,
    LogNotifier,
    next_occurrence,
    next_daily,
    watch_settings,
)

from .supabase_client import SupabaseClient

__all__ = [
    # Errors
    'ServiceError',
    'ValidationFailure',
    'NotFound',
    'StoreFailure',
    # Store-backed services
    'RecipeService',
    'CatalogService',
    'SettingsService',
    'WeekPlanService',
    # Week plans
    'random_fill',
    'week_days',
    # Shopping
    'ShoppingItem',
    'ShoppingList',
    'aggregate_ingredients',
    'build_shopping_list',
    'format_amount',
    # Notifications
    'NotificationKind',
    'NotificationState',
    'NotificationScheduler',
    'LogNotifier',
    'next_occurrence',
    'next_daily',
    'watch_settings',
    # Hosted backend
    'SupabaseClient',
]
