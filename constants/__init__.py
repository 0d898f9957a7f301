"""
Constants Package

Static values shared by models, services and the API layer.
"""

from .units import DEFAULT_UNITS, DEFAULT_CUSTOM_UNIT
from .validation import (
    MAX_LENGTHS,
    MAX_AMOUNT,
    COLOR_PATTERN,
    TIME_PATTERN,
    ALLOWED_EXTENSIONS,
)
from .defaults import (
    SETTINGS_ID,
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_TAG_COLOR,
    DEFAULT_SETTINGS,
    WEEKDAY_LABELS,
)

__all__ = [
    'DEFAULT_UNITS',
    'DEFAULT_CUSTOM_UNIT',
    'MAX_LENGTHS',
    'MAX_AMOUNT',
    'COLOR_PATTERN',
    'TIME_PATTERN',
    'ALLOWED_EXTENSIONS',
    'SETTINGS_ID',
    'DEFAULT_PRIMARY_COLOR',
    'DEFAULT_TAG_COLOR',
    'DEFAULT_SETTINGS',
    'WEEKDAY_LABELS',
]
