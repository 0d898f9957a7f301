"""
Settings Schema

The settings singleton as exchanged over the API.
"""

from pydantic import Field

from .base import InputModel
from constants import COLOR_PATTERN, TIME_PATTERN, DEFAULT_SETTINGS


class SettingsSchema(InputModel):
    """Toggles and theme are required; reminder times and days fall back to defaults."""
    weekly_planning_notification: bool
    daily_recipe_notification: bool
    shopping_list_notification: bool
    dark_mode: bool
    primary_color: str = Field(pattern=COLOR_PATTERN)
    weekly_planning_time: str = Field(default=DEFAULT_SETTINGS['weekly_planning_time'], pattern=TIME_PATTERN)
    daily_recipe_time: str = Field(default=DEFAULT_SETTINGS['daily_recipe_time'], pattern=TIME_PATTERN)
    shopping_list_time: str = Field(default=DEFAULT_SETTINGS['shopping_list_time'], pattern=TIME_PATTERN)
    weekly_planning_day: int = Field(default=DEFAULT_SETTINGS['weekly_planning_day'], ge=0, le=6)
    shopping_list_day: int = Field(default=DEFAULT_SETTINGS['shopping_list_day'], ge=0, le=6)

    @classmethod
    def defaults(cls):
        return cls(**DEFAULT_SETTINGS)

    @classmethod
    def from_model(cls, row):
        return cls(**{name: getattr(row, name) for name in cls.model_fields})

    def to_columns(self):
        """Column values for the settings table."""
        return self.model_dump()
