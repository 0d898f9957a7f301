"""
Settings Model

Contains the Settings singleton row (id is always 1).
"""

from .base import db
from constants import DEFAULT_SETTINGS


class Settings(db.Model):
    """Notification toggles, reminder times and theme."""
    __tablename__ = 'settings'
    __table_args__ = (db.CheckConstraint('id = 1', name='settings_singleton'),)

    id = db.Column(db.Integer, primary_key=True, autoincrement=False)
    weekly_planning_notification = db.Column(db.Boolean, nullable=False, default=False)
    daily_recipe_notification = db.Column(db.Boolean, nullable=False, default=False)
    shopping_list_notification = db.Column(db.Boolean, nullable=False, default=False)
    dark_mode = db.Column(db.Boolean, nullable=False, default=False)
    primary_color = db.Column(db.String(7), nullable=False, default=DEFAULT_SETTINGS['primary_color'])
    weekly_planning_time = db.Column(db.String(5), nullable=False, default=DEFAULT_SETTINGS['weekly_planning_time'])
    daily_recipe_time = db.Column(db.String(5), nullable=False, default=DEFAULT_SETTINGS['daily_recipe_time'])
    shopping_list_time = db.Column(db.String(5), nullable=False, default=DEFAULT_SETTINGS['shopping_list_time'])
    weekly_planning_day = db.Column(db.Integer, nullable=False, default=DEFAULT_SETTINGS['weekly_planning_day'])
    shopping_list_day = db.Column(db.Integer, nullable=False, default=DEFAULT_SETTINGS['shopping_list_day'])
