"""
Default Values

Defaults for the settings singleton, tags and calendar labels.
"""

# Fixed primary key of the settings row
SETTINGS_ID = 1

DEFAULT_PRIMARY_COLOR = '#22c55e'
DEFAULT_TAG_COLOR = DEFAULT_PRIMARY_COLOR

# Column values for a freshly created settings row.
# Days use 0 = Sunday ... 6 = Saturday.
DEFAULT_SETTINGS = {
    'weekly_planning_notification': False,
    'daily_recipe_notification': False,
    'shopping_list_notification': False,
    'dark_mode': False,
    'primary_color': DEFAULT_PRIMARY_COLOR,
    'weekly_planning_time': '18:00',
    'daily_recipe_time': '09:00',
    'shopping_list_time': '10:00',
    'weekly_planning_day': 0,
    'shopping_list_day': 6,
}

# Day labels for meals, indexed by date.weekday() (Monday = 0)
WEEKDAY_LABELS = ['Montag', 'Dienstag', 'Mittwoch', 'Donnerstag', 'Freitag', 'Samstag', 'Sonntag']
