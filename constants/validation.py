"""
Validation Constants

Field limits and patterns used when validating user input at the API
boundary.
"""

# Maximum field lengths
MAX_LENGTHS = {
    'recipe_name': 200,
    'instructions': 50000,
    'ingredient_name': 200,
    'unit': 20,
    'tag_name': 50,
    'image': 500,
    'day': 20,
}

# Largest amount accepted for a single ingredient line
MAX_AMOUNT = 100000

# "#22c55e"
COLOR_PATTERN = r'^#[0-9a-fA-F]{6}$'

# "18:30"
TIME_PATTERN = r'^([01]\d|2[0-3]):[0-5]\d$'

# Allowed image extensions
ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
