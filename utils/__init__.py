# Utility modules for the meal planner
from .image_handler import (
    validate_and_process_image, save_recipe_image, recipe_image_name, allowed_file, ImageValidationError,
)
from .sanitizer import sanitize_text, sanitize_instructions, sanitize_url
