"""
Image Validation and Processing Module

Validates uploaded recipe photos and re-encodes them through Pillow so only
a clean JPEG ever lands in the upload folder.
"""

import os
from io import BytesIO

from PIL import Image

from constants import ALLOWED_EXTENSIONS


class ImageValidationError(Exception):
    """Raised when an image fails validation."""
    pass


# Allowed image formats (PIL format names)
ALLOWED_FORMATS = {'JPEG', 'PNG', 'GIF', 'WEBP'}

# Maximum image dimensions (prevent decompression bombs)
MAX_WIDTH = 4096
MAX_HEIGHT = 4096

# Maximum file size (10MB)
MAX_FILE_SIZE = 10 * 1024 * 1024


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def _read_limited(image_data):
    if isinstance(image_data, bytes):
        content = image_data
    else:
        image_data.seek(0)
        content = image_data.read()
    if len(content) > MAX_FILE_SIZE:
        raise ImageValidationError(f"Image too large: {len(content)} bytes (max {MAX_FILE_SIZE})")
    return BytesIO(content)


def validate_and_process_image(image_data, output_path, max_width=2048, max_height=2048):
    """
    Validate and re-encode an image as JPEG.

    Args:
        image_data: Raw image bytes or file-like object
        output_path: Path where the processed image will be saved; the
            extension is replaced by .jpg
        max_width: Maximum width to resize to (default 2048)
        max_height: Maximum height to resize to (default 2048)

    Returns:
        str: The final output path

    Raises:
        ImageValidationError: If the image is invalid or potentially malicious
    """
    image_buffer = _read_limited(image_data)

    try:
        img = Image.open(image_buffer)
        # verify() leaves the file unusable, so reopen afterwards
        img.verify()
        image_buffer.seek(0)
        img = Image.open(image_buffer)

        if img.format not in ALLOWED_FORMATS:
            raise ImageValidationError(
                f"Invalid image format: {img.format}. "
                f"Allowed formats: {', '.join(sorted(ALLOWED_FORMATS))}"
            )

        width, height = img.size
        if width > MAX_WIDTH or height > MAX_HEIGHT:
            raise ImageValidationError(
                f"Image dimensions too large: {width}x{height}. "
                f"Maximum: {MAX_WIDTH}x{MAX_HEIGHT}"
            )

        if width > max_width or height > max_height:
            img.thumbnail((max_width, max_height), Image.Resampling.LANCZOS)

        # JPEG has no alpha channel; flatten onto white
        if img.mode in ('RGBA', 'LA', 'P'):
            background = Image.new('RGB', img.size, (255, 255, 255))
            if img.mode == 'P':
                img = img.convert('RGBA')
            background.paste(img, mask=img.split()[-1] if img.mode in ('RGBA', 'LA') else None)
            img = background
        elif img.mode != 'RGB':
            img = img.convert('RGB')

        output_path = os.path.splitext(output_path)[0] + '.jpg'
        img.save(output_path, 'JPEG', quality=85, optimize=True)
        return output_path

    except ImageValidationError:
        raise
    except Image.DecompressionBombError:
        raise ImageValidationError("Image appears to be a decompression bomb (too large when decoded)")
    except (OSError, ValueError, SyntaxError) as e:
        raise ImageValidationError(f"Invalid or corrupted image: {e}")


def recipe_image_name(recipe_id):
    """File name under which a recipe's uploaded photo is stored."""
    return f"recipe_{recipe_id}.jpg"


def save_recipe_image(file_storage, upload_folder, recipe_id):
    """
    Store an uploaded photo for a recipe.

    Args:
        file_storage: werkzeug FileStorage from request.files
        upload_folder: Directory the image is written to
        recipe_id: Used to name the file

    Returns:
        str: File name of the stored image (relative to upload_folder)
    """
    if not file_storage or not file_storage.filename:
        raise ImageValidationError("No image selected")
    if not allowed_file(file_storage.filename):
        raise ImageValidationError("Invalid file type. Use PNG, JPG, GIF, or WEBP.")

    os.makedirs(upload_folder, exist_ok=True)
    final_path = validate_and_process_image(file_storage.stream, os.path.join(upload_folder, recipe_image_name(recipe_id)))
    return os.path.basename(final_path)
