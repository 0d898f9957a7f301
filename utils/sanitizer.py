"""
Input Sanitization Module

Normalizes free text coming in through the API before it is stored:
strips control characters, trims whitespace and enforces length limits.
Text is stored as entered otherwise; escaping is left to whoever renders it.
"""

import re
from urllib.parse import urlparse

_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]')
_ENCODED_SCHEME = re.compile(r'^[^/?#]*%3a', re.IGNORECASE)


def sanitize_text(text, max_length=10000):
    """
    Clean a single-line text value.

    Args:
        text: The text to sanitize (can be None)
        max_length: Maximum allowed length (default 10000)

    Returns:
        Cleaned string, truncated if necessary
    """
    if text is None:
        return ''

    if not isinstance(text, str):
        text = str(text)

    # Remove control characters and null bytes, including newlines
    text = re.sub(r'[\x00-\x1f\x7f-\x9f]', '', text)

    # Collapse multiple spaces
    text = re.sub(r'\s+', ' ', text).strip()

    return text[:max_length]


def sanitize_instructions(instructions, max_length=50000):
    """
    Clean recipe instructions.

    Preserves newlines and tabs for formatting.
    """
    if not instructions:
        return ''

    if not isinstance(instructions, str):
        instructions = str(instructions)

    instructions = _CONTROL_CHARS.sub('', instructions.replace('\r\n', '\n')).strip()

    return instructions[:max_length]


def sanitize_url(url):
    """
    Sanitize an image reference.

    Relative references (uploaded file names) and http(s) URLs pass;
    javascript:, data: and other schemes are rejected.

    Returns:
        The reference if safe, empty string if unsafe or invalid
    """
    if not url or not isinstance(url, str):
        return ''

    url = url.strip()

    try:
        scheme = urlparse(url).scheme.lower()
    except ValueError:
        return ''

    if scheme not in ('http', 'https', ''):
        return ''

    if re.search(r'(javascript|vbscript|data)\s*:', url, re.IGNORECASE):
        return ''

    # Percent-encoded colon ahead of the first path separator hides a scheme
    if _ENCODED_SCHEME.match(url):
        return ''

    return url
