import html
import re
from typing import Optional


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a string by escaping HTML special characters to prevent XSS.
    Returns None if input is None.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    return html.escape(str(value), quote=True)


def validate_and_sanitize_input(value: Optional[str], max_length: int = 500) -> str:
    """
    Validate free-text user input and strip control characters.

    The text is stored as entered; escape it with sanitize_string when it is
    rendered into HTML.

    Args:
        value: Input string to validate
        max_length: Maximum allowed length

    Returns:
        Sanitized string

    Raises:
        ValueError: If input is invalid
    """
    if not value:
        return ""

    value = str(value).strip()

    if len(value) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    value = re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]", "", value)

    return value


def slugify(value: str) -> str:
    """Lowercase a name and join its words with hyphens: 'City  Hospital' -> 'city-hospital'"""
    slug = re.sub(r"[^a-z0-9]+", "-", value.strip().lower())
    return slug.strip("-")
