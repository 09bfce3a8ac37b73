"""Shared validation utilities"""

import re
from datetime import datetime, timezone
from typing import Optional

from ..constants import BD_PHONE_PATTERN


def validate_bd_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a Bangladesh mobile number to +8801XXXXXXXXX.

    Args:
        phone: Phone number, with or without the +88 country prefix

    Returns:
        Normalized phone number

    Raises:
        ValueError: If phone number is not a Bangladesh mobile number
    """
    if not phone:
        return phone

    # Drop spaces, dashes and parentheses
    compact = re.sub(r"[\s\-()]", "", phone)

    # Local format 01XXXXXXXXX
    if compact.startswith("01") and len(compact) == 11:
        compact = f"+88{compact}"
    elif compact.startswith("8801") and len(compact) == 13:
        compact = f"+{compact}"

    if not re.match(BD_PHONE_PATTERN, compact):
        raise ValueError("Phone number must be a Bangladesh mobile number (+8801XXXXXXXXX)")

    return compact


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store every timestamp as naive UTC"""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
