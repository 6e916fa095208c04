"""
Validators
==========

Common validation utilities.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from lifeos.core.errors import ValidationError

USERNAME_PATTERN = re.compile(r"^[a-z0-9_]+$")
USERNAME_MIN_LENGTH = 3

# Largest value a NUMERIC(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")


def validate_username(username: Optional[str], is_public: bool) -> Optional[str]:
    """
    Validate a public profile username.

    The username is lowercased before checking. A username is only
    mandatory when the profile is public; an empty value on a private
    profile is stored as None.

    Raises:
        ValidationError: with ``field="username"``
    """
    cleaned = (username or "").strip().lower()

    if not cleaned:
        if is_public:
            raise ValidationError(
                message="Username is required for public profiles",
                field="username",
            )
        return None

    if len(cleaned) < USERNAME_MIN_LENGTH:
        raise ValidationError(
            message="Username must be at least 3 characters",
            field="username",
        )

    if not USERNAME_PATTERN.match(cleaned):
        raise ValidationError(
            message="Only lowercase letters, numbers, and underscores allowed",
            field="username",
        )

    return cleaned


def parse_amount(raw: object) -> Decimal:
    """
    Parse a user-entered amount ("12.50", 12.5) into a 2dp Decimal.

    Raises:
        ValidationError: if the value is not a finite number in
            (0, MAX_AMOUNT]
    """
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(message="Please enter a valid amount", field="amount")

    if not value.is_finite():
        raise ValidationError(message="Please enter a valid amount", field="amount")

    try:
        value = value.quantize(Decimal("0.01"))
    except InvalidOperation:
        # More digits than the context precision allows
        raise ValidationError(message="Amount is too large", field="amount")

    if value <= 0:
        raise ValidationError(message="Please enter a valid amount", field="amount")

    if value > MAX_AMOUNT:
        raise ValidationError(message="Amount is too large", field="amount")

    return value


def validate_title(title: Optional[str], field: str = "title") -> str:
    """Trim a title and reject blank values."""
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError(message=f"{field.capitalize()} is required", field=field)
    return cleaned

