"""Naming utilities for generated Go identifiers."""

from __future__ import annotations

import string
from functools import lru_cache

# Output formats accepted by format_name
CAMEL_CASE = "c"
ORIGINAL = "o"
OUTPUT_FORMATS: tuple[str, ...] = (CAMEL_CASE, ORIGINAL)

_TO_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


@lru_cache(maxsize=1024)
def title_case(value: str) -> str:
    """Upper-case the first letter of ``value`` and leave the rest untouched.

    Underscores are kept, so ``user_id`` becomes ``User_id``. Only ASCII
    letters are case-folded.

    Examples:
        >>> title_case("user_id")
        'User_id'
        >>> title_case("ID")
        'ID'
    """
    if not value:
        return value
    head = value[0]
    if head in string.ascii_lowercase:
        head = head.upper()
    return head + value[1:]


@lru_cache(maxsize=1024)
def camel_case(value: str) -> str:
    """Convert an underscore separated name to CamelCase.

    A name without underscores is only title-cased, so an existing
    ``UserID`` keeps its inner capitals. Otherwise every segment is
    lower-cased and title-cased before joining.

    Examples:
        >>> camel_case("user_id")
        'UserId'
        >>> camel_case("USER_ID")
        'UserId'
        >>> camel_case("userID")
        'UserID'
    """
    parts = value.split("_")
    if len(parts) == 1:
        return title_case(value)
    return "".join(title_case(part.translate(_TO_LOWER)) for part in parts)


def format_name(value: str, output_format: str) -> str:
    """Apply the configured naming convention to a column or struct name."""
    name = title_case(value)
    if output_format == CAMEL_CASE:
        name = camel_case(name)
    return name
