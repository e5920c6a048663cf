"""Predicate library: pure checks over a single value.

Every predicate is total over None: an absent value returns False, except
for the presence checks (``is_null``, ``is_empty``) where absence is what is
being asked about. Comparing values of incompatible types is left to raise,
since that points at a broken rule rather than bad data.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Container, Sized
from datetime import date, datetime
from decimal import Decimal
from numbers import Real
from re import Pattern as RegexPattern
from typing import Any
from urllib.parse import urlsplit

EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")
ALPHANUMERIC_PATTERN = re.compile(r"[a-zA-Z0-9_]+")
NUMERIC_PATTERN = re.compile(r"[0-9]+")
ALPHA_PATTERN = re.compile(r"[a-zA-ZáéíóúÁÉÍÓÚñÑ\s]+")

URL_SCHEMES = frozenset({"http", "https"})


def _text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def is_null(value: Any) -> bool:
    return value is None


def is_not_null(value: Any) -> bool:
    return value is not None


def is_empty(value: Any) -> bool:
    """None, blank strings and zero-element collections are empty."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def is_not_empty(value: Any) -> bool:
    return value is not None and not is_empty(value)


def _length(value: Any) -> int:
    if isinstance(value, Sized):
        return len(value)
    return len(str(value))


def has_min_length(value: Any, length: int) -> bool:
    return value is not None and _length(value) >= length


def has_max_length(value: Any, length: int) -> bool:
    return value is not None and _length(value) <= length


def matches(value: Any, pattern: str | RegexPattern) -> bool:
    """True if ``pattern`` is found anywhere in the value's text."""
    if value is None:
        return False
    return re.search(pattern, _text(value)) is not None


def starts_with(value: Any, prefix: str) -> bool:
    return value is not None and _text(value).startswith(prefix)


def ends_with(value: Any, suffix: str) -> bool:
    return value is not None and _text(value).endswith(suffix)


def contains(value: Any, substring: str, case_sensitive: bool = False) -> bool:
    """Substring containment, case-insensitive unless asked otherwise."""
    if value is None:
        return False
    text = _text(value)
    if case_sensitive:
        return substring in text
    return substring.casefold() in text.casefold()


def equals(value: Any, other: Any) -> bool:
    return value == other


def greater_than(value: Any, threshold: Any) -> bool:
    return value is not None and value > threshold


def less_than(value: Any, threshold: Any) -> bool:
    return value is not None and value < threshold


def between(value: Any, minimum: Any, maximum: Any) -> bool:
    """Inclusive range check."""
    return value is not None and minimum <= value <= maximum


def is_number(value: Any) -> bool:
    """Real numbers and Decimals count; bools do not."""
    return isinstance(value, (Real, Decimal)) and not isinstance(value, bool)


def is_positive(value: Any) -> bool:
    """Strictly greater than zero."""
    return is_number(value) and value > 0


def is_negative(value: Any) -> bool:
    return is_number(value) and value < 0


def is_not_zero(value: Any) -> bool:
    return is_number(value) and value != 0


def _align(value: date, now: datetime) -> tuple[Any, Any]:
    """Bring ``value`` and ``now`` to comparable forms.

    Plain dates compare against today's date. Naive and aware datetimes are
    reconciled through the local time zone.
    """
    if not isinstance(value, datetime):
        return value, now.date()
    if value.tzinfo is not None and now.tzinfo is None:
        return value, now.astimezone()
    if value.tzinfo is None and now.tzinfo is not None:
        return value, now.astimezone().replace(tzinfo=None)
    return value, now


def is_future(value: Any, now: datetime) -> bool:
    if not isinstance(value, date):
        return False
    value, now = _align(value, now)
    return value > now


def is_past(value: Any, now: datetime) -> bool:
    if not isinstance(value, date):
        return False
    value, now = _align(value, now)
    return value < now


def is_today(value: Any, now: datetime) -> bool:
    if not isinstance(value, date):
        return False
    if isinstance(value, datetime):
        value, now = _align(value, now)
        if value.tzinfo is not None:
            value = value.astimezone(now.tzinfo)
        return value.date() == now.date()
    return value == now.date()


def is_in(value: Any, allowed: Container[Any]) -> bool:
    return value in allowed


def has_count(value: Any, count: int) -> bool:
    return isinstance(value, Sized) and len(value) == count


def is_non_empty_collection(value: Any) -> bool:
    return isinstance(value, Collection) and len(value) > 0


def _shape(value: Any, pattern: RegexPattern) -> bool:
    if value is None:
        return False
    text = _text(value)
    return bool(text.strip()) and pattern.fullmatch(text) is not None


def is_alpha(value: Any) -> bool:
    """Letters (including accented Spanish vowels and ñ) and whitespace."""
    return _shape(value, ALPHA_PATTERN)


def is_alphanumeric(value: Any) -> bool:
    """ASCII letters, digits and underscore."""
    return _shape(value, ALPHANUMERIC_PATTERN)


def is_numeric(value: Any) -> bool:
    """ASCII digits only."""
    return _shape(value, NUMERIC_PATTERN)


def is_email(value: Any) -> bool:
    return _shape(value, EMAIL_PATTERN)


def is_url(value: Any) -> bool:
    """Absolute http(s) URL with a host."""
    if value is None:
        return False
    text = _text(value)
    if not text or any(c.isspace() for c in text):
        return False
    try:
        parts = urlsplit(text)
        parts.port  # raises on a malformed port
    except ValueError:
        return False
    return parts.scheme.lower() in URL_SCHEMES and bool(parts.hostname)
