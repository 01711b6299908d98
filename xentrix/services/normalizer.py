"""
Value normalization for raw call-center records.

Converts heterogeneous raw field values (spreadsheet exports, hand-typed CSVs,
JSON from upstream cleansing) into canonical scalars:

- number: finite float, or None
- duration: seconds as float, accepting mm:ss and hh:mm:ss, or None
- date: ISO calendar date string YYYY-MM-DD, or None
- string: non-empty trimmed string, or None
- bool: True / False for boolean-like flags, or None

None always means "absent or unparseable". Every function here is pure, total
(never raises) and idempotent: normalizing an already-normalized value returns
an identical value.

Negative numbers are kept; rejecting negative handle times is a metric-level
decision (see xentrix.services.metrics.compute_aht).
"""

import math
import re
from datetime import date, datetime
from typing import Any, Optional, Union

import pandas as pd

from xentrix.models.enums import NormalizeKind


NormalizedValue = Union[float, str, bool, None]

# Compared case-insensitively after trimming
NULL_LIKE_TOKENS = frozenset({"", "null", "n/a", "na"})

# Full-width digits U+FF10..U+FF19 -> ASCII
_FULL_WIDTH_DIGITS = str.maketrans("０１２３４５６７８９", "0123456789")

# Longest suffix first so "seconds" is not left as "econd"
_UNIT_PATTERN = re.compile(r"seconds?|sec|s", re.IGNORECASE)

# Leading float literal, the way a lenient spreadsheet parser reads "12.5 pts"
_LEADING_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_ISO_DATE_PREFIX = re.compile(r"^(\d{4})[-/](\d{1,2})[-/](\d{1,2})")

TRUE_TOKENS = frozenset({"true", "t", "yes", "y", "1", "within", "met"})
FALSE_TOKENS = frozenset({"false", "f", "no", "n", "0", "out", "miss"})


def is_null_like(value: Any) -> bool:
    """Return True for None and for null-like string tokens (NULL, N/A, na, blank)."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str):
        return value.strip().lower() in NULL_LIKE_TOKENS
    return False


def to_half_width_digits(text: str) -> str:
    """Convert full-width digits to their ASCII equivalents."""
    return text.translate(_FULL_WIDTH_DIGITS)


def _finite_or_none(number: float) -> Optional[float]:
    return number if math.isfinite(number) else None


def normalize_number(value: Any) -> Optional[float]:
    """
    Normalize a value to a finite float.

    Strips '%', second suffixes ('sec', 'seconds', 's') and thousands
    separators before parsing the leading float literal.

    Example:
        >>> normalize_number("85%")
        85.0
        >>> normalize_number("１,２００ sec")
        1200.0
        >>> normalize_number("N/A") is None
        True
    """
    if is_null_like(value):
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _finite_or_none(float(value))

    try:
        text = to_half_width_digits(str(value).strip())
    except Exception:
        # str() of arbitrary user objects may raise
        return None

    cleaned = text.replace("%", "")
    cleaned = _UNIT_PATTERN.sub("", cleaned)
    cleaned = cleaned.replace(",", "").strip()

    match = _LEADING_FLOAT.match(cleaned)
    if not match:
        return None
    try:
        return _finite_or_none(float(match.group(0)))
    except (ValueError, OverflowError):
        return None


def normalize_duration(value: Any) -> Optional[float]:
    """
    Normalize a handle time to seconds.

    Strings containing ':' are read as mm:ss or hh:mm:ss; any empty or
    non-numeric component makes the whole value None. Everything else is
    parsed as a number.

    Example:
        >>> normalize_duration("05:30")
        330.0
        >>> normalize_duration("1:02:03")
        3723.0
        >>> normalize_duration("5:xx") is None
        True
    """
    if is_null_like(value):
        return None
    if isinstance(value, str) and ":" in value:
        parts = [to_half_width_digits(p.strip()) for p in value.strip().split(":")]
        if len(parts) not in (2, 3):
            return None
        numbers = []
        for part in parts:
            if not part:
                return None
            try:
                numbers.append(float(part))
            except ValueError:
                return None
        if len(numbers) == 2:
            minutes, seconds = numbers
            total = minutes * 60 + seconds
        else:
            hours, minutes, seconds = numbers
            total = hours * 3600 + minutes * 60 + seconds
        return _finite_or_none(total)
    return normalize_number(value)


def normalize_date(value: Any) -> Optional[str]:
    """
    Normalize a date to an ISO YYYY-MM-DD string.

    A leading YYYY-M-D (or YYYY/M/D) prefix is zero-padded and returned as-is,
    so timestamps like '2024-3-7T10:15:00' keep their calendar date. Other
    inputs go through pandas' generic date parser.

    Example:
        >>> normalize_date("2024/3/7 10:15")
        '2024-03-07'
        >>> normalize_date("Mar 7, 2024")
        '2024-03-07'
    """
    if is_null_like(value):
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    text = to_half_width_digits(str(value).strip())
    match = _ISO_DATE_PREFIX.match(text)
    if match:
        yyyy, mm, dd = match.groups()
        return f"{yyyy}-{int(mm):02d}-{int(dd):02d}"

    try:
        parsed = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed is None or pd.isna(parsed):
        return None
    return parsed.strftime("%Y-%m-%d")


def normalize_string(value: Any) -> Optional[str]:
    """Normalize a value to a non-empty trimmed string."""
    if is_null_like(value):
        return None
    text = str(value).strip()
    return text or None


def normalize_bool(value: Any) -> Optional[bool]:
    """
    Normalize a boolean-like flag.

    Accepts true/t/yes/y/1/within/met and false/f/no/n/0/out/miss
    (case-insensitive); anything else is None.
    """
    if isinstance(value, bool):
        return value
    if is_null_like(value):
        return None
    if isinstance(value, (int, float)):
        if value == 1:
            return True
        if value == 0:
            return False
        return None

    token = str(value).strip().lower()
    if token in TRUE_TOKENS:
        return True
    if token in FALSE_TOKENS:
        return False
    return None


_NORMALIZERS = {
    NormalizeKind.NUMBER: normalize_number,
    NormalizeKind.DURATION: normalize_duration,
    NormalizeKind.DATE: normalize_date,
    NormalizeKind.STRING: normalize_string,
    NormalizeKind.BOOL: normalize_bool,
}


def normalize(value: Any, kind: Union[NormalizeKind, str]) -> NormalizedValue:
    """
    Normalize a raw field value into its canonical scalar form.

    Args:
        value: Raw value as found in the input row.
        kind: Target form (NormalizeKind or its string value).

    Returns:
        The normalized scalar, or None when the value is absent or unparseable.

    Raises:
        ValueError: If kind is not a known NormalizeKind. This is a programming
            error, not a data error.
    """
    return _NORMALIZERS[NormalizeKind(kind)](value)
