"""
Pytest test module for value normalization.

Covers:
- Null-like tokens (blank, NULL, N/A, na) in any case
- Full-width digit conversion
- Unit / percent / thousands-separator stripping
- mm:ss and hh:mm:ss durations
- ISO date normalization and generic date parsing
- Boolean-like SLA flags
- Totality (never raises) and idempotence
"""

import math
from datetime import date, datetime
from typing import Any

import pytest

from xentrix.models import NormalizeKind
from xentrix.services.normalizer import (
    is_null_like,
    normalize,
    normalize_bool,
    normalize_date,
    normalize_duration,
    normalize_number,
    normalize_string,
    to_half_width_digits,
)


# =============================================================================
# Null-like tokens
# =============================================================================


class TestNullLike:
    """Null-like tokens normalize to None for every kind."""

    @pytest.mark.parametrize("token", ["", "   ", "NULL", "null", "Null", "N/A", "n/a", "na", "NA", None])
    def test_null_like_tokens(self, token: Any) -> None:
        assert is_null_like(token)
        for kind in NormalizeKind:
            assert normalize(token, kind) is None, f"{token!r} as {kind.value}"

    def test_nan_is_null_like(self) -> None:
        assert is_null_like(float("nan"))
        assert normalize_number(float("nan")) is None

    def test_regular_values_are_not_null_like(self) -> None:
        assert not is_null_like("0")
        assert not is_null_like(0)
        assert not is_null_like("nan-ish")


# =============================================================================
# Numbers
# =============================================================================


class TestNormalizeNumber:
    """Numeric parsing with unit stripping."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (85, 85.0),
            (85.5, 85.5),
            ("85", 85.0),
            ("85%", 85.0),
            ("300 sec", 300.0),
            ("300 seconds", 300.0),
            ("300s", 300.0),
            ("1,200", 1200.0),
            ("  42.5  ", 42.5),
            ("-12", -12.0),
            ("３００", 300.0),
            ("１,２００ sec", 1200.0),
        ],
    )
    def test_parses(self, raw: Any, expected: float) -> None:
        assert normalize_number(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "%", "sec", float("inf"), "Infinity", True, False, [1]])
    def test_unparseable_is_none(self, raw: Any) -> None:
        assert normalize_number(raw) is None

    def test_full_width_digits(self) -> None:
        assert to_half_width_digits("０１２３４５６７８９") == "0123456789"

    def test_negative_values_survive_normalization(self) -> None:
        """Rejecting negative AHT is a metric-level decision."""
        assert normalize_number("-5") == -5.0
        assert normalize_duration(-5) == -5.0


# =============================================================================
# Durations
# =============================================================================


class TestNormalizeDuration:
    """Handle times in seconds, mm:ss or hh:mm:ss."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("05:30", 330.0),
            ("5:00", 300.0),
            ("1:02:03", 3723.0),
            ("０５:００", 300.0),
            ("420", 420.0),
            (420, 420.0),
            ("420 sec", 420.0),
        ],
    )
    def test_parses(self, raw: Any, expected: float) -> None:
        assert normalize_duration(raw) == expected

    @pytest.mark.parametrize("raw", ["12:xx", ":30", "1:2:3:4", "5:", "a:b"])
    def test_bad_components_are_none(self, raw: str) -> None:
        assert normalize_duration(raw) is None


# =============================================================================
# Dates
# =============================================================================


class TestNormalizeDate:
    """ISO YYYY-MM-DD output."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("2026-01-05", "2026-01-05"),
            ("2026-1-5", "2026-01-05"),
            ("2026/1/5", "2026-01-05"),
            ("2026-01-05T10:15:00", "2026-01-05"),
            ("2026/01/05 18:50", "2026-01-05"),
            ("Jan 5, 2026", "2026-01-05"),
            (date(2026, 1, 5), "2026-01-05"),
            (datetime(2026, 1, 5, 23, 59), "2026-01-05"),
        ],
    )
    def test_parses(self, raw: Any, expected: str) -> None:
        assert normalize_date(raw) == expected

    @pytest.mark.parametrize("raw", ["bad date", "not-a-date", True])
    def test_unparseable_is_none(self, raw: Any) -> None:
        assert normalize_date(raw) is None


# =============================================================================
# Strings and booleans
# =============================================================================


class TestNormalizeStringAndBool:
    """Trimmed strings and SLA flags."""

    def test_string_trimmed(self) -> None:
        assert normalize_string("  Akari ") == "Akari"
        assert normalize_string("   ") is None
        assert normalize_string(7) == "7"

    @pytest.mark.parametrize("raw", [True, "true", "T", "yes", "Y", "1", 1, "within", "Met"])
    def test_true_tokens(self, raw: Any) -> None:
        assert normalize_bool(raw) is True

    @pytest.mark.parametrize("raw", [False, "false", "F", "no", "N", "0", 0, "out", "MISS"])
    def test_false_tokens(self, raw: Any) -> None:
        assert normalize_bool(raw) is False

    @pytest.mark.parametrize("raw", ["maybe", 2, "", None, "N/A"])
    def test_other_tokens_are_none(self, raw: Any) -> None:
        assert normalize_bool(raw) is None


# =============================================================================
# Properties
# =============================================================================


SAMPLE_INPUTS = [
    None, "", "NULL", "n/a", "85%", "３００ sec", "1,200", 42, 42.5, -3, "abc",
    "05:30", "1:02:03", "12:xx", "2026/1/5", "2026-01-05T10:00:00", "Jan 5, 2026",
    "  Akari ", "yes", "out", True, False, 0, 1, float("nan"), float("inf"),
    date(2026, 1, 5), object(), [], {},
]


class TestNormalizeProperties:
    """Totality and idempotence over a mixed sample of inputs."""

    @pytest.mark.parametrize("kind", list(NormalizeKind))
    def test_never_raises(self, kind: NormalizeKind) -> None:
        for raw in SAMPLE_INPUTS:
            normalize(raw, kind)

    @pytest.mark.parametrize("kind", list(NormalizeKind))
    def test_idempotent(self, kind: NormalizeKind) -> None:
        for raw in SAMPLE_INPUTS:
            once = normalize(raw, kind)
            twice = normalize(once, kind)
            assert twice == once, f"{raw!r} as {kind.value}: {once!r} -> {twice!r}"

    @pytest.mark.parametrize("kind", list(NormalizeKind))
    def test_output_types(self, kind: NormalizeKind) -> None:
        for raw in SAMPLE_INPUTS:
            value = normalize(raw, kind)
            if value is None:
                continue
            if kind in (NormalizeKind.NUMBER, NormalizeKind.DURATION):
                assert isinstance(value, float) and math.isfinite(value)
            elif kind == NormalizeKind.BOOL:
                assert isinstance(value, bool)
            else:
                assert isinstance(value, str) and value == value.strip() and value

    def test_kind_accepts_string_value(self) -> None:
        assert normalize("85%", "number") == 85.0

    def test_unknown_kind_is_a_programming_error(self) -> None:
        with pytest.raises(ValueError):
            normalize("85", "percentage")
