"""
Unit tests for utils/normalize.py

Tests input normalization functions to ensure:
- Correct type conversion
- Proper None/empty string handling
- Both DLD date formats are accepted
- Clear ValidationError messages
"""

import pytest
from datetime import date, datetime

from utils.normalize import (
    ValidationError,
    parse_instance_date,
    to_bool,
    to_choice,
    to_date,
    to_float,
    to_int,
    to_str,
    validation_error_response,
)


class TestToInt:
    """Tests for to_int()"""

    def test_valid_int_string(self):
        assert to_int("123") == 123
        assert to_int("-456") == -456
        assert to_int("0") == 0

    def test_none_and_empty(self):
        assert to_int(None) is None
        assert to_int("") is None
        assert to_int(None, default=20) == 20

    def test_invalid_string_raises(self):
        with pytest.raises(ValidationError) as exc:
            to_int("abc", field="limit")
        assert "Expected int" in str(exc.value)
        assert exc.value.field == "limit"
        assert exc.value.received_value == "abc"

    def test_bool_rejected(self):
        with pytest.raises(ValidationError):
            to_int(True)

    def test_minimum(self):
        assert to_int("0", minimum=0) == 0
        with pytest.raises(ValidationError) as exc:
            to_int("-1", minimum=0, field="offset")
        assert ">= 0" in str(exc.value)


class TestToFloat:
    """Tests for to_float()"""

    def test_valid(self):
        assert to_float("1500000") == 1500000.0
        assert to_float("92.9") == 92.9
        assert to_float(3) == 3.0

    def test_none_returns_default(self):
        assert to_float(None) is None
        assert to_float("", default=1.5) == 1.5

    def test_non_numeric_raises(self):
        with pytest.raises(ValidationError) as exc:
            to_float("cheap", field="maxPrice")
        assert exc.value.field == "maxPrice"

    @pytest.mark.parametrize("raw", ["nan", "inf", "-inf"])
    def test_non_finite_raises(self, raw):
        with pytest.raises(ValidationError):
            to_float(raw)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError):
            to_float(False)


class TestToBool:

    @pytest.mark.parametrize("raw", ["true", "TRUE", "1", "yes", "on"])
    def test_truthy(self, raw):
        assert to_bool(raw) is True

    @pytest.mark.parametrize("raw", ["false", "0", "no", "off"])
    def test_falsy(self, raw):
        assert to_bool(raw) is False

    def test_default(self):
        assert to_bool(None) is False
        assert to_bool("", default=True) is True

    def test_invalid(self):
        with pytest.raises(ValidationError):
            to_bool("maybe")


class TestToDate:
    """Tests for to_date()"""

    def test_iso(self):
        assert to_date("2024-03-15") == date(2024, 3, 15)

    def test_year_month_is_first_of_month(self):
        assert to_date("2024-03") == date(2024, 3, 1)

    @pytest.mark.parametrize("raw,expected", [
        ("2024-03", date(2024, 3, 31)),
        ("2024-02", date(2024, 2, 29)),
        ("2023-02", date(2023, 2, 28)),
        ("2024-12", date(2024, 12, 31)),
    ])
    def test_year_month_as_month_end(self, raw, expected):
        assert to_date(raw, month_end=True) == expected

    def test_month_end_leaves_full_dates_alone(self):
        assert to_date("2024-03-15", month_end=True) == date(2024, 3, 15)
        assert to_date("15-06-2021", month_end=True) == date(2021, 6, 15)

    def test_dld_export_format(self):
        assert to_date("15-06-2021") == date(2021, 6, 15)

    def test_time_suffix_dropped(self):
        assert to_date("2024-03-01 00:00:00") == date(2024, 3, 1)
        assert to_date("2024-03-01T12:30:00") == date(2024, 3, 1)

    def test_passthrough(self):
        assert to_date(date(2024, 1, 1)) == date(2024, 1, 1)
        assert to_date(datetime(2024, 1, 1, 10, 0)) == date(2024, 1, 1)

    def test_none_and_empty(self):
        assert to_date(None) is None
        assert to_date("") is None

    @pytest.mark.parametrize("raw", ["2024-13-01", "yesterday", "2024/01/01"])
    def test_invalid_raises(self, raw):
        with pytest.raises(ValidationError) as exc:
            to_date(raw, field="fromDate")
        assert exc.value.field == "fromDate"


class TestToStrAndChoice:

    def test_to_str_strips(self):
        assert to_str("  Dubai Marina  ") == "Dubai Marina"
        assert to_str("   ") is None
        assert to_str(None, default="x") == "x"

    def test_to_choice_canonical_spelling(self):
        assert to_choice("desc", ["ASC", "DESC"]) == "DESC"

    def test_to_choice_case_sensitive(self):
        with pytest.raises(ValidationError):
            to_choice("desc", ["ASC", "DESC"], case_insensitive=False)

    def test_to_choice_unknown(self):
        with pytest.raises(ValidationError) as exc:
            to_choice("sideways", ["ASC", "DESC"], field="sortOrder")
        assert "sideways" in str(exc.value)


class TestParseInstanceDate:
    """Store values never fail a page: unparseable dates become None."""

    def test_both_formats(self):
        assert parse_instance_date("2019-03-10") == date(2019, 3, 10)
        assert parse_instance_date("10-03-2019") == date(2019, 3, 10)

    def test_garbage_is_none(self):
        assert parse_instance_date("not a date") is None
        assert parse_instance_date("") is None
        assert parse_instance_date(None) is None


def test_validation_error_response():
    body, status = validation_error_response(
        ValidationError("Expected number", field="minPrice", received_value="abc")
    )
    assert status == 400
    assert body["field"] == "minPrice"
    assert body["received_value"] == "abc"
    assert body["type"] == "validation_error"
