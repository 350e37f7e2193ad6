"""
Input Normalization Utilities
=============================

All parsing of external inputs (query strings, CLI options, store text
columns) happens here. The engine below this layer only ever sees typed
values: numbers as int/float, dates as datetime.date.

Usage:
    from utils.normalize import to_float, to_date, ValidationError

    try:
        min_price = to_float(request.args.get("minPrice"), field="minPrice")
        from_date = to_date(request.args.get("fromDate"), field="fromDate")
    except ValidationError as e:
        return validation_error_response(e)
"""

import calendar
from datetime import date, datetime
from typing import Iterable, Optional, Union


class ValidationError(ValueError):
    """Raised when input cannot be normalized to expected type."""

    def __init__(self, message: str, field: str = None, received_value=None):
        super().__init__(message)
        self.field = field
        self.received_value = received_value


def to_int(
    value: Optional[str],
    *,
    default: Optional[int] = None,
    minimum: Optional[int] = None,
    field: str = None
) -> Optional[int]:
    """
    Convert string to int, with explicit None handling.

    Raises:
        ValidationError: If value is not an integer or is below `minimum`
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ValidationError(
            f"Expected int, got bool: {value!r}",
            field=field,
            received_value=value
        )
    try:
        result = int(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"Expected int, got {type(value).__name__}: {value!r}",
            field=field,
            received_value=value
        )
    if minimum is not None and result < minimum:
        raise ValidationError(
            f"Expected int >= {minimum}, got: {result}",
            field=field,
            received_value=value
        )
    return result


def to_float(
    value: Optional[str],
    *,
    default: Optional[float] = None,
    field: str = None
) -> Optional[float]:
    """
    Convert string to float. Non-numeric price/size bounds fail here, before
    they can reach the query builder.
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ValidationError(
            f"Expected number, got bool: {value!r}",
            field=field,
            received_value=value
        )
    try:
        result = float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"Expected number, got {type(value).__name__}: {value!r}",
            field=field,
            received_value=value
        )
    if result != result or result in (float('inf'), float('-inf')):
        raise ValidationError(
            f"Expected finite number, got: {value!r}",
            field=field,
            received_value=value
        )
    return result


def to_bool(
    value: Optional[str],
    *,
    default: bool = False,
    field: str = None
) -> bool:
    """
    Convert string to bool.

    Accepts (case-insensitive) 'true', '1', 'yes', 'on' and
    'false', '0', 'no', 'off'.
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    lower = str(value).lower()
    if lower in ("true", "1", "yes", "on"):
        return True
    if lower in ("false", "0", "no", "off"):
        return False
    raise ValidationError(
        f"Expected bool, got: {value!r}",
        field=field,
        received_value=value
    )


def _parse_date_text(value: str, month_end: bool = False) -> date:
    text = value.strip()
    # Full timestamps from the import ("2024-03-01 00:00:00")
    if len(text) > 10 and text[10] in (' ', 'T'):
        text = text[:10]
    if len(text) == 10 and text[2] == '-' and text[5] == '-':
        return datetime.strptime(text, "%d-%m-%Y").date()
    if len(text) == 7:
        month = datetime.strptime(text, "%Y-%m").date()
        if month_end:
            return month.replace(day=calendar.monthrange(month.year, month.month)[1])
        return month
    return datetime.strptime(text, "%Y-%m-%d").date()


def to_date(
    value: Optional[Union[str, date]],
    *,
    default: Optional[date] = None,
    field: str = None,
    month_end: bool = False
) -> Optional[date]:
    """
    Convert string to date object.

    Accepts formats:
        - YYYY-MM-DD (full date)
        - YYYY-MM (first of month, or last day with month_end=True
          so an inclusive upper bound covers the whole month)
        - DD-MM-YYYY (DLD export format)
        - Already a date/datetime object (passthrough)

    Raises:
        ValidationError: If value cannot be parsed as date
    """
    if value is None or value == "":
        return default
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return _parse_date_text(value, month_end)
    except (ValueError, TypeError, IndexError):
        raise ValidationError(
            f"Expected date (YYYY-MM-DD), got {type(value).__name__}: {value!r}",
            field=field,
            received_value=value
        )


def to_str(
    value: Optional[str],
    *,
    default: Optional[str] = None,
    strip: bool = True,
    field: str = None
) -> Optional[str]:
    """Normalize string input; whitespace-only counts as empty."""
    if value is None or value == "":
        return default
    result = str(value)
    if strip:
        result = result.strip()
    if result == "":
        return default
    return result


def to_choice(
    value: Optional[str],
    choices: Iterable[str],
    *,
    default: Optional[str] = None,
    case_insensitive: bool = True,
    field: str = None
) -> Optional[str]:
    """
    Match value against a closed set of allowed strings.

    Returns the canonical spelling from `choices`.
    """
    if value is None or value == "":
        return default
    allowed = list(choices)
    raw = str(value).strip()
    for choice in allowed:
        if choice == raw or (case_insensitive and choice.lower() == raw.lower()):
            return choice
    raise ValidationError(
        f"Expected one of {allowed}, got: {value!r}",
        field=field,
        received_value=value
    )


def validation_error_response(error: ValidationError) -> tuple:
    """
    Convert ValidationError to a structured 400 response tuple.

    Returns:
        Tuple of (dict, 400) suitable for Flask response
    """
    response = {
        "error": str(error),
        "type": "validation_error"
    }
    if error.field:
        response["field"] = error.field
    if error.received_value is not None:
        response["received_value"] = str(error.received_value)
    return response, 400


# ============================================================================
# STORE BOUNDARY COERCION
# ============================================================================

def parse_instance_date(value) -> Optional[date]:
    """
    Parse a stored instance_date into a date.

    The DLD import has written both ISO (YYYY-MM-DD) and export-style
    (DD-MM-YYYY) values, sometimes with a time suffix. Unparseable values
    come back as None rather than failing the whole page.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return _parse_date_text(str(value))
    except (ValueError, IndexError):
        return None
