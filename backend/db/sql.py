"""
SQL execution helper with enforced conventions.

Conventions enforced:
1. Use :name param style only (SQLAlchemy bind params)
2. Pass Python date objects for date params; they are rendered to ISO text
   here, once, to compare against SORTABLE_DATE_SQL
3. Every query over transactions applies BASE_AREA_FILTER
4. LIKE terms are built with like_pattern() so user '%' and '_' stay literal

Usage:
    from db.sql import run_sql, BASE_AREA_FILTER

    rows = run_sql(
        store,
        f'''
        SELECT area_name_en, COUNT(*)
        FROM transactions
        WHERE {BASE_AREA_FILTER}
          AND {SORTABLE_DATE_SQL} >= :date_from
        GROUP BY area_name_en
        ''',
        date_from=date(2024, 1, 1)
    )
"""
import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import text


# Regex patterns for validation
PERCENT_PARAM_PATTERN = re.compile(r'%\([a-zA-Z_][a-zA-Z0-9_]*\)s')
QMARK_PARAM_PATTERN = re.compile(r'=\s*\?')
SQLALCHEMY_PARAM_PATTERN = re.compile(r'(?<!:):([a-zA-Z_][a-zA-Z0-9_]*)')

LIKE_ESCAPE_CHAR = '\\'


class SQLParamStyleError(Exception):
    """Raised when SQL uses incorrect parameter style."""
    pass


class SQLDateParamError(Exception):
    """Raised when date parameters are not Python date/datetime objects."""
    pass


def validate_sql_text(sql: str) -> None:
    """
    Validate that SQL text uses :name param style.

    Raises SQLParamStyleError on %(name)s or positional ? placeholders.
    """
    matches = PERCENT_PARAM_PATTERN.findall(sql)
    if matches:
        raise SQLParamStyleError(
            f"SQL contains pyformat-style params: {matches}. "
            f"Use SQLAlchemy :name style instead."
        )
    if QMARK_PARAM_PATTERN.search(sql):
        raise SQLParamStyleError(
            "SQL contains positional '?' params. Use SQLAlchemy :name style instead."
        )


def _is_date_param(key: str) -> bool:
    return key.endswith('_date') or key.startswith('date_')


def validate_params(params: Dict[str, Any]) -> None:
    """
    Validate that date parameters are Python date/datetime objects.

    Raises SQLDateParamError if a date param is a string.
    """
    for key, value in params.items():
        if _is_date_param(key) and value is not None:
            if isinstance(value, str):
                raise SQLDateParamError(
                    f"Date parameter '{key}' is a string ('{value}'). "
                    f"Pass a Python date or datetime object instead."
                )
            if not isinstance(value, (date, datetime)):
                raise SQLDateParamError(
                    f"Date parameter '{key}' has type {type(value).__name__}. "
                    f"Expected date or datetime."
                )


def _bind_params(params: Dict[str, Any]) -> Dict[str, Any]:
    # instance_date is text in SQLite; dates compare as ISO strings
    bound = {}
    for key, value in params.items():
        if isinstance(value, datetime):
            bound[key] = value.date().isoformat()
        elif isinstance(value, date):
            bound[key] = value.isoformat()
        else:
            bound[key] = value
    return bound


def extract_param_names(sql: str) -> List[str]:
    """Extract :name parameter names from SQL text."""
    return SQLALCHEMY_PARAM_PATTERN.findall(sql)


def _execute(source, sql: str, validate: bool, params: Dict[str, Any]):
    if validate:
        validate_sql_text(sql)
        validate_params(params)
    return source.execute(text(sql), _bind_params(params))


def run_sql(
    source,
    sql: str,
    validate: bool = True,
    **params
) -> List[Dict[str, Any]]:
    """
    Execute SQL with validation and return rows as dicts.

    Args:
        source: TransactionStore, or anything with .execute(clause, params)
        sql: SQL text using :name param style
        validate: Whether to validate SQL and params (default True)
        **params: Named parameters to pass to the query

    Raises:
        SQLParamStyleError: If SQL uses a non-:name param style
        SQLDateParamError: If date params are strings instead of date objects
        StoreUnavailableError: If the store cannot serve the query
    """
    result = _execute(source, sql, validate, params)
    return [dict(row) for row in result.mappings().all()]


def run_sql_scalar(
    source,
    sql: str,
    validate: bool = True,
    **params
) -> Any:
    """
    Execute SQL and return a single scalar value.

    Useful for COUNT(*), MAX(), etc.
    """
    result = _execute(source, sql, validate, params)
    row = result.fetchone()
    return row[0] if row else None


def run_sql_one(
    source,
    sql: str,
    validate: bool = True,
    **params
) -> Optional[Dict[str, Any]]:
    """Execute SQL and return a single row as a dict, or None."""
    result = _execute(source, sql, validate, params)
    row = result.mappings().first()
    return dict(row) if row is not None else None


# =============================================================================
# CANONICAL PREDICATES
# =============================================================================
#
# ALL queries that touch transactions MUST start from BASE_AREA_FILTER.
# Rollups additionally use SALES_STATS_FILTER.
#
# NEVER compare instance_date directly in a range or ORDER BY; use
# SORTABLE_DATE_SQL so DD-MM-YYYY rows sort with ISO rows.
#
# =============================================================================

# Records with no area are incomplete imports
BASE_AREA_FILTER = "area_name_en IS NOT NULL AND area_name_en != ''"

SALES_STATS_FILTER = (
    f"{BASE_AREA_FILTER} AND actual_worth > 0 AND trans_group_en = 'Sales'"
)

# instance_date rewritten to YYYY-MM-DD. DD-MM-YYYY values are detected by
# the dash at position 3; anything else is assumed ISO already (a time
# suffix is dropped).
SORTABLE_DATE_SQL = (
    "(CASE WHEN substr(instance_date, 3, 1) = '-' "
    "THEN substr(instance_date, 7, 4) || '-' || substr(instance_date, 4, 2) "
    "|| '-' || substr(instance_date, 1, 2) "
    "ELSE substr(instance_date, 1, 10) END)"
)


def like_pattern(term: str) -> str:
    """
    Build a case-insensitive contains pattern for `LOWER(col) LIKE :p`.

    Wildcards in user input are escaped; pair with like_clause().
    """
    escaped = (
        term.lower()
        .replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace('%', LIKE_ESCAPE_CHAR + '%')
        .replace('_', LIKE_ESCAPE_CHAR + '_')
    )
    return f"%{escaped}%"


def like_clause(column: str, param: str) -> str:
    """SQL for a contains match of `column` against bind param `param`."""
    return f"LOWER({column}) LIKE :{param} ESCAPE '{LIKE_ESCAPE_CHAR}'"
