"""
SQL Safety Guard - Prevents silent correctness bugs in SQL queries.

Checks for:
- Queries over transactions that skip the canonical area filter
- SELECT * in production queries
- ORDER BY without a deterministic tiebreaker
- Wrong param styles and string dates reaching the driver
- User input reaching SQL text instead of bind params

Run with: pytest tests/test_sql_safety.py -v
"""

import re
from datetime import date
from pathlib import Path

import pytest

from db.sql import (
    BASE_AREA_FILTER,
    SQLDateParamError,
    SQLParamStyleError,
    extract_param_names,
    like_clause,
    like_pattern,
    run_sql,
    run_sql_scalar,
    validate_params,
    validate_sql_text,
)
from utils.filter_builder import TransactionFilters, build_order_by, build_where_clause
from utils.normalize import ValidationError


DANGEROUS_PATTERNS = [
    # Cartesian join (comma join)
    (r"FROM\s+\w+\s*,\s*\w+", "Potential cartesian join (comma join)"),

    # SELECT * (should use explicit columns)
    (r"SELECT\s+\*\s+FROM", "SELECT * found - use explicit columns"),
]

# Any of these in a file means its transaction queries go through a canonical predicate
CANONICAL_FILTERS = ("BASE_AREA_FILTER", "SALES_STATS_FILTER", "build_where_clause")

# Files to check
SERVICE_FILES = [
    "services/transaction_query.py",
    "services/property_history.py",
    "services/market_stats.py",
    "services/health.py",
]

TIEBREAKER_COLUMNS = ("transaction_id", "name", "area_name_en", "building_name_en")


def extract_sql_strings(filepath: Path) -> list[tuple[int, str]]:
    """Extract triple-quoted strings that query transactions, with line numbers."""
    content = filepath.read_text()
    sql_strings = []

    pattern = r'("""|\'\'\')(.*?)\1'
    for match in re.finditer(pattern, content, re.DOTALL):
        sql = match.group(2)
        if "FROM transactions" in sql:
            line_num = content[:match.start()].count('\n') + 1
            sql_strings.append((line_num, sql))

    return sql_strings


def check_sql_for_issues(sql: str, line_num: int, filepath: str) -> list[str]:
    issues = []
    normalized = re.sub(r'\s+', ' ', sql.upper())
    for pattern, message in DANGEROUS_PATTERNS:
        if re.search(pattern, normalized, re.IGNORECASE):
            issues.append(f"{filepath}:{line_num}: {message}")
    return issues


@pytest.fixture
def backend_root():
    return Path(__file__).parent.parent


class TestSQLSafety:
    """Static checks over service SQL."""

    def test_service_files_exist(self, backend_root):
        missing = [f for f in SERVICE_FILES if not (backend_root / f).exists()]
        assert not missing

    def test_no_dangerous_sql_patterns(self, backend_root):
        all_issues = []
        for service_file in SERVICE_FILES:
            for line_num, sql in extract_sql_strings(backend_root / service_file):
                all_issues.extend(check_sql_for_issues(sql, line_num, service_file))

        if all_issues:
            pytest.fail("SQL safety issues found:\n" + "\n".join(all_issues))

    def test_transaction_queries_use_canonical_filter(self, backend_root):
        files_missing_filter = []
        for service_file in SERVICE_FILES:
            content = (backend_root / service_file).read_text()
            if "FROM transactions" in content and not any(f in content for f in CANONICAL_FILTERS):
                files_missing_filter.append(service_file)

        if files_missing_filter:
            pytest.fail(
                "Files with transaction queries missing the area filter:\n"
                + "\n".join(f"  - {f}" for f in files_missing_filter)
            )

    def test_order_by_includes_tiebreaker(self, backend_root):
        issues = []
        for service_file in SERVICE_FILES:
            for line_num, sql in extract_sql_strings(backend_root / service_file):
                for order_clause in re.findall(
                    r"ORDER\s+BY\s+(.+?)(?:LIMIT|OFFSET|\{|$)", sql, re.IGNORECASE | re.DOTALL
                ):
                    columns = [c.strip().split()[0] for c in order_clause.split(",") if c.strip()]
                    if len(columns) < 2 and columns[0] != "transaction_id":
                        issues.append(f"{service_file}:{line_num}: ORDER BY {order_clause.strip()}")
                    elif columns[-1] not in TIEBREAKER_COLUMNS:
                        issues.append(f"{service_file}:{line_num}: ORDER BY lacks a unique tiebreaker")

        assert not issues, "\n".join(issues)


class TestParamConventions:

    def test_pyformat_rejected(self):
        with pytest.raises(SQLParamStyleError):
            validate_sql_text("SELECT 1 FROM transactions WHERE area_name_en = %(area)s")

    def test_qmark_rejected(self):
        with pytest.raises(SQLParamStyleError):
            validate_sql_text("SELECT 1 FROM transactions WHERE area_name_en = ?")

    def test_named_accepted(self):
        validate_sql_text("SELECT 1 FROM transactions WHERE area_name_en = :area")

    def test_string_date_rejected(self):
        with pytest.raises(SQLDateParamError):
            validate_params({"from_date": "2024-01-01"})

    def test_non_date_type_rejected(self):
        with pytest.raises(SQLDateParamError):
            validate_params({"date_to": 20240101})

    def test_date_objects_accepted(self):
        validate_params({"from_date": date(2024, 1, 1), "to_date": None, "area": "x"})

    def test_extract_param_names_ignores_casts(self):
        assert extract_param_names("SELECT :a::text, :b") == ["a", "b"]

    def test_run_sql_binds_dates_as_iso(self, store):
        count = run_sql_scalar(
            store,
            f"SELECT COUNT(*) FROM transactions WHERE {BASE_AREA_FILTER} AND instance_date = :day",
            day=date(2019, 3, 10),
        )
        assert count == 1


class TestLikeEscaping:

    def test_wildcards_escaped(self):
        assert like_pattern("50%_off") == "%50\\%\\_off%"

    def test_escape_char_doubled(self):
        assert like_pattern("a\\b") == "%a\\\\b%"

    def test_lowercased(self):
        assert like_pattern("Marina") == "%marina%"

    def test_clause_shape(self):
        assert like_clause("building_name_en", "b") == "LOWER(building_name_en) LIKE :b ESCAPE '\\'"

    def test_underscore_matches_literally(self, store):
        rows = run_sql(
            store,
            f"SELECT building_name_en FROM transactions WHERE {like_clause('building_name_en', 'b')}",
            b=like_pattern("tower_a"),
        )
        assert [r["building_name_en"] for r in rows] == ["Tower_A"]


class TestInjection:

    def test_where_clause_starts_with_area_filter(self):
        where_sql, _ = build_where_clause(TransactionFilters(search="x"))
        assert where_sql.startswith(f"WHERE {BASE_AREA_FILTER}")

    def test_user_values_never_in_sql_text(self):
        hostile = "'; DROP TABLE transactions; --"
        where_sql, params = build_where_clause(TransactionFilters(
            search=hostile, developer=hostile, property_type=hostile, reg_type=hostile,
        ))
        assert "DROP" not in where_sql
        assert params["property_type"] == hostile

    @pytest.mark.parametrize("sort_by", [
        "instance_date; DROP TABLE transactions",
        "actual_worth DESC, (SELECT 1)",
        "1",
    ])
    def test_sort_key_must_be_whitelisted(self, sort_by):
        with pytest.raises(ValidationError):
            build_order_by(sort_by, "DESC")

    def test_sort_order_must_be_whitelisted(self):
        with pytest.raises(ValidationError):
            build_order_by("actual_worth", "DESC; DELETE FROM transactions")

    def test_hostile_search_is_harmless(self, engine, store):
        result = engine.query(TransactionFilters(search="'; DROP TABLE transactions; --"))

        assert result.total == 0
        assert run_sql_scalar(store, "SELECT COUNT(*) FROM transactions") == 13
