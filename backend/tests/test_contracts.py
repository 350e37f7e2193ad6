"""
Tests for the pydantic param contracts and parse_params().
"""

from datetime import date

import pytest
from pydantic import ValidationError as PydanticValidationError

from api.contracts import parse_params
from api.contracts.pydantic_models import (
    AreaStatsParams,
    DeveloperParams,
    PropertyParams,
    ResolveAreaParams,
    SearchParams,
    TransactionsParams,
)
from utils.filter_builder import TransactionFilters
from utils.normalize import ValidationError


class TestTransactionsParams:

    def test_defaults(self):
        params = TransactionsParams()
        assert params.limit == 20
        assert params.offset == 0
        assert params.sort_by == "instance_date"
        assert params.sort_order == "DESC"

    def test_camel_case_aliases(self):
        params = TransactionsParams(**{
            "transGroup": "Sales",
            "propertySubType": "Flat",
            "fromDate": "2024-01-01",
            "toDate": "31-12-2024",
            "minPrice": "500000",
            "maxSize": "1200",
            "sortBy": "actual_worth",
            "sortOrder": "asc",
        })

        assert params.trans_group == "Sales"
        assert params.property_sub_type == "Flat"
        assert params.from_date == date(2024, 1, 1)
        assert params.to_date == date(2024, 12, 31)
        assert params.min_price == 500_000.0
        assert params.max_size == 1200.0
        assert params.sort_by == "actual_worth"
        assert params.sort_order == "ASC"

    def test_year_month_bounds(self):
        params = TransactionsParams(fromDate="2024-03", toDate="2024-03")
        assert params.from_date == date(2024, 3, 1)
        assert params.to_date == date(2024, 3, 31)

    def test_field_names_accepted(self):
        params = TransactionsParams(min_price=1, sort_order="desc")
        assert params.min_price == 1
        assert params.sort_order == "DESC"

    @pytest.mark.parametrize("key", ["usage", "propertyUsage", "property_usage"])
    def test_usage_aliases(self, key):
        assert TransactionsParams(**{key: "residential"}).property_usage == "Residential"

    @pytest.mark.parametrize("raw,expected", [
        ("off_plan", "Off-plan"),
        ("OFFPLAN", "Off-plan"),
        ("ready", "Ready"),
        ("Freehold", "Freehold"),
    ])
    def test_reg_type_normalized(self, raw, expected):
        assert TransactionsParams(regType=raw).reg_type == expected

    def test_trans_group_normalized(self):
        assert TransactionsParams(transGroup="mortgages").trans_group == "Mortgage"

    def test_empty_values_dropped(self):
        params = TransactionsParams(area="", minPrice="  ", limit="", sortBy="")
        assert params.area is None
        assert params.min_price is None
        assert params.limit == 20
        assert params.sort_by == "instance_date"

    def test_strings_stripped(self):
        assert TransactionsParams(area="  Business Bay ").area == "Business Bay"

    def test_sort_key_en_suffix_accepted(self):
        assert TransactionsParams(sortBy="area_name_en").sort_by == "area_name"

    def test_unknown_params_ignored(self):
        assert TransactionsParams(district="D09").area is None

    def test_frozen(self):
        params = TransactionsParams()
        with pytest.raises(PydanticValidationError):
            params.limit = 5

    @pytest.mark.parametrize("raw", [
        {"limit": "0"},
        {"offset": "-1"},
        {"minPrice": "-5"},
        {"sortOrder": "sideways"},
        {"fromDate": "2024-02-30"},
        {"fromDate": "2024-06-01", "toDate": "2024-05-01"},
        {"minSize": "900", "maxSize": "800"},
    ])
    def test_rejected(self, raw):
        with pytest.raises(PydanticValidationError):
            TransactionsParams(**raw)

    def test_zero_bounds_kept(self):
        filters = TransactionsParams(minPrice="0", maxSize="0").to_filters()
        assert filters.min_price == 0
        assert filters.max_size == 0

    def test_to_filters(self):
        params = TransactionsParams(area="jvc", building="Bloom", developer="Nakheel")
        filters = params.to_filters(area="Jumeirah Village Circle")

        assert filters == TransactionFilters(
            area="Jumeirah Village Circle",
            building="Bloom",
            developer="Nakheel",
        )

    def test_to_filters_keeps_raw_area_without_override(self):
        assert TransactionsParams(area="jvc").to_filters().area == "jvc"


class TestOtherParams:

    def test_property_type_aliases(self):
        assert PropertyParams(building="X", type="Flat").property_type == "Flat"
        assert PropertyParams(building="X", propertyType="Villa").property_type == "Villa"

    def test_property_size_positive(self):
        with pytest.raises(PydanticValidationError):
            PropertyParams(building="X", size="0")

    def test_search_query_alias(self):
        assert SearchParams(query="marina").q == "marina"
        assert SearchParams().q == ""

    def test_search_limit_bounds(self):
        assert SearchParams(limit="50").limit == 50
        with pytest.raises(PydanticValidationError):
            SearchParams(limit="51")

    def test_area_stats_alias(self):
        assert AreaStatsParams(areaName="Marsa").area == "Marsa"

    def test_resolve_area_aliases(self):
        assert ResolveAreaParams(slug="jvc").name == "jvc"

    def test_developer_aliases(self):
        params = DeveloperParams(masterProject="Dubai Marina", projectName="Marina Gate")
        assert params.master_project == "Dubai Marina"
        assert params.project == "Marina Gate"


class TestParseParams:

    def test_success(self):
        params = parse_params(TransactionsParams, {"limit": "5"})
        assert params.limit == 5

    def test_error_names_field(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_params(TransactionsParams, {"minPrice": "cheap"})

        assert exc_info.value.field == "minPrice"
        assert exc_info.value.received_value == "cheap"
        assert str(exc_info.value).startswith("minPrice:")

    def test_sort_error_names_field(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_params(TransactionsParams, {"sortBy": "nearest_metro"})
        assert exc_info.value.field == "sortBy"

    @pytest.mark.parametrize("raw,expected", [
        ({"sort_by": "nearest_metro"}, "sortBy"),
        ({"min_price": "cheap"}, "minPrice"),
        ({"from_date": "yesterday"}, "fromDate"),
    ])
    def test_error_field_uses_wire_name_for_python_keys(self, raw, expected):
        with pytest.raises(ValidationError) as exc_info:
            parse_params(TransactionsParams, raw)

        assert exc_info.value.field == expected
        assert str(exc_info.value).startswith(f"{expected}:")

    def test_missing_required_field(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_params(PropertyParams, {"size": "1000"})

        assert exc_info.value.field == "building"
        assert exc_info.value.received_value is None

    def test_cross_field_error_has_no_field(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_params(TransactionsParams, {"minPrice": "10", "maxPrice": "5"})
        assert exc_info.value.field is None
