"""
Flip history reconstruction.

Seeded unit: Marina Gate 1, 2 B/R, ~92.9 m², sold 1.0M (2019) -> 1.2M
(2021, stored as DD-MM-YYYY) -> 1.1M (2023).
"""

from datetime import date

import pytest

from services.developer_lookup import DeveloperMatch
from services.property_history import (
    PropertyHistoryService,
    annotate_flips,
    build_property_summary,
    summarize_history,
)
from models.transaction import TransactionRow
from utils.normalize import ValidationError


def _row(tid, day, worth, trans_group="Sales", reg_type="Ready", area=92.9):
    return TransactionRow(
        transaction_id=tid,
        instance_date=day,
        area_name="Marsa Dubai",
        building_name="Marina Gate 1",
        project_name="Marina Gate",
        master_project_name="Dubai Marina",
        property_type="Unit",
        property_sub_type="Flat",
        property_usage="Residential",
        reg_type=reg_type,
        trans_group=trans_group,
        rooms="2 B/R",
        procedure_area=area,
        actual_worth=worth,
        meter_sale_price=None,
    )


@pytest.fixture
def service(store):
    return PropertyHistoryService(store)


class TestAnnotateFlips:

    def test_gains_against_previous_sale(self):
        flips = annotate_flips([
            _row("A", date(2019, 1, 1), 1_000_000),
            _row("B", date(2021, 1, 1), 1_200_000),
            _row("C", date(2023, 1, 1), 1_100_000),
        ])

        assert [f.transaction.transaction_id for f in flips] == ["C", "B", "A"]
        assert [f.flip_number for f in flips] == [3, 2, 1]
        assert flips[0].gain == -100_000
        assert flips[0].gain_pct == -8.3
        assert flips[0].previous_price == 1_200_000
        assert flips[1].gain == 200_000
        assert flips[1].gain_pct == 20.0

    def test_first_sale_has_no_gain(self):
        (only,) = annotate_flips([_row("A", date(2019, 1, 1), 1_000_000)])
        assert only.flip_number == 1
        assert only.gain is None
        assert only.gain_pct is None
        assert only.previous_price is None

    def test_zero_previous_price_leaves_gain_undefined(self):
        flips = annotate_flips([
            _row("A", date(2019, 1, 1), 0),
            _row("B", date(2020, 1, 1), 900_000),
        ])
        assert flips[0].gain is None
        assert flips[0].gain_pct is None

    def test_flat_resale_is_zero_percent(self):
        flips = annotate_flips([
            _row("A", date(2019, 1, 1), 900_000),
            _row("B", date(2020, 1, 1), 900_000),
        ])
        assert flips[0].gain == 0
        assert flips[0].gain_pct == 0.0

    def test_empty(self):
        assert annotate_flips([]) == []


class TestSummarize:

    def test_appreciation_first_to_last(self):
        stats = summarize_history([
            _row("A", date(2019, 1, 1), 1_000_000),
            _row("B", date(2021, 1, 1), 1_200_000),
            _row("C", date(2023, 1, 1), 1_100_000),
        ])
        assert stats.total_sales == 3
        assert stats.total_appreciation_pct == 10.0
        assert stats.first_sale.transaction_id == "A"
        assert stats.last_sale.transaction_id == "C"

    def test_developer_sale_requires_ready_sales_first(self):
        ready = summarize_history([_row("A", date(2019, 1, 1), 1_000_000)])
        off_plan = summarize_history([_row("A", date(2019, 1, 1), 1_000_000, reg_type="Off-plan")])
        mortgage = summarize_history([_row("A", date(2019, 1, 1), 1_000_000, trans_group="Mortgage")])

        assert ready.developer_sale is True
        assert off_plan.developer_sale is False
        assert mortgage.developer_sale is False

    def test_zero_first_price_gives_zero_appreciation(self):
        stats = summarize_history([
            _row("A", date(2019, 1, 1), 0),
            _row("B", date(2020, 1, 1), 500_000),
        ])
        assert stats.total_appreciation_pct == 0.0

    def test_empty(self):
        stats = summarize_history([])
        assert stats.total_sales == 0
        assert stats.first_sale is None
        assert stats.to_dict()["first_sale_date"] is None


def test_property_summary_prefers_query_values():
    rows = [_row("A", date(2019, 1, 1), 1_000_000)]
    summary = build_property_summary("Marina Gate 1", rows, size=1000, rooms="2 B/R", property_type="Apartment")

    assert summary.size_sqft == 1000
    assert summary.size_sqm == 92.9
    assert summary.type == "Apartment"
    assert summary.developer.name == "Emaar"
    assert summary.developer.matched_by is DeveloperMatch.MASTER_PROJECT


def test_property_summary_derives_size_from_first_sale():
    summary = build_property_summary("Marina Gate 1", [_row("A", date(2019, 1, 1), 1_000_000)])
    assert summary.size_sqft == 1000.0
    assert summary.rooms == "2 B/R"
    assert summary.type == "Flat"


class TestServiceAgainstStore:

    def test_full_history(self, service):
        history = service.get_property_history("Marina Gate 1", size=1000, rooms="2 B/R")

        assert history.found is True
        assert [f.transaction.transaction_id for f in history.transactions] == ["TX003", "TX002", "TX001"]
        assert [f.gain_pct for f in history.transactions] == [-8.3, 20.0, None]
        assert history.transactions[1].transaction.instance_date == date(2021, 6, 15)
        assert history.stats.total_appreciation_pct == 10.0
        assert history.stats.developer_sale is True

    def test_to_dict_shape(self, service):
        data = service.get_property_history("Marina Gate 1", size=1000, rooms="2 B/R").to_dict()

        assert data["found"] is True
        assert data["property"]["developer"] == "Emaar"
        assert data["property"]["area"] == "Marsa Dubai"
        assert data["stats"]["first_sale_price"] == 1_000_000
        assert data["stats"]["first_sale_date"] == "2019-03-10"
        assert data["stats"]["last_sale_date"] == "2023-11-01"
        assert data["transactions"][0]["flip_number"] == 3
        assert data["transactions"][0]["transaction_id"] == "TX003"

    def test_size_within_two_percent(self, service):
        history = service.get_property_history("Marina Gate 1", size=980, rooms="2 B/R")
        # 980 sqft reaches up to 92.90 m², so the 92.95 sale drops out
        assert [f.transaction.transaction_id for f in history.transactions] == ["TX003", "TX001"]

    def test_size_out_of_window(self, service):
        history = service.get_property_history("Marina Gate 1", size=900, rooms="2 B/R")
        assert history.found is False
        assert history.transactions == []
        assert history.stats is None

    def test_rooms_separate_units(self, service):
        history = service.get_property_history("Marina Gate 1", rooms="1 B/R")
        assert [f.transaction.transaction_id for f in history.transactions] == ["TX004"]

    def test_building_only_orders_across_date_formats(self, service):
        history = service.get_property_history("Marina Gate 1")
        ids_oldest_first = [f.transaction.transaction_id for f in reversed(history.transactions)]
        assert ids_oldest_first == ["TX001", "TX002", "TX004", "TX003"]

    def test_property_type_filter(self, service):
        assert service.get_property_history("Marina Gate 1", property_type="Office").found is False

    def test_building_is_exact_match(self, service):
        assert service.get_property_history("Marina Gate").found is False

    def test_single_sale(self, service):
        history = service.get_property_history("Bloom Towers")
        assert history.stats.total_sales == 1
        assert history.stats.total_appreciation_pct == 0.0
        assert history.transactions[0].gain is None

    def test_rows_without_area_excluded(self, service):
        assert service.get_property_history("Ghost Tower").found is False

    @pytest.mark.parametrize("building,size", [("", None), ("   ", None), ("Marina Gate 1", 0), ("Marina Gate 1", -5)])
    def test_invalid_input(self, service, building, size):
        with pytest.raises(ValidationError):
            service.get_property_history(building, size=size)
