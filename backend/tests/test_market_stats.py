"""
Rollups over the seeded store.

Sales rollups count only trans_group 'Sales' with actual_worth > 0 and a
non-empty area: 9 of the 13 seeded rows.
"""

import pytest

from services.market_stats import MarketStatsService


@pytest.fixture
def stats(store):
    return MarketStatsService(store)


class TestAreaStats:

    def test_ordered_by_count_then_name(self, stats):
        rows = stats.get_area_stats()

        assert [(r.area_name, r.transaction_count) for r in rows] == [
            ("Marsa Dubai", 4),
            ("Al Barsha South Fourth", 2),
            ("Jumeirah Village Circle", 2),
            ("Business Bay", 1),
        ]

    def test_averages(self, stats):
        jvc = next(r for r in stats.get_area_stats() if r.area_name == "Jumeirah Village Circle")

        assert jvc.avg_price == 575_000
        assert jvc.total_value == 1_150_000
        assert jvc.avg_price_sqft is not None

    def test_mortgage_and_zero_value_excluded(self, stats):
        business_bay = stats.get_area_stats("business")
        assert len(business_bay) == 1
        assert business_bay[0].transaction_count == 1
        assert business_bay[0].avg_price == 3_000_000

    def test_substring_filter_case_insensitive(self, stats):
        assert [r.area_name for r in stats.get_area_stats("MARSA")] == ["Marsa Dubai"]

    def test_filter_no_match(self, stats):
        assert stats.get_area_stats("Atlantis") == []

    def test_to_dict_keys(self, stats):
        data = stats.get_area_stats("marsa")[0].to_dict()
        assert set(data) == {"area_name_en", "transaction_count", "avg_price", "avg_price_sqft", "total_value"}


class TestBuildingStats:

    def test_buildings_in_area(self, stats):
        rows = stats.get_building_stats("Marsa Dubai")

        # Marina Gate 2 only has a zero-value record
        assert [(r.building_name, r.transaction_count) for r in rows] == [("Marina Gate 1", 4)]
        assert rows[0].avg_price == 1_025_000

    def test_area_substring(self, stats):
        names = [r.building_name for r in stats.get_building_stats("jumeirah village")]
        assert names == ["Binghatti Stars", "Bloom Towers"]

    def test_unknown_area(self, stats):
        assert stats.get_building_stats("Atlantis") == []


class TestMarketStats:

    def test_rollup(self, stats):
        rollup = stats.get_market_stats()

        assert rollup.total_transactions == 9
        assert rollup.unique_areas == 4
        assert rollup.total_value == 10_050_000
        assert rollup.min_date == "2019-03-10"
        assert rollup.max_date == "2024-08-15"

    def test_to_dict(self, stats):
        data = stats.get_market_stats().to_dict()
        assert data["date_range"] == {"min": "2019-03-10", "max": "2024-08-15"}


class TestSearch:

    def test_buildings_and_areas_merged_by_count(self, stats):
        hits = stats.search_all("marina")

        assert [(h.name, h.type, h.count) for h in hits] == [
            ("Marina Gate 1", "building", 4),
            ("Marina Gate 2", "building", 1),
        ]

    def test_area_hit(self, stats):
        hits = stats.search_all("business")
        assert [(h.name, h.type, h.count) for h in hits] == [("Business Bay", "area", 2)]

    def test_area_ahead_of_building_on_equal_count(self, stats):
        hits = stats.search_all("al barsha")
        assert hits[0].type == "area"

    def test_limit(self, stats):
        assert len(stats.search_all("marina", limit=1)) == 1

    @pytest.mark.parametrize("query", ["", " ", "m"])
    def test_short_query_returns_empty(self, stats, query):
        assert stats.search_all(query) == []

    def test_rows_without_area_never_surface(self, stats):
        assert stats.search_all("ghost") == []

    def test_wildcards_escaped(self, stats):
        assert [h.name for h in stats.search_all("tower_")] == ["Tower_A"]
