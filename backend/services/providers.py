"""
Data providers - one interface, two implementations.

    StoreDataProvider   live SQLite store, source="sqlite"
    SampleDataProvider  deterministic synthetic data, source="sample"

The calling layer picks the provider. The engine services never fall back
on their own: a failing store raises StoreUnavailableError out of
StoreDataProvider, and the caller decides whether to retry the request
against SampleDataProvider.

Usage:
    from services.providers import StoreDataProvider, SampleDataProvider

    provider = StoreDataProvider(store)
    try:
        result = provider.query_transactions(filters, limit=20)
    except StoreUnavailableError:
        result = SampleDataProvider().query_transactions(filters, limit=20)
    result.source   # "sqlite" or "sample"
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from services.market_stats import MarketStatsService
from services.property_history import PropertyHistory, PropertyHistoryService
from services.sample_data import (
    generate_transactions,
    sample_area_stats,
    sample_building_stats,
    sample_market_stats,
    sample_search,
)
from services.transaction_query import (
    SOURCE_SAMPLE,
    SOURCE_SQLITE,
    PageRequest,
    QueryResult,
    TransactionQueryEngine,
)
from utils.filter_builder import TransactionFilters


@dataclass
class SourcedResult:
    """A rollup or search payload tagged with where it came from."""
    data: Any
    source: str


class DataProvider(ABC):
    source: str = ""

    @abstractmethod
    def query_transactions(
        self,
        filters: Optional[TransactionFilters] = None,
        limit: int = 20,
        offset: int = 0,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> QueryResult:
        ...

    @abstractmethod
    def get_area_stats(self, area_name: Optional[str] = None) -> SourcedResult:
        ...

    @abstractmethod
    def get_building_stats(self, area_name: str) -> SourcedResult:
        ...

    @abstractmethod
    def get_market_stats(self) -> SourcedResult:
        ...

    @abstractmethod
    def search_all(self, query: str, limit: int = 10) -> SourcedResult:
        ...


class StoreDataProvider(DataProvider):
    source = SOURCE_SQLITE

    def __init__(self, store, max_limit: Optional[int] = None):
        self.store = store
        self.engine = TransactionQueryEngine(store, max_limit=max_limit)
        self.stats = MarketStatsService(store)
        self.history = PropertyHistoryService(store)

    def query_transactions(self, filters=None, limit=20, offset=0, sort_by=None, sort_order=None):
        return self.engine.query(filters, limit=limit, offset=offset,
                                 sort_by=sort_by, sort_order=sort_order)

    def get_area_stats(self, area_name=None):
        return SourcedResult(self.stats.get_area_stats(area_name), self.source)

    def get_building_stats(self, area_name):
        return SourcedResult(self.stats.get_building_stats(area_name), self.source)

    def get_market_stats(self):
        return SourcedResult(self.stats.get_market_stats(), self.source)

    def search_all(self, query, limit=10):
        return SourcedResult(self.stats.search_all(query, limit), self.source)

    def get_property_history(self, building, size=None, rooms=None, property_type=None) -> PropertyHistory:
        return self.history.get_property_history(building, size, rooms, property_type)


# Filters the generator honors; the rest are left out of filters_applied
SAMPLE_FILTER_FIELDS = frozenset({
    "search", "area", "trans_group", "property_type", "property_usage", "reg_type",
})


class SampleDataProvider(DataProvider):
    """
    Synthetic data keyed on the request. Sorting is not applied: the virtual
    set is always newest-first, but sort params are still validated so a bad
    request fails the same way it would against the store.
    """
    source = SOURCE_SAMPLE

    def __init__(self, max_limit: Optional[int] = None):
        from config import Config

        self.max_limit = max_limit or Config.MAX_PAGE_SIZE

    def query_transactions(self, filters=None, limit=20, offset=0, sort_by=None, sort_order=None):
        filters = filters or TransactionFilters()
        page = PageRequest(
            limit=limit,
            offset=offset,
            sort_by=sort_by or "instance_date",
            sort_order=sort_order or "DESC",
        )
        page_limit = min(page.limit, self.max_limit)
        generated = generate_transactions(
            area=filters.effective_area or filters.search,
            limit=page_limit,
            offset=page.offset,
            overrides={
                'trans_group': filters.trans_group,
                'property_type': filters.property_type,
                'property_usage': filters.property_usage,
                'reg_type': filters.reg_type,
            },
        )
        return QueryResult(
            rows=generated['rows'],
            total=generated['total'],
            source=self.source,
            limit=page_limit,
            offset=page.offset,
            filters_applied={
                k: v for k, v in filters.to_dict().items() if k in SAMPLE_FILTER_FIELDS
            },
        )

    def get_area_stats(self, area_name=None):
        return SourcedResult(sample_area_stats(area_name), self.source)

    def get_building_stats(self, area_name):
        return SourcedResult(sample_building_stats(area_name), self.source)

    def get_market_stats(self):
        return SourcedResult(sample_market_stats(), self.source)

    def search_all(self, query, limit=10):
        return SourcedResult(sample_search(query, limit), self.source)
