"""
Pydantic models for /transactions params.

Query params are camelCase on the wire; fields are snake_case.
"""

from typing import Optional

from pydantic import AliasChoices, Field, field_validator, model_validator

from constants import DEFAULT_LIMIT, DEFAULT_SORT_BY, DEFAULT_SORT_ORDER, SORT_ORDERS
from utils.filter_builder import TransactionFilters, normalize_sort

from .base import BaseParamsModel, CoercedDate, CoercedEndDate


class TransactionsParams(BaseParamsModel):
    """
    Params for GET /api/transactions.

    `search` takes precedence over `area` and `building`; both are accepted
    but ignored when `search` is set.
    """
    search: Optional[str] = None
    area: Optional[str] = None
    building: Optional[str] = None
    trans_group: Optional[str] = Field(default=None, alias='transGroup')
    property_type: Optional[str] = Field(default=None, alias='propertyType')
    property_sub_type: Optional[str] = Field(default=None, alias='propertySubType')
    property_usage: Optional[str] = Field(
        default=None,
        alias='propertyUsage',
        validation_alias=AliasChoices('propertyUsage', 'usage', 'property_usage'),
    )
    reg_type: Optional[str] = Field(default=None, alias='regType')
    from_date: CoercedDate = Field(default=None, alias='fromDate')
    to_date: CoercedEndDate = Field(default=None, alias='toDate')
    min_price: Optional[float] = Field(default=None, alias='minPrice', ge=0)
    max_price: Optional[float] = Field(default=None, alias='maxPrice', ge=0)
    min_size: Optional[float] = Field(default=None, alias='minSize', ge=0)
    max_size: Optional[float] = Field(default=None, alias='maxSize', ge=0)
    developer: Optional[str] = None

    limit: int = Field(default=DEFAULT_LIMIT, ge=1)
    offset: int = Field(default=0, ge=0)
    sort_by: str = Field(default=DEFAULT_SORT_BY, alias='sortBy')
    sort_order: str = Field(default=DEFAULT_SORT_ORDER, alias='sortOrder')

    @field_validator('sort_order', mode='before')
    @classmethod
    def upper_sort_order(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
            if v not in SORT_ORDERS:
                raise ValueError("sortOrder must be ASC or DESC")
        return v

    @field_validator('sort_by')
    @classmethod
    def whitelisted_sort_by(cls, v):
        key, _ = normalize_sort(v, None)
        return key

    @model_validator(mode='after')
    def check_ranges(self):
        if self.from_date and self.to_date and self.from_date > self.to_date:
            raise ValueError("fromDate must be on or before toDate")
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("minPrice must be <= maxPrice")
        if self.min_size is not None and self.max_size is not None and self.min_size > self.max_size:
            raise ValueError("minSize must be <= maxSize")
        return self

    def to_filters(self, area: Optional[str] = None) -> TransactionFilters:
        """
        Engine filter spec. `area` overrides the raw value (callers pass the
        alias-resolved name).
        """
        return TransactionFilters(
            search=self.search,
            area=area if area is not None else self.area,
            building=self.building,
            trans_group=self.trans_group,
            property_type=self.property_type,
            property_sub_type=self.property_sub_type,
            property_usage=self.property_usage,
            reg_type=self.reg_type,
            from_date=self.from_date,
            to_date=self.to_date,
            min_price=self.min_price,
            max_price=self.max_price,
            min_size=self.min_size,
            max_size=self.max_size,
            developer=self.developer,
        )
