"""Pydantic model for /property (flip history) params."""

from typing import Optional

from pydantic import AliasChoices, Field

from .base import BaseParamsModel


class PropertyParams(BaseParamsModel):
    building: str = Field(min_length=1)
    # sqft
    size: Optional[float] = Field(default=None, gt=0)
    rooms: Optional[str] = None
    property_type: Optional[str] = Field(
        default=None,
        alias='type',
        validation_alias=AliasChoices('type', 'propertyType', 'property_type'),
    )
