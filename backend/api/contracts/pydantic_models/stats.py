"""
Pydantic models for area / market stats, search and lookup params.
"""

from typing import Optional

from pydantic import AliasChoices, Field

from .base import BaseParamsModel

MAX_SEARCH_RESULTS = 50


class AreaStatsParams(BaseParamsModel):
    area: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices('area', 'areaName', 'area_name'),
    )


class SearchParams(BaseParamsModel):
    q: str = Field(default="", validation_alias=AliasChoices('q', 'query'))
    limit: int = Field(default=10, ge=1, le=MAX_SEARCH_RESULTS)


class ResolveAreaParams(BaseParamsModel):
    name: str = Field(min_length=1, validation_alias=AliasChoices('name', 'area', 'slug'))


class DeveloperParams(BaseParamsModel):
    master_project: Optional[str] = Field(
        default=None,
        alias='masterProject',
        validation_alias=AliasChoices('masterProject', 'master_project'),
    )
    project: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices('project', 'projectName', 'project_name'),
    )
