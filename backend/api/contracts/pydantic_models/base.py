"""
Base Pydantic model for all API param schemas.

Key features:
- frozen=True: Immutable after normalization (prevents downstream mutation)
- populate_by_name=True: Accept both alias and field name
- extra='ignore': Ignore undeclared fields (safe)
- empty query-string values ("?area=") read as absent
- DLD categorical tokens normalized to DB format at the boundary
"""

from datetime import date
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, field_validator, model_validator

from constants import normalize_reg_type, normalize_trans_group, normalize_usage
from utils.normalize import to_date


def _coerce_date(v: Any) -> Optional[date]:
    # Raises utils.normalize.ValidationError (a ValueError) on bad input,
    # which pydantic reports against the field
    return to_date(v)


def _coerce_end_date(v: Any) -> Optional[date]:
    return to_date(v, month_end=True)


CoercedDate = Annotated[Optional[date], BeforeValidator(_coerce_date)]
# Inclusive upper bounds: "2024-03" means through 2024-03-31
CoercedEndDate = Annotated[Optional[date], BeforeValidator(_coerce_end_date)]


class BaseParamsModel(BaseModel):
    """
    Base model for all API param schemas.

    Invariant: after validation, reg_type / property_usage / trans_group are
    in DB format ("Off-plan", "Residential", "Sales") or None.
    """
    model_config = ConfigDict(
        frozen=True,  # Immutable after normalization
        str_strip_whitespace=True,  # Strip whitespace from strings
        populate_by_name=True,  # Accept both alias and field name
        extra='ignore',  # Ignore undeclared fields
    )

    @model_validator(mode='before')
    @classmethod
    def drop_empty_values(cls, data):
        if isinstance(data, dict):
            return {
                k: v for k, v in data.items()
                if not (v is None or (isinstance(v, str) and v.strip() == ''))
            }
        return data

    @field_validator('reg_type', mode='before', check_fields=False)
    @classmethod
    def normalize_reg_type_to_db(cls, v):
        """'off_plan' / 'offplan' / 'READY' -> 'Off-plan' / 'Ready'."""
        return normalize_reg_type(v) if isinstance(v, str) else v

    @field_validator('property_usage', mode='before', check_fields=False)
    @classmethod
    def normalize_usage_to_db(cls, v):
        return normalize_usage(v) if isinstance(v, str) else v

    @field_validator('trans_group', mode='before', check_fields=False)
    @classmethod
    def normalize_trans_group_to_db(cls, v):
        return normalize_trans_group(v) if isinstance(v, str) else v
