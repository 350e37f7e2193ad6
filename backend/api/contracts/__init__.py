"""
Param contracts for the DLD API.

parse_params() validates a raw query-string dict against a pydantic model
and reports the first failure as utils.normalize.ValidationError, which the
error middleware turns into a 400 INVALID_PARAMS envelope.
"""

from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError

from utils.normalize import ValidationError

from .pydantic_models import BaseParamsModel

P = TypeVar('P', bound=BaseParamsModel)


def _wire_name(model: Type[BaseParamsModel], name: Optional[str]) -> Optional[str]:
    """Field name as the API spells it, whichever key the caller used."""
    if not name:
        return name
    for field_name, info in model.model_fields.items():
        choices = getattr(info.validation_alias, "choices", None) or ()
        if name == field_name or name in choices:
            return info.alias or field_name
    return name


def parse_params(model: Type[P], raw: Dict[str, Any]) -> P:
    """
    Build `model` from raw params.

    Raises:
        ValidationError: With the offending field name and value
    """
    try:
        return model(**raw)
    except PydanticValidationError as e:
        first = e.errors()[0]
        loc = [str(part) for part in first.get('loc', ())]
        field = _wire_name(model, loc[0] if loc else None)
        received = first.get('input')
        if isinstance(received, dict):
            received = None
        message = first.get('msg', 'Invalid parameter')
        if field:
            message = f"{field}: {message}"
        raise ValidationError(message, field=field, received_value=received) from e


__all__ = ['parse_params', 'BaseParamsModel']
