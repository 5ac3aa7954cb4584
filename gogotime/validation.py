# GoGoTime - Input Validation
# Explicit schema validation returning a structured list of violations

from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from gogotime.errors import ValidationError


SchemaT = TypeVar("SchemaT", bound=BaseModel)


def format_violations(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Flatten pydantic error dicts into {"field", "message", "type"}.

    Nested locations are joined with dots; the "body" prefix FastAPI adds
    to request errors is dropped.
    """
    violations = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        violations.append({
            "field": ".".join(loc),
            "message": error.get("msg", "Invalid value"),
            "type": error.get("type", "value_error"),
        })
    return violations


def validate_dto(schema: Type[SchemaT], data: Any) -> SchemaT:
    """
    Validate ``data`` against ``schema``.

    ``data`` may be a dict or an already-built model; a model is dumped
    (unset fields left out) and validated again so services never trust
    a caller's construction.

    Raises:
        ValidationError: carrying every violation, not just the first
    """
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)

    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(format_violations(exc.errors())) from exc
