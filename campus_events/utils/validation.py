# campus_events/utils/validation.py
from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from campus_events.core.errors import ValidationError

T = TypeVar("T", bound=BaseModel)

HEX_COLOR_REGEX = r'^#[0-9A-Fa-f]{6}$'
UUID_REGEX = r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$'

# locations FastAPI prefixes onto request errors
_REQUEST_LOCATIONS = ("body", "query", "path", "header")


@dataclass
class ValidationResult(Generic[T]):
    value: Optional[T] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        return "Validation failed: " + ", ".join(self.errors)

    def unwrap(self) -> T:
        if not self.ok:
            raise ValidationError(self.message, self.errors)
        return self.value


def format_errors(errors: Iterable[dict]) -> List[str]:
    """Render pydantic error dicts as ``field.path: message`` strings."""
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _REQUEST_LOCATIONS:
            loc = loc[1:]
        msg = error.get("msg", "Invalid value")
        formatted.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return formatted


def validate_request(schema: Type[T], data: Any) -> ValidationResult[T]:
    if data is None:
        data = {}
    try:
        return ValidationResult(value=schema.model_validate(data))
    except PydanticValidationError as e:
        return ValidationResult(errors=format_errors(e.errors()))


def coerce_positive_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default
