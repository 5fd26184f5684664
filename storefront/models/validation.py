"""
Validation of raw input against a data contract before any storage call.

JSON bodies are validated by FastAPI; multipart form fields arrive as plain
strings and go through ``validate_input`` instead.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class ValidationResult(Generic[ModelT]):
    """Outcome of validating input: the parsed value or the reasons it failed."""
    ok: bool
    value: Optional[ModelT] = None
    errors: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def reason(self) -> str:
        """Human-readable summary of all errors."""
        return "; ".join(f"{e['field']}: {e['msg']}" for e in self.errors)


def validate_input(model: Type[ModelT], data: Mapping[str, Any]) -> ValidationResult[ModelT]:
    """Validate ``data`` against ``model`` without raising."""
    # Form fields left blank by the client mean "not provided"
    cleaned = {k: v for k, v in data.items() if v is not None and v != ""}
    try:
        return ValidationResult(ok=True, value=model.model_validate(cleaned))
    except ValidationError as e:
        errors = [
            {
                "field": ".".join(str(loc) for loc in error.get("loc", ())) or "__root__",
                "msg": error.get("msg", str(e)),
                "type": error.get("type", "value_error"),
            }
            for error in e.errors()
        ]
        return ValidationResult(ok=False, errors=errors)
