from typing import Any, Type, TypeVar

from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from app.core.database import get_db  # noqa: F401

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_form(model: Type[ModelT], data: Any) -> ModelT:
    """Validate hand-parsed form data, reporting failures like FastAPI's own body validation."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError(e.errors())
