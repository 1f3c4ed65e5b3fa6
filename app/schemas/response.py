from pydantic import BaseModel, Field
from typing import Generic, TypeVar, Optional, List, Union

DataType = TypeVar("DataType")

class APIResponse(BaseModel, Generic[DataType]):
    """Generic API response model for consistent output."""
    message: str = Field(..., description="A human-readable message about the response.")
    data: Optional[DataType] = Field(None, description="The actual data returned by the API, if any.")

class FieldError(BaseModel):
    """A single field-level validation failure."""
    field: str = Field(..., description="Dotted path of the offending field")
    message: str = Field(..., description="Human-readable error message")

class ErrorResponse(BaseModel):
    """Standardized error response model."""
    error: Union[str, List[FieldError]] = Field(..., description="Error message or field-level errors")
