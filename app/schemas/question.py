from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Dict, Any, Union
from datetime import datetime

from app.core.constants import OPTION_LABELS
from app.schemas.element import Element

# Options arrive either as a label -> text map or as its JSON encoding
OptionPayload = Union[Dict[str, Any], str]


def check_correct_option(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in OPTION_LABELS:
        raise ValueError(f"correct_option must be one of {', '.join(OPTION_LABELS)}.")
    return value


def check_option_payload(value: Optional[OptionPayload]) -> Optional[OptionPayload]:
    if isinstance(value, dict) and not value:
        raise ValueError("Question must have at least one option.")
    return value


class QuestionCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    option: OptionPayload
    correct_option: str
    score: float = Field(..., gt=0)

    @field_validator("correct_option")
    @classmethod
    def validate_correct_option(cls, value):
        return check_correct_option(value)

    @field_validator("option")
    @classmethod
    def validate_option(cls, value):
        return check_option_payload(value)


class QuestionUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    option: Optional[OptionPayload] = None
    correct_option: Optional[str] = None
    score: Optional[float] = Field(None, gt=0)

    @field_validator("correct_option")
    @classmethod
    def validate_correct_option(cls, value):
        return check_correct_option(value)

    @field_validator("option")
    @classmethod
    def validate_option(cls, value):
        return check_option_payload(value)


class Question(BaseModel):
    id: int
    group_id: int
    title: str
    description: Optional[str] = None
    option: Dict[str, Any]
    correct_option: str
    score: float
    order: int
    global_order: int
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    elements: List[Element] = []
    display_order: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class QuestionMessage(BaseModel):
    message: str
    question: Question
