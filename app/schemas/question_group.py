from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from app.core.constants import DEFAULT_TYPE_GROUP
from app.schemas.element import Element
from app.schemas.question import Question, QuestionCreate


class QuestionGroupCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    type_group: int = DEFAULT_TYPE_GROUP
    questions: List[QuestionCreate] = Field(..., min_length=1)


class QuestionGroup(BaseModel):
    id: int
    part_id: int
    exam_id: int
    order: int
    type_group: int
    title: Optional[str] = None
    description: Optional[str] = None
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class QuestionGroupWithQuestions(QuestionGroup):
    questions: List[Question] = []
    elements: List[Element] = []


class QuestionGroupCreated(BaseModel):
    message: str
    new_group: QuestionGroup = Field(..., alias="newGroup")

    model_config = ConfigDict(populate_by_name=True)


class QuestionGroupMessage(BaseModel):
    message: str
    group: QuestionGroup


class PaginatedQuestionGroups(BaseModel):
    data: List[QuestionGroupWithQuestions]
    total: int
    page: int
    limit: int
    total_pages: int = Field(..., alias="totalPages")

    model_config = ConfigDict(populate_by_name=True)


class PartQuestions(PaginatedQuestionGroups):
    part: str
