from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Any


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class SpreadsheetRow(BaseModel):
    """One question row of an imported sheet, keyed by its column headers."""

    part: Optional[str] = Field(None, alias="Part")
    order: Optional[int] = Field(None, alias="Order")
    title_group: Optional[str] = Field(None, alias="Title Group")
    description_group: Optional[str] = Field(None, alias="Description Group")
    element_group: Optional[str] = Field(None, alias="Element Group")
    question: Optional[str] = Field(None, alias="Question")
    description: Optional[str] = Field(None, alias="Description")
    option_a: Optional[str] = Field(None, alias="Option A")
    option_b: Optional[str] = Field(None, alias="Option B")
    option_c: Optional[str] = Field(None, alias="Option C")
    option_d: Optional[str] = Field(None, alias="Option D")
    correct_option: Optional[str] = Field(None, alias="Correct option")
    element: Optional[str] = Field(None, alias="Element")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator(
        "part", "title_group", "description_group", "element_group", "question",
        "description", "option_a", "option_b", "option_c", "option_d",
        "correct_option", "element",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return _as_text(value)


class ExamAndSubject(BaseModel):
    subject: Optional[str] = Field(None, alias="Subject")
    exam: Optional[str] = Field(None, alias="Exam")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("subject", "exam", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return _as_text(value)


class SpreadsheetPayload(BaseModel):
    detail_questions: List[SpreadsheetRow] = Field(default_factory=list, alias="detailQuestions")
    exam_and_subject: List[ExamAndSubject] = Field(default_factory=list, alias="examAndSubject")

    model_config = ConfigDict(populate_by_name=True)


class SpreadsheetUploadRequest(BaseModel):
    file: Optional[SpreadsheetPayload] = None


class SpreadsheetPartResult(BaseModel):
    part: str
    group_id: int = Field(..., alias="groupId")
    questions_count: int = Field(..., alias="questionsCount")

    model_config = ConfigDict(populate_by_name=True)


class SpreadsheetImportResponse(BaseModel):
    message: str
    exam_id: int = Field(..., alias="examId")
    results: List[SpreadsheetPartResult]

    model_config = ConfigDict(populate_by_name=True)
