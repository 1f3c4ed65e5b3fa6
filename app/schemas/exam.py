from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

class ExamBase(BaseModel):
    subject_id: Optional[int] = None
    name: Optional[str] = None

class ExamCreate(ExamBase):
    pass

class ExamUpdate(ExamBase):
    pass

class Exam(BaseModel):
    id: int
    subject_id: int
    name: str
    subject_name: str = ""
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class PaginatedExams(BaseModel):
    data: List[Exam]
    total: int
    page: int
    limit: int
    total_pages: int = Field(..., alias="totalPages")

    model_config = ConfigDict(populate_by_name=True)

class ExamPartLink(BaseModel):
    exam_id: int
    part_id: int

    model_config = ConfigDict(from_attributes=True)
