from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

class SubjectCreate(BaseModel):
    name: str = Field(..., min_length=1)

class Subject(BaseModel):
    id: int
    name: str
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
