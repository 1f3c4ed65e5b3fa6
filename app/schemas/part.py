from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class PartBase(BaseModel):
    name: Optional[str] = None

class PartCreate(PartBase):
    order: Optional[int] = None

class PartUpdate(PartBase):
    pass

class Part(BaseModel):
    id: int
    name: str
    order: int
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
