from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from app.core.constants import ElementTypeEnum

class ElementBase(BaseModel):
    type: ElementTypeEnum
    url: str
    cloud_id: bool = Field(False, alias="cloudId")

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

class Element(ElementBase):
    id: int
    group_id: Optional[int] = None
    question_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True, use_enum_values=True)
