from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import ElementTypeEnum

class Element(Base):
    __tablename__ = "elements"
    __table_args__ = (
        CheckConstraint(
            "(group_id IS NULL AND question_id IS NOT NULL) OR (group_id IS NOT NULL AND question_id IS NULL)",
            name="ck_elements_single_owner",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    type = Column(Enum(ElementTypeEnum), nullable=False)
    url = Column(String, nullable=False)
    group_id = Column(Integer, ForeignKey("question_groups.id"), nullable=True, index=True)
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=True, index=True)
    cloud_id = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    group = relationship("QuestionGroup", back_populates="elements")
    question = relationship("Question", back_populates="elements")
