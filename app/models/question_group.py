from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import DEFAULT_TYPE_GROUP

class QuestionGroup(Base):
    __tablename__ = "question_groups"
    __table_args__ = (
        UniqueConstraint("exam_id", "part_id", "order", name="uq_question_groups_scope_order"),
    )

    id = Column(Integer, primary_key=True, index=True)
    part_id = Column(Integer, ForeignKey("parts.id"), nullable=False, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id"), nullable=False, index=True)
    order = Column(Integer, nullable=False)
    type_group = Column(Integer, nullable=False, default=DEFAULT_TYPE_GROUP)
    title = Column(String, nullable=True)
    description = Column(String, nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    part = relationship("Part", back_populates="question_groups")
    exam = relationship("Exam", back_populates="question_groups")
    questions = relationship("Question", back_populates="group", order_by="Question.global_order")
    elements = relationship("Element", back_populates="group", cascade="all, delete-orphan", order_by="Element.id")
