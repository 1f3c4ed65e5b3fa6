from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Float, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import JSONB
from app.core.database import Base

class Question(Base):
    __tablename__ = "questions"
    __table_args__ = (
        # exam_id/part_id mirror the owning group so the database can enforce both ordering scopes
        UniqueConstraint("exam_id", "part_id", "order", name="uq_questions_scope_order"),
        UniqueConstraint("exam_id", "global_order", name="uq_questions_exam_global_order"),
    )

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(Integer, ForeignKey("question_groups.id"), nullable=False, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id"), nullable=False, index=True)
    part_id = Column(Integer, ForeignKey("parts.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    option = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False)
    correct_option = Column(String, nullable=False)
    score = Column(Float, nullable=False, default=1)
    order = Column(Integer, nullable=False)
    global_order = Column(Integer, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    group = relationship("QuestionGroup", back_populates="questions")
    elements = relationship("Element", back_populates="question", cascade="all, delete-orphan", order_by="Element.id")
