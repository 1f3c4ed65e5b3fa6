from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base

class ExamPart(Base):
    __tablename__ = "exam_parts"
    __table_args__ = (
        UniqueConstraint("exam_id", "part_id", name="uq_exam_parts_exam_part"),
    )

    id = Column(Integer, primary_key=True, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id"), nullable=False, index=True)
    part_id = Column(Integer, ForeignKey("parts.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    exam = relationship("Exam", back_populates="exam_parts")
    part = relationship("Part", back_populates="exam_parts")
