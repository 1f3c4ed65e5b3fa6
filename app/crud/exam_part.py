from typing import Iterable, List, Optional
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.exam_part import ExamPart
from app.schemas.exam import ExamPartLink


class CRUDExamPart(CRUDBase[ExamPart, ExamPartLink, ExamPartLink]):

    def get_link(self, db: Session, *, exam_id: int, part_id: int) -> Optional[ExamPart]:
        return (
            db.query(ExamPart)
            .filter(ExamPart.exam_id == exam_id, ExamPart.part_id == part_id)
            .first()
        )

    def get_or_create_link(self, db: Session, *, exam_id: int, part_id: int) -> ExamPart:
        link = self.get_link(db, exam_id=exam_id, part_id=part_id)
        if link:
            return link
        return self.create(db, obj_in={"exam_id": exam_id, "part_id": part_id}, commit=False)

    def link_exam_to_parts(self, db: Session, *, exam_id: int, part_ids: Iterable[int]) -> List[ExamPart]:
        return [self.get_or_create_link(db, exam_id=exam_id, part_id=part_id) for part_id in part_ids]

    def link_part_to_exams(self, db: Session, *, part_id: int, exam_ids: Iterable[int]) -> List[ExamPart]:
        return [self.get_or_create_link(db, exam_id=exam_id, part_id=part_id) for exam_id in exam_ids]

exam_part = CRUDExamPart(ExamPart)
