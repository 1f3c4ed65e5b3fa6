from typing import List, Optional, Tuple
from sqlalchemy.orm import Session, joinedload

from app.crud.base import CRUDBase
from app.models.exam import Exam
from app.schemas.exam import ExamCreate, ExamUpdate


class CRUDExam(CRUDBase[Exam, ExamCreate, ExamUpdate]):

    def _query_with_subject(self, db: Session):
        return self._query_active(db).options(joinedload(Exam.subject))

    def get_by_name(self, db: Session, *, name: str, subject_id: Optional[int] = None) -> Optional[Exam]:
        query = self._query_active(db).filter(Exam.name == name)
        if subject_id is not None:
            query = query.filter(Exam.subject_id == subject_id)
        return query.first()

    def get_by_name_excluding(self, db: Session, *, name: str, exclude_id: int) -> Optional[Exam]:
        return self._query_active(db).filter(Exam.name == name, Exam.id != exclude_id).first()

    def get_for_update(self, db: Session, *, id: int) -> Optional[Exam]:
        """Locking read; serialises order allocation within one exam."""
        return (
            db.query(Exam)
            .filter(Exam.id == id, Exam.deleted_at.is_(None))
            .with_for_update()
            .first()
        )

    def get_page(self, db: Session, *, skip: int = 0, limit: Optional[int] = 10) -> Tuple[List[Exam], int]:
        query = self._query_with_subject(db).order_by(Exam.created_at.desc(), Exam.id.desc())
        total = self._query_active(db).count()
        if limit is not None:
            query = query.offset(skip).limit(limit)
        return query.all(), total

    def get_by_subject(self, db: Session, *, subject_id: int) -> List[Exam]:
        return (
            self._query_with_subject(db)
            .filter(Exam.subject_id == subject_id)
            .order_by(Exam.id.asc())
            .all()
        )

    def get_all_active(self, db: Session) -> List[Exam]:
        return self._query_active(db).all()

exam = CRUDExam(Exam)
