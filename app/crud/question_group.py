from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload, joinedload

from app.crud.base import CRUDBase
from app.models.question import Question
from app.models.question_group import QuestionGroup
from app.schemas.question_group import QuestionGroupCreate


class CRUDQuestionGroup(CRUDBase[QuestionGroup, QuestionGroupCreate, QuestionGroupCreate]):

    def _query_with_questions(self, db: Session):
        return (
            self._query_active(db)
            .options(
                selectinload(QuestionGroup.questions.and_(Question.deleted_at.is_(None)))
                .selectinload(Question.elements),
                selectinload(QuestionGroup.elements),
            )
            .execution_options(populate_existing=True)
        )

    def create_group(
        self,
        db: Session,
        *,
        part_id: int,
        exam_id: int,
        order: int,
        type_group: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> QuestionGroup:
        return self.create(
            db,
            obj_in={
                "part_id": part_id,
                "exam_id": exam_id,
                "order": order,
                "type_group": type_group,
                "title": title,
                "description": description,
            },
            commit=False,
        )

    def get_max_order(self, db: Session, *, part_id: int, exam_id: int) -> int:
        # Soft-deleted groups still hold their order
        return (
            db.query(func.max(QuestionGroup.order))
            .filter(QuestionGroup.part_id == part_id, QuestionGroup.exam_id == exam_id)
            .scalar()
        ) or 0

    def find_latest_in_scope(self, db: Session, *, part_id: int, exam_id: int) -> Optional[QuestionGroup]:
        return (
            db.query(QuestionGroup)
            .filter(QuestionGroup.part_id == part_id, QuestionGroup.exam_id == exam_id)
            .order_by(QuestionGroup.order.desc())
            .first()
        )

    def list_with_questions(self, db: Session, *, part_id: int, exam_id: int) -> List[QuestionGroup]:
        return (
            self._query_with_questions(db)
            .filter(QuestionGroup.part_id == part_id, QuestionGroup.exam_id == exam_id)
            .order_by(QuestionGroup.order.asc())
            .all()
        )

    def list_for_exam(self, db: Session, *, exam_id: int) -> List[QuestionGroup]:
        return (
            self._query_with_questions(db)
            .options(joinedload(QuestionGroup.part))
            .filter(QuestionGroup.exam_id == exam_id)
            .order_by(QuestionGroup.part_id.asc(), QuestionGroup.order.asc())
            .all()
        )

question_group = CRUDQuestionGroup(QuestionGroup)
