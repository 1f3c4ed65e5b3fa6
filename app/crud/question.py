from typing import Any, Dict, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload, joinedload

from app.crud.base import CRUDBase
from app.models.exam_part import ExamPart
from app.models.question import Question
from app.models.question_group import QuestionGroup
from app.schemas.question import QuestionCreate, QuestionUpdate


class CRUDQuestion(CRUDBase[Question, QuestionCreate, QuestionUpdate]):

    def get_with_context(self, db: Session, *, id: int) -> Optional[Question]:
        """Live question with its elements, group, part and exam loaded."""
        return (
            self._query_active(db)
            .options(
                selectinload(Question.elements),
                joinedload(Question.group).joinedload(QuestionGroup.part),
                joinedload(Question.group).joinedload(QuestionGroup.exam),
            )
            .filter(Question.id == id)
            .first()
        )

    def create_question(
        self,
        db: Session,
        *,
        group: QuestionGroup,
        fields: Dict[str, Any],
        order: int,
        global_order: int,
    ) -> Question:
        return self.create(
            db,
            obj_in={
                **fields,
                "group_id": group.id,
                "exam_id": group.exam_id,
                "part_id": group.part_id,
                "order": order,
                "global_order": global_order,
            },
            commit=False,
        )

    def update_question(self, db: Session, *, db_obj: Question, update_data: Dict[str, Any]) -> Question:
        return self.update(db, db_obj=db_obj, obj_in=update_data, commit=False)

    def soft_delete(self, db: Session, *, id: int) -> Optional[Question]:
        return self.remove(db, id=id, commit=False)

    # Max lookups include soft-deleted rows so their orders are never reused
    def get_max_order(self, db: Session, *, part_id: int, exam_id: int) -> int:
        return (
            db.query(func.max(Question.order))
            .filter(Question.part_id == part_id, Question.exam_id == exam_id)
            .scalar()
        ) or 0

    def get_max_global_order(self, db: Session, *, exam_id: int) -> int:
        return (
            db.query(func.max(Question.global_order))
            .filter(Question.exam_id == exam_id)
            .scalar()
        ) or 0

    def count_in_scope(self, db: Session, *, part_id: int, exam_id: int) -> int:
        return (
            db.query(func.count(Question.id))
            .join(QuestionGroup, Question.group_id == QuestionGroup.id)
            .join(
                ExamPart,
                (ExamPart.part_id == QuestionGroup.part_id) & (ExamPart.exam_id == QuestionGroup.exam_id),
            )
            .filter(
                QuestionGroup.part_id == part_id,
                QuestionGroup.exam_id == exam_id,
                QuestionGroup.deleted_at.is_(None),
                Question.deleted_at.is_(None),
            )
            .scalar()
        ) or 0

question = CRUDQuestion(Question)
