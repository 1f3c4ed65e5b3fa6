"""Allocation of ``order`` and ``global_order`` values.

Every value is ``max(existing in scope) + 1``. Callers must hold the exam
row lock (``lock_exam``) inside the same transaction as the inserts that
consume the values. The unique constraints on ``question_groups`` and
``questions`` reject anything that slips past the lock.
"""
import logging

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.crud.exam import exam as crud_exam
from app.crud.question import question as crud_question
from app.crud.question_group import question_group as crud_question_group
from app.models.exam import Exam

logger = logging.getLogger(__name__)


class RunningOrder:
    """Hands out consecutive values starting at ``start``."""

    def __init__(self, start: int):
        self._next = start

    def take(self) -> int:
        value = self._next
        self._next += 1
        return value


class OrderingAllocator:

    def lock_exam(self, db: Session, exam_id: int) -> Exam:
        exam = crud_exam.get_for_update(db, id=exam_id)
        if not exam:
            raise NotFoundError("Exam not found")
        return exam

    def next_group_order(self, db: Session, *, part_id: int, exam_id: int) -> int:
        return crud_question_group.get_max_order(db, part_id=part_id, exam_id=exam_id) + 1

    def next_question_order(self, db: Session, *, part_id: int, exam_id: int) -> int:
        return crud_question.get_max_order(db, part_id=part_id, exam_id=exam_id) + 1

    def next_global_order(self, db: Session, *, exam_id: int) -> int:
        return crud_question.get_max_global_order(db, exam_id=exam_id) + 1

    def question_orders(self, db: Session, *, part_id: int, exam_id: int) -> RunningOrder:
        start = self.next_question_order(db, part_id=part_id, exam_id=exam_id)
        logger.debug(f"Question order for part {part_id} / exam {exam_id} starts at {start}")
        return RunningOrder(start)

    def global_orders(self, db: Session, *, exam_id: int) -> RunningOrder:
        start = self.next_global_order(db, exam_id=exam_id)
        logger.debug(f"Global order for exam {exam_id} starts at {start}")
        return RunningOrder(start)


ordering_allocator = OrderingAllocator()
