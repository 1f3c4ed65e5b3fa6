import logging
import math
from collections import OrderedDict
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.constants import EXAM_OR_PART_REQUIRED, EXAM_VIEW_LIMIT, EXAM_VIEW_PAGE
from app.core.exceptions import InvalidRequestError, NotFoundError
from app.crud.exam import exam as crud_exam
from app.crud.exam_part import exam_part as crud_exam_part
from app.crud.question import question as crud_question
from app.crud.question_group import question_group as crud_question_group
from app.schemas.question import Question
from app.schemas.question_group import (
    PaginatedQuestionGroups,
    PartQuestions,
    QuestionGroupWithQuestions,
)

logger = logging.getLogger(__name__)


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


class ExamHierarchyService:

    def get_all_questions_for_exam(self, db: Session, *, exam_id: int) -> List[PartQuestions]:
        """Every part of an exam collapsed into one synthetic group.

        The synthetic group keeps the first group's metadata and carries all
        of the part's questions by ``global_order`` plus every group element.
        """
        if not crud_exam.get(db, id=exam_id):
            raise NotFoundError("Exam not found")

        by_part: "OrderedDict[int, List[QuestionGroupWithQuestions]]" = OrderedDict()
        part_names = {}
        for group in crud_question_group.list_for_exam(db, exam_id=exam_id):
            by_part.setdefault(group.part_id, []).append(QuestionGroupWithQuestions.model_validate(group))
            part_names[group.part_id] = group.part.name

        result = []
        for part_id, groups in by_part.items():
            questions = sorted(
                (q for g in groups for q in g.questions), key=lambda q: q.global_order
            )
            elements = [e for g in groups for e in g.elements]
            merged = groups[0].model_copy(update={"questions": questions, "elements": elements})
            result.append(
                PartQuestions(
                    part=part_names[part_id],
                    data=[merged],
                    total=len(questions),
                    page=EXAM_VIEW_PAGE,
                    limit=EXAM_VIEW_LIMIT,
                    total_pages=total_pages(len(questions), EXAM_VIEW_LIMIT),
                )
            )
        return result

    def get_questions_by_part_and_exam(
        self,
        db: Session,
        *,
        exam_id: Optional[int],
        part_id: Optional[int],
        page: int = 1,
        limit: int = 10,
    ) -> PaginatedQuestionGroups:
        if not exam_id or not part_id:
            raise InvalidRequestError(EXAM_OR_PART_REQUIRED)

        if not crud_exam_part.get_link(db, exam_id=exam_id, part_id=part_id):
            raise NotFoundError("Exam or part not found!")

        total = crud_question.count_in_scope(db, part_id=part_id, exam_id=exam_id)
        groups = [
            QuestionGroupWithQuestions.model_validate(g)
            for g in crud_question_group.list_with_questions(db, part_id=part_id, exam_id=exam_id)
        ]

        skip = (page - 1) * limit
        flattened = [(group.id, q) for group in groups for q in group.questions]
        page_slice = flattened[skip:skip + limit]

        surviving: "OrderedDict[int, List[Question]]" = OrderedDict()
        for index, (group_id, question) in enumerate(page_slice):
            stamped = question.model_copy(update={"display_order": skip + index + 1})
            surviving.setdefault(group_id, []).append(stamped)

        data = [
            group.model_copy(update={"questions": surviving[group.id]})
            for group in groups
            if group.id in surviving
        ]
        logger.debug(
            f"Part {part_id} of exam {exam_id}: page {page} holds {len(page_slice)} of {total} question(s)"
        )
        return PaginatedQuestionGroups(
            data=data,
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages(total, limit),
        )


exam_hierarchy_service = ExamHierarchyService()
