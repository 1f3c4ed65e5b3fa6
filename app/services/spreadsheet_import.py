"""Bulk import of question groups from a parsed spreadsheet.

Every part listed in the sheet gets one new question group. The whole
import commits or rolls back as a unit.
"""
import logging
from collections import OrderedDict
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.constants import (
    CORRECT_OPTION_PREFIX,
    DEFAULT_SPREADSHEET_SCORE,
    DEFAULT_TYPE_GROUP,
    OPTION_LABELS,
)
from app.core.exceptions import InvalidRequestError
from app.core.transaction import TransactionScope
from app.crud.element import element as crud_element
from app.crud.exam import exam as crud_exam
from app.crud.exam_part import exam_part as crud_exam_part
from app.crud.part import part as crud_part
from app.crud.question import question as crud_question
from app.crud.question_group import question_group as crud_question_group
from app.crud.subject import subject as crud_subject
from app.models.exam import Exam
from app.models.part import Part
from app.schemas.spreadsheet import SpreadsheetPartResult, SpreadsheetPayload, SpreadsheetRow
from app.services.attachment_storage import AttachmentStorage, attachment_storage
from app.services.exam_composition import run_write_transaction
from app.services.ordering import OrderingAllocator, ordering_allocator

logger = logging.getLogger(__name__)

MISSING_FILE_DATA = "Missing Excel file data"
MISSING_EXAM_AND_SUBJECT = "Missing Exam and Subject information in the Excel file"
MISSING_SUBJECT_OR_EXAM = "Missing Subject or Exam name in the Excel file"
MISSING_PART = "Missing Part information in the Excel file"


def normalize_correct_option(value: Optional[str], question_title: Optional[str]) -> str:
    if not value:
        raise InvalidRequestError(f'Missing correct option for question "{question_title}"')
    label = value.replace(CORRECT_OPTION_PREFIX, "", 1).strip()
    if label not in OPTION_LABELS:
        raise InvalidRequestError(f'Invalid correct option "{value}" for question "{question_title}"')
    return label


def build_options(row: SpreadsheetRow) -> Dict[str, str]:
    values = (row.option_a, row.option_b, row.option_c, row.option_d)
    return {label: text for label, text in zip(OPTION_LABELS, values) if text is not None}


def group_rows_by_part(rows: List[SpreadsheetRow]) -> "OrderedDict[str, List[SpreadsheetRow]]":
    grouped: "OrderedDict[str, List[SpreadsheetRow]]" = OrderedDict()
    for row in rows:
        if not row.part:
            raise InvalidRequestError(MISSING_PART)
        grouped.setdefault(row.part, []).append(row)
    return grouped


def sort_rows(rows: List[SpreadsheetRow]) -> List[SpreadsheetRow]:
    # Rows without an Order keep their sheet position after the numbered ones
    return sorted(rows, key=lambda row: (row.order is None, row.order if row.order is not None else 0))


class SpreadsheetImportService:

    def __init__(self, storage: AttachmentStorage, allocator: OrderingAllocator):
        self.storage = storage
        self.allocator = allocator

    def _resolve_exam(self, db: Session, *, subject_name: str, exam_name: str, part_names: List[str]) -> Exam:
        subject = crud_subject.get_or_create(db, name=subject_name, commit=False)
        exam = crud_exam.get_by_name(db, name=exam_name, subject_id=subject.id)
        if exam:
            return exam

        exam = crud_exam.create(db, obj_in={"name": exam_name, "subject_id": subject.id}, commit=False)
        logger.info(f"Created exam '{exam_name}' under subject '{subject_name}' from spreadsheet")
        for part_name in part_names:
            part = crud_part.get_by_name(db, name=part_name)
            if part:
                crud_exam_part.get_or_create_link(db, exam_id=exam.id, part_id=part.id)
        return exam

    def _resolve_parts(self, db: Session, *, exam: Exam, part_names: List[str]) -> List[Tuple[int, Part]]:
        """Part rows keyed by their exam link id, in link order."""
        resolved = []
        for part_name in part_names:
            part = crud_part.get_by_name(db, name=part_name)
            if not part:
                raise InvalidRequestError(f"Part not found: {part_name}")
            link = crud_exam_part.get_or_create_link(db, exam_id=exam.id, part_id=part.id)
            resolved.append((link.id, part))
        return sorted(resolved, key=lambda item: item[0])

    def _import_part(
        self,
        db: Session,
        *,
        exam: Exam,
        part: Part,
        rows: List[SpreadsheetRow],
        global_orders,
    ) -> SpreadsheetPartResult:
        rows = sort_rows(rows)
        first = rows[0]
        group = crud_question_group.create_group(
            db,
            part_id=part.id,
            exam_id=exam.id,
            order=self.allocator.next_group_order(db, part_id=part.id, exam_id=exam.id),
            type_group=DEFAULT_TYPE_GROUP,
            title=first.title_group or "",
            description=first.description_group or "",
        )
        if first.element_group:
            crud_element.create_for_group(
                db,
                group_id=group.id,
                type=self.storage.classify_url(first.element_group),
                url=first.element_group,
                cloud_id=True,
            )

        orders = self.allocator.question_orders(db, part_id=part.id, exam_id=exam.id)
        for row in rows:
            if not row.question:
                raise InvalidRequestError(f'Missing question text in part "{part.name}"')
            options = build_options(row)
            if not options:
                raise InvalidRequestError(f'Question "{row.question}" has no options')
            question = crud_question.create_question(
                db,
                group=group,
                fields={
                    "title": row.question,
                    "description": row.description or "",
                    "option": options,
                    "correct_option": normalize_correct_option(row.correct_option, row.question),
                    "score": DEFAULT_SPREADSHEET_SCORE,
                },
                order=orders.take(),
                global_order=global_orders.take(),
            )
            if row.element:
                crud_element.create_for_question(
                    db,
                    question_id=question.id,
                    type=self.storage.classify_url(row.element),
                    url=row.element,
                    cloud_id=True,
                )

        return SpreadsheetPartResult(part=part.name, group_id=group.id, questions_count=len(rows))

    def upload_from_spreadsheet(
        self, db: Session, payload: Optional[SpreadsheetPayload]
    ) -> Tuple[int, List[SpreadsheetPartResult]]:
        if payload is None:
            raise InvalidRequestError(MISSING_FILE_DATA)
        if not payload.exam_and_subject:
            raise InvalidRequestError(MISSING_EXAM_AND_SUBJECT)

        header = payload.exam_and_subject[0]
        if not header.subject or not header.exam:
            raise InvalidRequestError(MISSING_SUBJECT_OR_EXAM)

        rows_by_part = group_rows_by_part(payload.detail_questions)
        part_names = list(rows_by_part)

        def work(scope: TransactionScope) -> Tuple[int, List[SpreadsheetPartResult]]:
            exam = self._resolve_exam(db, subject_name=header.subject, exam_name=header.exam, part_names=part_names)
            self.allocator.lock_exam(db, exam.id)
            global_orders = self.allocator.global_orders(db, exam_id=exam.id)

            results = []
            for _, part in self._resolve_parts(db, exam=exam, part_names=part_names):
                scope.check_deadline()
                results.append(
                    self._import_part(
                        db, exam=exam, part=part, rows=rows_by_part[part.name], global_orders=global_orders
                    )
                )
            return exam.id, results

        exam_id, results = run_write_transaction(db, work, action="import spreadsheet")
        logger.info(
            f"Imported {sum(r.questions_count for r in results)} question(s) across "
            f"{len(results)} part(s) into exam {exam_id}"
        )
        return exam_id, results


spreadsheet_import_service = SpreadsheetImportService(attachment_storage, ordering_allocator)
