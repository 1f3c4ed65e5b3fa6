import logging
from typing import Callable, Dict, List, Optional, Sequence, TypeVar

from fastapi import HTTPException, UploadFile
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import EXAM_OR_PART_REQUIRED, QUESTION_ID_REQUIRED
from app.core.exceptions import InternalError, InvalidRequestError, NotFoundError
from app.core.transaction import TransactionScope, transaction_scope
from app.crud.element import element as crud_element
from app.crud.exam import exam as crud_exam
from app.crud.part import part as crud_part
from app.crud.question import question as crud_question
from app.crud.question_group import question_group as crud_question_group
from app.models.question import Question
from app.models.question_group import QuestionGroup
from app.schemas.question import QuestionUpdate
from app.schemas.question_group import QuestionGroupCreate
from app.services.attachment_storage import AttachmentStorage, StoredAttachment, attachment_storage
from app.services.ordering import OrderingAllocator, ordering_allocator
from app.utils.options import parse_option_payload

logger = logging.getLogger(__name__)

T = TypeVar("T")


ORDER_CONSTRAINTS = (
    "uq_question_groups_scope_order",
    "uq_questions_scope_order",
    "uq_questions_exam_global_order",
)
ORDER_COLUMNS = (".order", ".global_order")


def is_order_conflict(error: IntegrityError) -> bool:
    """Whether ``error`` is a unique violation on one of the order columns."""
    constraint = getattr(getattr(error.orig, "diag", None), "constraint_name", None)
    if constraint:
        return constraint in ORDER_CONSTRAINTS
    message = str(error.orig)
    if any(name in message for name in ORDER_CONSTRAINTS):
        return True
    # SQLite reports the columns rather than the constraint name
    return "UNIQUE constraint failed" in message and any(column in message for column in ORDER_COLUMNS)


def run_write_transaction(db: Session, work: Callable[[TransactionScope], T], *, action: str) -> T:
    """Run ``work`` in one transaction, retrying when an ordering constraint rejects it.

    A unique violation on an order column means another writer claimed the
    same value; the retry re-reads the max under the exam lock. Any other
    integrity error fails straight away.
    """
    attempts = settings.ORDER_ALLOCATION_MAX_RETRIES + 1
    for attempt in range(1, attempts + 1):
        try:
            with transaction_scope(db) as scope:
                return work(scope)
        except IntegrityError as e:
            if not is_order_conflict(e):
                logger.error(f"Integrity error while trying to {action}: {e.orig}")
                raise InternalError(f"Failed to {action}: {e.orig}", cause=e)
            logger.warning(f"Order conflict while trying to {action} (attempt {attempt}/{attempts}): {e.orig}")
            if attempt == attempts:
                raise InternalError(f"Failed to {action}: {e.orig}", cause=e)
        except HTTPException:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Database error while trying to {action}: {e}")
            raise InternalError(f"Failed to {action}: {e}", cause=e)
    raise InternalError(f"Failed to {action}")


class ExamCompositionService:

    def __init__(self, storage: AttachmentStorage, allocator: OrderingAllocator):
        self.storage = storage
        self.allocator = allocator

    def require_scope_ids(self, part_id: Optional[int], exam_id: Optional[int]) -> None:
        if not exam_id or not part_id:
            raise InvalidRequestError(EXAM_OR_PART_REQUIRED)

    def _save_question_uploads(
        self, question_files: Dict[int, List[UploadFile]], path_dir: str
    ) -> Dict[int, List[StoredAttachment]]:
        saved: Dict[int, List[StoredAttachment]] = {}
        try:
            for index, uploads in question_files.items():
                saved[index] = self.storage.save_uploads(uploads, path_dir)
        except Exception:
            for stored in saved.values():
                self.storage.discard(stored)
            raise
        return saved

    def create_question_group(
        self,
        db: Session,
        *,
        part_id: Optional[int],
        exam_id: Optional[int],
        group_in: QuestionGroupCreate,
        group_files: Sequence[UploadFile] = (),
        question_files: Optional[Dict[int, List[UploadFile]]] = None,
    ) -> QuestionGroup:
        self.require_scope_ids(part_id, exam_id)

        part = crud_part.get(db, id=part_id)
        exam = crud_exam.get(db, id=exam_id)
        if not part or not exam:
            raise NotFoundError("Part or Exam not found")

        path_dir = self.storage.build_path_dir(exam.name, part.name)
        stored_group = self.storage.save_uploads(group_files, path_dir)
        try:
            # Files for an index with no question would never get an element
            matched_files = {
                index: uploads
                for index, uploads in (question_files or {}).items()
                if 0 <= index < len(group_in.questions)
            }
            stored_questions = self._save_question_uploads(matched_files, path_dir)
        except Exception:
            self.storage.discard(stored_group)
            raise

        def work(scope: TransactionScope) -> QuestionGroup:
            self.allocator.lock_exam(db, exam_id)
            group = crud_question_group.create_group(
                db,
                part_id=part_id,
                exam_id=exam_id,
                order=self.allocator.next_group_order(db, part_id=part_id, exam_id=exam_id),
                type_group=group_in.type_group,
                title=group_in.title,
                description=group_in.description,
            )
            for attachment in stored_group:
                crud_element.create_for_group(db, group_id=group.id, type=attachment.type, url=attachment.url)

            global_orders = self.allocator.global_orders(db, exam_id=exam_id)
            orders = self.allocator.question_orders(db, part_id=part_id, exam_id=exam_id)
            for index, question_in in enumerate(group_in.questions):
                scope.check_deadline()
                question = crud_question.create_question(
                    db,
                    group=group,
                    fields={
                        "title": question_in.title,
                        "description": question_in.description,
                        "option": parse_option_payload(question_in.option),
                        "correct_option": question_in.correct_option,
                        "score": question_in.score,
                    },
                    order=orders.take(),
                    global_order=global_orders.take(),
                )
                for attachment in stored_questions.get(index, []):
                    crud_element.create_for_question(
                        db, question_id=question.id, type=attachment.type, url=attachment.url
                    )
            return group

        try:
            group = run_write_transaction(db, work, action="create question group")
        except Exception:
            self.storage.discard(stored_group)
            for stored in stored_questions.values():
                self.storage.discard(stored)
            raise

        logger.info(
            f"Created question group {group.id} (order {group.order}) with "
            f"{len(group_in.questions)} question(s) in part {part_id} of exam {exam_id}"
        )
        return group

    def update_question(
        self,
        db: Session,
        *,
        question_id: Optional[int],
        question_in: QuestionUpdate,
        new_files: Sequence[UploadFile] = (),
    ) -> Question:
        if not question_id:
            raise InvalidRequestError(QUESTION_ID_REQUIRED)

        question = crud_question.get_with_context(db, id=question_id)
        if not question:
            raise NotFoundError("Question not found")

        update_data = question_in.model_dump(exclude_unset=True)
        if update_data.get("option") is not None:
            update_data["option"] = parse_option_payload(update_data["option"])
        else:
            update_data.pop("option", None)

        stored: List[StoredAttachment] = []
        if new_files:
            group = question.group
            path_dir = self.storage.build_path_dir(group.exam.name, group.part.name)
            stored = self.storage.save_uploads(new_files, path_dir)
        replaced_urls = [e.url for e in question.elements if not e.cloud_id] if stored else []

        def work(scope: TransactionScope) -> Question:
            crud_question.update_question(db, db_obj=question, update_data=update_data)
            if stored:
                crud_element.delete_for_question(db, question_id=question.id)
                for attachment in stored:
                    crud_element.create_for_question(
                        db, question_id=question.id, type=attachment.type, url=attachment.url
                    )
            return question

        try:
            updated = run_write_transaction(db, work, action="update question")
        except Exception:
            self.storage.discard(stored)
            raise

        # Old files go only once the new rows are committed
        for url in replaced_urls:
            self.storage.delete_file(url)

        logger.info(f"Updated question {question_id} ({len(stored)} new attachment(s))")
        return updated

    def soft_delete_question(self, db: Session, *, question_id: Optional[int]) -> Question:
        if not question_id:
            raise InvalidRequestError(QUESTION_ID_REQUIRED)

        question = crud_question.get_including_deleted(db, id=question_id)
        if not question:
            raise NotFoundError("Question not found")

        deleted = run_write_transaction(
            db, lambda scope: crud_question.soft_delete(db, id=question_id), action="delete question"
        )
        logger.info(f"Soft-deleted question {question_id}")
        return deleted

    def soft_delete_group(self, db: Session, *, group_id: int) -> QuestionGroup:
        group = crud_question_group.get(db, id=group_id)
        if not group:
            raise NotFoundError("Question group not found")

        deleted = run_write_transaction(
            db, lambda scope: crud_question_group.remove(db, id=group_id, commit=False), action="delete question group"
        )
        logger.info(f"Soft-deleted question group {group_id}")
        return deleted


exam_composition_service = ExamCompositionService(attachment_storage, ordering_allocator)
