import logging
import math
from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import (
    ConflictError,
    GoneError,
    InvalidRequestError,
    NotFoundError,
    UnprocessableError,
)
from app.core.transaction import transaction_scope
from app.crud.exam import exam as crud_exam
from app.crud.exam_part import exam_part as crud_exam_part
from app.crud.part import part as crud_part
from app.crud.subject import subject as crud_subject
from app.models.exam import Exam
from app.schemas.exam import Exam as ExamSchema, ExamCreate, ExamUpdate, PaginatedExams

logger = logging.getLogger(__name__)


class ExamService:

    def list_exams(self, db: Session, *, page: int = 1, limit: int = 10, fetch_all: bool = False) -> PaginatedExams:
        if fetch_all:
            exams, total = crud_exam.get_page(db, limit=None)
            page, limit, pages = 1, total, 1
        else:
            exams, total = crud_exam.get_page(db, skip=(page - 1) * limit, limit=limit)
            pages = math.ceil(total / limit)
        return PaginatedExams(
            data=[ExamSchema.model_validate(e) for e in exams],
            total=total,
            page=page,
            limit=limit,
            total_pages=pages,
        )

    def get_exam(self, db: Session, *, exam_id: int) -> Exam:
        exam = crud_exam.get(db, id=exam_id)
        if not exam:
            raise NotFoundError("Exam not found!")
        return exam

    def create_exam(self, db: Session, *, exam_in: ExamCreate) -> Exam:
        if not exam_in.subject_id or not exam_in.name:
            raise InvalidRequestError("Missing required fields")
        if not crud_subject.get(db, id=exam_in.subject_id):
            raise NotFoundError("Subject not found!")
        if crud_exam.get_by_name(db, name=exam_in.name, subject_id=exam_in.subject_id):
            raise ConflictError("Exam already exists")

        with transaction_scope(db):
            new_exam = crud_exam.create(db, obj_in=exam_in, commit=False)
            part_ids = [p.id for p in crud_part.get_ordered(db)]
            crud_exam_part.link_exam_to_parts(db, exam_id=new_exam.id, part_ids=part_ids)

        logger.info(f"Created exam '{new_exam.name}' with {len(part_ids)} linked part(s)")
        return new_exam

    def update_exam(self, db: Session, *, exam_id: int, exam_in: ExamUpdate) -> Exam:
        if not exam_in.name:
            raise UnprocessableError("Name is required!")
        exam = crud_exam.get(db, id=exam_id)
        if not exam:
            raise NotFoundError("Exam not found!")
        if crud_exam.get_by_name_excluding(db, name=exam_in.name, exclude_id=exam_id):
            raise ConflictError(f"{exam_in.name} already exists!")
        if not exam_in.subject_id:
            raise UnprocessableError("Subject id is required!")
        if not crud_subject.get(db, id=exam_in.subject_id):
            raise NotFoundError("Subject not found!")
        return crud_exam.update(db, db_obj=exam, obj_in={"name": exam_in.name, "subject_id": exam_in.subject_id})

    def delete_exam(self, db: Session, *, exam_id: int) -> Exam:
        exam = crud_exam.get_including_deleted(db, id=exam_id)
        if not exam:
            raise NotFoundError("Exam not found!")
        if exam.deleted_at:
            raise GoneError("Exam already deleted!")
        return crud_exam.remove(db, id=exam_id)

    def get_exams_by_subject(self, db: Session, *, subject_id: int) -> List[Exam]:
        if not crud_subject.get(db, id=subject_id):
            raise NotFoundError("Subject not found!")
        return crud_exam.get_by_subject(db, subject_id=subject_id)


exam_service = ExamService()
