import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, GoneError, NotFoundError, UnprocessableError
from app.core.transaction import transaction_scope
from app.crud.exam import exam as crud_exam
from app.crud.exam_part import exam_part as crud_exam_part
from app.crud.part import part as crud_part
from app.models.part import Part
from app.schemas.part import PartCreate, PartUpdate

logger = logging.getLogger(__name__)


class PartService:

    def list_parts(self, db: Session) -> List[Part]:
        return crud_part.get_ordered(db)

    def create_part(self, db: Session, *, part_in: PartCreate) -> Part:
        if not part_in.name:
            raise UnprocessableError("Name is required!")
        if crud_part.get_by_name(db, name=part_in.name):
            raise ConflictError(f"{part_in.name} already exists!")

        with transaction_scope(db):
            order = part_in.order if part_in.order is not None else crud_part.get_max_order(db) + 1
            new_part = crud_part.create(db, obj_in={"name": part_in.name, "order": order}, commit=False)
            exam_ids = [e.id for e in crud_exam.get_all_active(db)]
            crud_exam_part.link_part_to_exams(db, part_id=new_part.id, exam_ids=exam_ids)

        logger.info(f"Created part '{new_part.name}' and linked it to {len(exam_ids)} exam(s)")
        return new_part

    def update_part(self, db: Session, *, part_id: int, part_in: PartUpdate) -> Part:
        if not part_in.name:
            raise UnprocessableError("Name is required!")
        part = crud_part.get(db, id=part_id)
        if not part:
            raise NotFoundError("Part not found!")
        existing = crud_part.get_by_name(db, name=part_in.name)
        if existing and existing.id != part.id:
            raise ConflictError(f"{part_in.name} already exists!")
        return crud_part.update(db, db_obj=part, obj_in={"name": part_in.name})

    def delete_part(self, db: Session, *, part_id: int) -> Part:
        part = crud_part.get_including_deleted(db, id=part_id)
        if not part:
            raise NotFoundError("Part not found!")
        if part.deleted_at:
            raise GoneError("Part already deleted!")
        return crud_part.remove(db, id=part_id)


part_service = PartService()
