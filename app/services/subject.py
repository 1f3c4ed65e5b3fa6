from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError
from app.crud.subject import subject as crud_subject
from app.models.subject import Subject
from app.schemas.subject import SubjectCreate


class SubjectService:

    def list_subjects(self, db: Session) -> List[Subject]:
        return crud_subject.get_multi(db, limit=1000)

    def create_subject(self, db: Session, *, subject_in: SubjectCreate) -> Subject:
        if crud_subject.get_by_name(db, name=subject_in.name):
            raise ConflictError(f"{subject_in.name} already exists!")
        return crud_subject.create(db, obj_in=subject_in)


subject_service = SubjectService()
