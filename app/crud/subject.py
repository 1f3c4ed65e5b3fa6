from typing import Optional
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.subject import Subject
from app.schemas.subject import SubjectCreate

class CRUDSubject(CRUDBase[Subject, SubjectCreate, SubjectCreate]):

    def get_by_name(self, db: Session, *, name: str) -> Optional[Subject]:
        return self._query_active(db).filter(Subject.name == name).first()

    def get_or_create(self, db: Session, *, name: str, commit: bool = True) -> Subject:
        existing = self.get_by_name(db, name=name)
        if existing:
            return existing
        return self.create(db, obj_in={"name": name}, commit=commit)

subject = CRUDSubject(Subject)
