from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.element import Element
from app.schemas.element import ElementBase
from app.core.constants import ElementTypeEnum


class CRUDElement(CRUDBase[Element, ElementBase, ElementBase]):

    def create_for_group(
        self, db: Session, *, group_id: int, type: ElementTypeEnum, url: str, cloud_id: bool = False
    ) -> Element:
        return self.create(
            db,
            obj_in={"type": type, "url": url, "group_id": group_id, "cloud_id": cloud_id},
            commit=False,
        )

    def create_for_question(
        self, db: Session, *, question_id: int, type: ElementTypeEnum, url: str, cloud_id: bool = False
    ) -> Element:
        return self.create(
            db,
            obj_in={"type": type, "url": url, "question_id": question_id, "cloud_id": cloud_id},
            commit=False,
        )

    def delete_for_question(self, db: Session, *, question_id: int) -> int:
        deleted = (
            db.query(Element)
            .filter(Element.question_id == question_id)
            .delete(synchronize_session=False)
        )
        db.flush()
        return deleted

element = CRUDElement(Element)
