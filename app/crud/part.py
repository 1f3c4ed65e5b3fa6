from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.part import Part
from app.schemas.part import PartCreate, PartUpdate

class CRUDPart(CRUDBase[Part, PartCreate, PartUpdate]):

    def get_by_name(self, db: Session, *, name: str) -> Optional[Part]:
        return self._query_active(db).filter(Part.name == name).first()

    def get_ordered(self, db: Session) -> List[Part]:
        return self._query_active(db).order_by(Part.order.asc(), Part.id.asc()).all()

    def get_max_order(self, db: Session) -> int:
        return db.query(func.max(Part.order)).scalar() or 0

part = CRUDPart(Part)
