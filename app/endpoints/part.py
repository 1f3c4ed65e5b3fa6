from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.cache import cache
from app.schemas.part import Part, PartCreate, PartUpdate
from app.schemas.response import APIResponse
from app.services.part import part_service
from app.utils import deps

router = APIRouter()


@router.get("", response_model=APIResponse[List[Part]])
async def get_parts(db: Session = Depends(deps.get_db)):
    parts = part_service.list_parts(db)
    return APIResponse(message="Parts retrieved successfully", data=[Part.model_validate(p) for p in parts])


@router.post("", response_model=APIResponse[Part], status_code=status.HTTP_201_CREATED)
async def create_part(
    part_in: PartCreate,
    db: Session = Depends(deps.get_db),
):
    new_part = part_service.create_part(db, part_in=part_in)
    return APIResponse(message="Part created and linked to all exams", data=Part.model_validate(new_part))


@router.put("/{part_id}", response_model=APIResponse[Part])
async def update_part(
    part_id: int,
    part_in: PartUpdate,
    db: Session = Depends(deps.get_db),
):
    updated_part = part_service.update_part(db, part_id=part_id, part_in=part_in)
    # Part names appear in every exam's hierarchy
    await cache.invalidate_all_exams()
    return APIResponse(message="Part updated successfully", data=Part.model_validate(updated_part))


@router.delete("/{part_id}", response_model=APIResponse[Part])
async def delete_part(
    part_id: int,
    db: Session = Depends(deps.get_db),
):
    deleted_part = part_service.delete_part(db, part_id=part_id)
    await cache.invalidate_all_exams()
    return APIResponse(message="Part was deleted!", data=Part.model_validate(deleted_part))
