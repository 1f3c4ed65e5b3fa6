from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.schemas.response import APIResponse
from app.schemas.subject import Subject, SubjectCreate
from app.services.subject import subject_service
from app.utils import deps

router = APIRouter()


@router.get("", response_model=APIResponse[List[Subject]])
async def get_subjects(db: Session = Depends(deps.get_db)):
    subjects = subject_service.list_subjects(db)
    return APIResponse(message="Subjects retrieved successfully", data=[Subject.model_validate(s) for s in subjects])


@router.post("", response_model=APIResponse[Subject], status_code=status.HTTP_201_CREATED)
async def create_subject(
    subject_in: SubjectCreate,
    db: Session = Depends(deps.get_db),
):
    subject = subject_service.create_subject(db, subject_in=subject_in)
    return APIResponse(message="Subject created successfully", data=Subject.model_validate(subject))
