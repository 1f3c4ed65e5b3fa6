from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.cache import cache
from app.schemas.exam import Exam, ExamCreate, ExamUpdate, PaginatedExams
from app.schemas.response import APIResponse
from app.services.exam import exam_service
from app.utils import deps

router = APIRouter()


@router.get("", response_model=PaginatedExams)
async def get_exams(
    db: Session = Depends(deps.get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    all: bool = Query(False),
):
    return exam_service.list_exams(db, page=page, limit=limit, fetch_all=all)


@router.get("/subject/{subject_id}", response_model=APIResponse[List[Exam]])
async def get_exams_by_subject(
    subject_id: int,
    db: Session = Depends(deps.get_db),
):
    exams = exam_service.get_exams_by_subject(db, subject_id=subject_id)
    return APIResponse(message="Exams retrieved successfully", data=[Exam.model_validate(e) for e in exams])


@router.get("/{exam_id}", response_model=APIResponse[Exam])
async def get_exam(
    exam_id: int,
    db: Session = Depends(deps.get_db),
):
    exam = exam_service.get_exam(db, exam_id=exam_id)
    return APIResponse(message="Exam retrieved successfully", data=Exam.model_validate(exam))


@router.post("", response_model=APIResponse[Exam], status_code=status.HTTP_201_CREATED)
async def create_exam(
    exam_in: ExamCreate,
    db: Session = Depends(deps.get_db),
):
    new_exam = exam_service.create_exam(db, exam_in=exam_in)
    return APIResponse(message="Exam created successfully.", data=Exam.model_validate(new_exam))


@router.put("/{exam_id}", response_model=APIResponse[Exam])
async def update_exam(
    exam_id: int,
    exam_in: ExamUpdate,
    db: Session = Depends(deps.get_db),
):
    updated_exam = exam_service.update_exam(db, exam_id=exam_id, exam_in=exam_in)
    await cache.invalidate_exam_cache(exam_id)
    return APIResponse(message="Exam updated successfully", data=Exam.model_validate(updated_exam))


@router.delete("/{exam_id}", response_model=APIResponse[Exam])
async def delete_exam(
    exam_id: int,
    db: Session = Depends(deps.get_db),
):
    deleted_exam = exam_service.delete_exam(db, exam_id=exam_id)
    await cache.invalidate_exam_cache(exam_id)
    return APIResponse(message="Exam was deleted!", data=Exam.model_validate(deleted_exam))
