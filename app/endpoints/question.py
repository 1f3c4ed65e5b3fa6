from typing import List, Optional
from fastapi import APIRouter, Depends, File, Query, Request, UploadFile, status
from sqlalchemy.orm import Session

from app.core.cache import cache
from app.core.cache_config import CACHE_KEYS, CACHE_TTL
from app.core.constants import QUESTION_ID_REQUIRED
from app.core.exceptions import InvalidRequestError
from app.schemas.question import Question, QuestionMessage, QuestionUpdate
from app.schemas.question_group import (
    PaginatedQuestionGroups,
    PartQuestions,
    QuestionGroup,
    QuestionGroupCreate,
    QuestionGroupCreated,
    QuestionGroupMessage,
)
from app.schemas.spreadsheet import SpreadsheetImportResponse, SpreadsheetUploadRequest
from app.services.exam_composition import exam_composition_service
from app.services.exam_hierarchy import exam_hierarchy_service
from app.services.spreadsheet_import import spreadsheet_import_service
from app.services.spreadsheet_parser import parse_question_workbook
from app.utils import deps
from app.utils.forms import parse_question_form, parse_question_group_form

router = APIRouter()


@router.get("", response_model=PaginatedQuestionGroups)
async def get_questions_by_part_and_exam(
    db: Session = Depends(deps.get_db),
    exam_id: Optional[int] = Query(None),
    part_id: Optional[int] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
):
    cache_key = CACHE_KEYS["part_questions"].format(exam_id, part_id, page, limit)
    cached = await cache.get(cache_key)
    if cached is not None:
        return cached

    result = exam_hierarchy_service.get_questions_by_part_and_exam(
        db, exam_id=exam_id, part_id=part_id, page=page, limit=limit
    )
    await cache.set(cache_key, result.model_dump(mode="json", by_alias=True), ttl=CACHE_TTL["part_questions"])
    return result


@router.get("/exams/{exam_id}", response_model=List[PartQuestions])
async def get_all_questions_for_exam(
    exam_id: int,
    db: Session = Depends(deps.get_db),
):
    cache_key = CACHE_KEYS["exam_questions"].format(exam_id)
    cached = await cache.get(cache_key)
    if cached is not None:
        return cached

    result = exam_hierarchy_service.get_all_questions_for_exam(db, exam_id=exam_id)
    await cache.set(
        cache_key,
        [entry.model_dump(mode="json", by_alias=True) for entry in result],
        ttl=CACHE_TTL["exam_questions"],
    )
    return result


@router.post("", response_model=QuestionGroupCreated, status_code=status.HTTP_201_CREATED)
async def create_question_group(
    request: Request,
    db: Session = Depends(deps.get_db),
    part_id: Optional[int] = Query(None),
    exam_id: Optional[int] = Query(None),
):
    exam_composition_service.require_scope_ids(part_id, exam_id)
    form = parse_question_group_form(await request.form())
    group_in = deps.validate_form(QuestionGroupCreate, form.as_payload())

    group = exam_composition_service.create_question_group(
        db,
        part_id=part_id,
        exam_id=exam_id,
        group_in=group_in,
        group_files=form.group_files,
        question_files=form.question_files,
    )
    await cache.invalidate_exam_cache(exam_id)
    return QuestionGroupCreated(
        message="Questions created successfully.",
        new_group=QuestionGroup.model_validate(group),
    )


@router.put("", response_model=QuestionMessage)
async def update_question(
    request: Request,
    db: Session = Depends(deps.get_db),
    question_id: Optional[int] = Query(None),
):
    if not question_id:
        raise InvalidRequestError(QUESTION_ID_REQUIRED)
    fields, files = parse_question_form(await request.form())
    question_in = deps.validate_form(QuestionUpdate, fields)

    question = exam_composition_service.update_question(
        db, question_id=question_id, question_in=question_in, new_files=files
    )
    await cache.invalidate_exam_cache(question.exam_id)
    return QuestionMessage(message="Question updated successfully", question=Question.model_validate(question))


@router.delete("", response_model=QuestionMessage)
async def delete_question(
    db: Session = Depends(deps.get_db),
    question_id: Optional[int] = Query(None),
):
    question = exam_composition_service.soft_delete_question(db, question_id=question_id)
    await cache.invalidate_exam_cache(question.exam_id)
    return QuestionMessage(message="Question deleted successfully", question=Question.model_validate(question))


@router.delete("/groups/{group_id}", response_model=QuestionGroupMessage)
async def delete_question_group(
    group_id: int,
    db: Session = Depends(deps.get_db),
):
    group = exam_composition_service.soft_delete_group(db, group_id=group_id)
    await cache.invalidate_exam_cache(group.exam_id)
    return QuestionGroupMessage(message="Question group deleted successfully", group=QuestionGroup.model_validate(group))


@router.post("/upload-excel", response_model=SpreadsheetImportResponse, status_code=status.HTTP_201_CREATED)
async def upload_excel(
    upload_in: SpreadsheetUploadRequest,
    db: Session = Depends(deps.get_db),
):
    exam_id, results = spreadsheet_import_service.upload_from_spreadsheet(db, upload_in.file)
    await cache.invalidate_exam_cache(exam_id)
    return SpreadsheetImportResponse(message="Excel uploaded successfully", exam_id=exam_id, results=results)


@router.post("/upload-excel-file", response_model=SpreadsheetImportResponse, status_code=status.HTTP_201_CREATED)
async def upload_excel_file(
    file: UploadFile = File(...),
    db: Session = Depends(deps.get_db),
):
    payload = parse_question_workbook(await file.read(), file.filename or "")
    exam_id, results = spreadsheet_import_service.upload_from_spreadsheet(db, payload)
    await cache.invalidate_exam_cache(exam_id)
    return SpreadsheetImportResponse(message="Excel uploaded successfully", exam_id=exam_id, results=results)
