import io
import logging
from typing import Any, Dict, List

import pandas as pd
from pydantic import ValidationError

from app.core.constants import SpreadsheetColumn
from app.core.exceptions import InvalidRequestError
from app.schemas.spreadsheet import SpreadsheetPayload

logger = logging.getLogger(__name__)

EXAM_AND_SUBJECT_SHEET = "ExamAndSubject"

REQUIRED_COLUMNS = [
    SpreadsheetColumn.PART,
    SpreadsheetColumn.ORDER,
    SpreadsheetColumn.QUESTION,
    SpreadsheetColumn.OPTION_A,
    SpreadsheetColumn.OPTION_B,
    SpreadsheetColumn.OPTION_C,
    SpreadsheetColumn.OPTION_D,
    SpreadsheetColumn.CORRECT_OPTION,
]
HEADER_COLUMNS = [SpreadsheetColumn.SUBJECT, SpreadsheetColumn.EXAM]


def _records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    df.columns = [str(column).strip() for column in df.columns]
    blank = df.fillna("").astype(str).apply(lambda column: column.str.strip() == "")
    df = df.astype(object).where(~blank, None).dropna(how="all")
    return df.to_dict(orient="records")


def _read_workbook(file_content: bytes, filename: str) -> Dict[str, pd.DataFrame]:
    # Cells stay text so option values keep the exact form they were typed in
    name = filename.lower()
    try:
        if name.endswith(".csv"):
            return {"": pd.read_csv(io.BytesIO(file_content), dtype=str, keep_default_na=False)}
        if name.endswith((".xlsx", ".xls")):
            return pd.read_excel(io.BytesIO(file_content), sheet_name=None, dtype=str, keep_default_na=False)
    except Exception as e:
        logger.warning(f"Error reading spreadsheet {filename}: {e}")
        raise InvalidRequestError(f"Error parsing file: {e}")
    raise InvalidRequestError("Unsupported file format. Please upload CSV or Excel files.")


def _header_from_columns(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    for row in rows:
        subject = row.get(SpreadsheetColumn.SUBJECT.value)
        exam = row.get(SpreadsheetColumn.EXAM.value)
        if subject or exam:
            return [{SpreadsheetColumn.SUBJECT.value: subject, SpreadsheetColumn.EXAM.value: exam}]
    return []


def parse_question_workbook(file_content: bytes, filename: str) -> SpreadsheetPayload:
    """Turn an uploaded workbook into the import payload.

    The first sheet holds one question per row. Subject and Exam come from an
    ``ExamAndSubject`` sheet when present, otherwise from columns of the same
    name on the question rows.
    """
    sheets = _read_workbook(file_content, filename)
    if not sheets:
        raise InvalidRequestError("The uploaded workbook has no sheets")

    header_sheet = sheets.pop(EXAM_AND_SUBJECT_SHEET, None)
    questions_df = next(iter(sheets.values()), None)
    if questions_df is None:
        raise InvalidRequestError("The uploaded workbook has no question sheet")

    detail_questions = _records(questions_df)
    columns = {str(column).strip() for column in questions_df.columns}
    missing_columns = [column.value for column in REQUIRED_COLUMNS if column.value not in columns]
    if missing_columns:
        raise InvalidRequestError(f"Missing required columns: {', '.join(missing_columns)}")

    if header_sheet is not None:
        exam_and_subject = _records(header_sheet)
        header_columns = {str(column).strip() for column in header_sheet.columns}
        missing_header = [column.value for column in HEADER_COLUMNS if column.value not in header_columns]
        if missing_header:
            raise InvalidRequestError(
                f"Missing required columns in {EXAM_AND_SUBJECT_SHEET}: {', '.join(missing_header)}"
            )
    else:
        exam_and_subject = _header_from_columns(detail_questions)

    try:
        payload = SpreadsheetPayload(detail_questions=detail_questions, exam_and_subject=exam_and_subject)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise InvalidRequestError(f"Invalid value in {location}: {first['msg']}")

    logger.info(f"Parsed {len(detail_questions)} question row(s) from {filename}")
    return payload
