import io

import pytest
from openpyxl import Workbook

from app.core.exceptions import InvalidRequestError
from app.services.spreadsheet_parser import parse_question_workbook

HEADERS = [
    "Part", "Order", "Title Group", "Description Group", "Element Group", "Question",
    "Description", "Option A", "Option B", "Option C", "Option D", "Correct option", "Element",
]


def _workbook(rows, headers=HEADERS, header_sheet=None):
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(headers)
    for row in rows:
        sheet.append(row)
    if header_sheet is not None:
        extra = workbook.create_sheet("ExamAndSubject")
        for row in header_sheet:
            extra.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def test_parses_rows_and_header_sheet():
    content = _workbook(
        [["Part 1", 1, "Passage", None, None, "What is it?", None, "a", "b", "c", "d", "Option B", None]],
        header_sheet=[["Subject", "Exam"], ["IELTS", "Mock 1"]],
    )

    payload = parse_question_workbook(content, "questions.xlsx")

    assert len(payload.detail_questions) == 1
    row = payload.detail_questions[0]
    assert (row.part, row.order, row.question, row.correct_option) == ("Part 1", 1, "What is it?", "Option B")
    assert row.description is None
    assert row.element is None
    assert (payload.exam_and_subject[0].subject, payload.exam_and_subject[0].exam) == ("IELTS", "Mock 1")


def test_blank_rows_are_skipped():
    content = _workbook(
        [
            ["Part 1", 1, None, None, None, "Q1", None, "a", "b", "c", "d", "Option A", None],
            [None] * len(HEADERS),
            ["Part 1", 2, None, None, None, "Q2", None, "a", "b", "c", "d", "Option D", None],
        ],
        header_sheet=[["Subject", "Exam"], ["IELTS", "Mock 1"]],
    )

    payload = parse_question_workbook(content, "questions.xlsx")

    assert [r.question for r in payload.detail_questions] == ["Q1", "Q2"]


def test_header_falls_back_to_columns():
    headers = HEADERS + ["Subject", "Exam"]
    content = _workbook(
        [["Part 1", 1, None, None, None, "Q1", None, "a", "b", "c", "d", "Option A", None, "TOEIC", "Practice"]],
        headers=headers,
    )

    payload = parse_question_workbook(content, "questions.xlsx")

    assert (payload.exam_and_subject[0].subject, payload.exam_and_subject[0].exam) == ("TOEIC", "Practice")


def test_csv_is_accepted():
    lines = [
        ",".join(HEADERS + ["Subject", "Exam"]),
        "Part 1,1,,,,Q1,,a,b,c,d,Option A,,TOEIC,Practice",
    ]
    payload = parse_question_workbook("\n".join(lines).encode(), "questions.csv")

    assert payload.detail_questions[0].question == "Q1"
    assert payload.detail_questions[0].order == 1


def test_missing_required_column():
    headers = [h for h in HEADERS if h != "Correct option"]
    content = _workbook([["Part 1", 1, None, None, None, "Q1", None, "a", "b", "c", "d", None]], headers=headers)

    with pytest.raises(InvalidRequestError) as exc_info:
        parse_question_workbook(content, "questions.xlsx")

    assert exc_info.value.detail == "Missing required columns: Correct option"


def test_unsupported_extension():
    with pytest.raises(InvalidRequestError) as exc_info:
        parse_question_workbook(b"irrelevant", "questions.pdf")

    assert exc_info.value.status_code == 400


def test_corrupt_workbook():
    with pytest.raises(InvalidRequestError) as exc_info:
        parse_question_workbook(b"not a zip file", "questions.xlsx")

    assert exc_info.value.detail.startswith("Error parsing file")


def test_non_numeric_order():
    content = _workbook(
        [["Part 1", "first", None, None, None, "Q1", None, "a", "b", "c", "d", "Option A", None]],
        header_sheet=[["Subject", "Exam"], ["IELTS", "Mock 1"]],
    )

    with pytest.raises(InvalidRequestError) as exc_info:
        parse_question_workbook(content, "questions.xlsx")

    assert exc_info.value.detail.startswith("Invalid value in")


def test_numeric_options_keep_their_text():
    content = _workbook(
        [
            ["Part 1", 1, None, None, None, "Which year?", None, 1990, 1991, 1992, 1993, "Option C", None],
            ["Part 1", 2, None, None, None, "Which two?", None, 1, 2, None, None, "Option A", None],
        ],
        header_sheet=[["Subject", "Exam"], ["IELTS", "Mock 1"]],
    )

    payload = parse_question_workbook(content, "questions.xlsx")

    first, second = payload.detail_questions
    assert (first.option_a, first.option_b, first.option_c, first.option_d) == ("1990", "1991", "1992", "1993")
    assert (second.option_a, second.option_b, second.option_c, second.option_d) == ("1", "2", None, None)
    assert (first.order, second.order) == (1, 2)


def test_csv_keeps_literal_na_text():
    content = (
        "Subject,Exam,Part,Order,Question,Option A,Option B,Option C,Option D,Correct option\n"
        "IELTS,Mock 1,Part 1,1,Pick one,NA,007,,,Option B\n"
    ).encode()

    payload = parse_question_workbook(content, "questions.csv")

    row = payload.detail_questions[0]
    assert (row.option_a, row.option_b, row.option_c) == ("NA", "007", None)
