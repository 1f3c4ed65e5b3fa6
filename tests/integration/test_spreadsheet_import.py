import io

from fastapi.testclient import TestClient
from openpyxl import Workbook
from sqlalchemy.orm import Session

from app.models.element import Element
from app.models.exam import Exam
from app.models.exam_part import ExamPart
from app.models.question import Question
from app.models.question_group import QuestionGroup
from app.models.subject import Subject
from tests.helpers.asserts import api_call, assert_error
from tests.helpers.factories import make_part


def _row(part, order, question, correct="Option A", **extra):
    row = {
        "Part": part,
        "Order": order,
        "Title Group": "Passage",
        "Description Group": "Read carefully",
        "Question": question,
        "Option A": "a",
        "Option B": "b",
        "Option C": "c",
        "Option D": "d",
        "Correct option": correct,
    }
    row.update(extra)
    return row


def _payload(rows, subject="IELTS", exam="Mock 1"):
    return {"file": {"detailQuestions": rows, "examAndSubject": [{"Subject": subject, "Exam": exam}]}}


def test_import_creates_one_group_per_part(client: TestClient, db_session: Session):
    make_part(db_session, name="Listening")
    make_part(db_session, name="Reading")
    rows = [
        _row("Listening", 2, "L-second", **{"Element": "https://cdn.example.com/track.MP3"}),
        _row("Reading", 1, "R-first", correct="Option C"),
        _row("Listening", 1, "L-first", **{"Element Group": "https://cdn.example.com/map.png"}),
    ]

    body = api_call(client, "POST", "/questions/upload-excel", json=_payload(rows), expected_status=201)

    assert body["message"] == "Excel uploaded successfully"
    assert [(r["part"], r["questionsCount"]) for r in body["results"]] == [("Listening", 2), ("Reading", 1)]

    exam = db_session.query(Exam).one()
    assert body["examId"] == exam.id
    assert db_session.query(ExamPart).filter_by(exam_id=exam.id).count() == 2

    questions = db_session.query(Question).order_by(Question.global_order).all()
    assert [q.title for q in questions] == ["L-first", "L-second", "R-first"]
    assert [q.global_order for q in questions] == [1, 2, 3]
    assert [q.order for q in questions] == [1, 2, 1]
    assert questions[2].correct_option == "C"
    assert questions[0].option == {"A": "a", "B": "b", "C": "c", "D": "d"}
    assert questions[0].score == 1

    group = db_session.get(QuestionGroup, body["results"][0]["groupId"])
    assert (group.title, group.description, group.type_group) == ("Passage", "Read carefully", 1)

    audio = db_session.query(Element).filter(Element.question_id.isnot(None)).one()
    assert audio.type.value == "audio" and audio.cloud_id is True
    group_element = db_session.query(Element).filter(Element.group_id == group.id).one()
    assert group_element.type.value == "image" and group_element.cloud_id is True

    entries = api_call(client, "GET", f"/questions/exams/{exam.id}")
    listening = next(entry for entry in entries if entry["part"] == "Listening")
    assert [e["cloudId"] for e in listening["data"][0]["elements"]] == [True]
    assert "cloud_id" not in listening["data"][0]["elements"][0]


def test_reimport_resolves_same_subject_and_exam(client: TestClient, db_session: Session):
    make_part(db_session, name="Reading")
    rows = [_row("Reading", 1, "Q1"), _row("Reading", 2, "Q2")]

    first = api_call(client, "POST", "/questions/upload-excel", json=_payload(rows), expected_status=201)
    second = api_call(client, "POST", "/questions/upload-excel", json=_payload(rows), expected_status=201)

    assert first["examId"] == second["examId"]
    assert db_session.query(Subject).count() == 1
    assert db_session.query(Exam).count() == 1
    groups = db_session.query(QuestionGroup).order_by(QuestionGroup.order).all()
    assert [g.order for g in groups] == [1, 2]
    questions = db_session.query(Question).order_by(Question.global_order).all()
    assert [q.order for q in questions] == [1, 2, 3, 4]
    assert [q.global_order for q in questions] == [1, 2, 3, 4]


def test_unknown_part_aborts_whole_import(client: TestClient, db_session: Session):
    make_part(db_session, name="Reading")
    rows = [_row("Reading", 1, "Q1"), _row("Speaking", 1, "Q2")]

    body = api_call(client, "POST", "/questions/upload-excel", json=_payload(rows), expected_status=400)

    assert_error(body, "Part not found: Speaking")
    assert db_session.query(Subject).count() == 0
    assert db_session.query(Exam).count() == 0
    assert db_session.query(QuestionGroup).count() == 0


def test_missing_correct_option_aborts_whole_import(client: TestClient, db_session: Session):
    make_part(db_session, name="Listening")
    make_part(db_session, name="Reading")
    rows = [_row("Listening", 1, "Q1"), _row("Reading", 1, "Q2", correct=None)]

    body = api_call(client, "POST", "/questions/upload-excel", json=_payload(rows), expected_status=400)

    assert_error(body, 'Missing correct option for question "Q2"')
    assert db_session.query(Question).count() == 0
    assert db_session.query(QuestionGroup).count() == 0


def test_row_without_part(client: TestClient, db_session: Session):
    body = api_call(
        client, "POST", "/questions/upload-excel", json=_payload([_row(None, 1, "Q1")]), expected_status=400
    )
    assert_error(body, "Missing Part information in the Excel file")


def test_missing_header_information(client: TestClient):
    body = api_call(
        client, "POST", "/questions/upload-excel",
        json={"file": {"detailQuestions": [], "examAndSubject": []}},
        expected_status=400,
    )
    assert_error(body, "Missing Exam and Subject information in the Excel file")

    body = api_call(
        client, "POST", "/questions/upload-excel",
        json=_payload([], subject=""),
        expected_status=400,
    )
    assert_error(body, "Missing Subject or Exam name in the Excel file")


def test_missing_file_data(client: TestClient):
    body = api_call(client, "POST", "/questions/upload-excel", json={}, expected_status=400)
    assert_error(body, "Missing Excel file data")


def test_workbook_upload(client: TestClient, db_session: Session):
    make_part(db_session, name="Reading")
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Questions"
    headers = list(_row("Reading", 1, "Q1").keys())
    sheet.append(headers)
    sheet.append(list(_row("Reading", 2, "Second").values()))
    sheet.append(list(_row("Reading", 1, "First").values()))
    header_sheet = workbook.create_sheet("ExamAndSubject")
    header_sheet.append(["Subject", "Exam"])
    header_sheet.append(["TOEIC", "Practice 3"])
    buffer = io.BytesIO()
    workbook.save(buffer)

    body = api_call(
        client, "POST", "/questions/upload-excel-file",
        files={"file": ("questions.xlsx", buffer.getvalue(), "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")},
        expected_status=201,
    )

    assert body["results"] == [{"part": "Reading", "groupId": body["results"][0]["groupId"], "questionsCount": 2}]
    exam = db_session.query(Exam).one()
    assert exam.name == "Practice 3"
    assert exam.subject.name == "TOEIC"
    titles = [q.title for q in db_session.query(Question).order_by(Question.order)]
    assert titles == ["First", "Second"]
