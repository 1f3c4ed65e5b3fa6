from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.element import Element
from app.models.question import Question
from app.models.question_group import QuestionGroup
from tests.helpers.asserts import api_call, assert_error, assert_field_error
from tests.helpers.factories import PNG_BYTES, create_group, make_exam, make_part, question_fields


class TestQuestionEndpoints:
    def test_create_first_group_in_scope(self, client: TestClient, db_session: Session):
        exam = make_exam(db_session)
        part = make_part(db_session, exams=(exam,))

        body = api_call(
            client, "POST", "/questions",
            params={"part_id": part.id, "exam_id": exam.id},
            data={
                "type_group": "1",
                "questions[0][title]": "Q1",
                "questions[0][option][A]": "x",
                "questions[0][option][B]": "y",
                "questions[0][correct_option]": "A",
                "questions[0][score]": "5",
            },
            expected_status=201,
        )

        assert body["message"] == "Questions created successfully."
        assert body["newGroup"]["order"] == 1
        assert body["newGroup"]["part_id"] == part.id
        assert body["newGroup"]["exam_id"] == exam.id

        question = db_session.query(Question).one()
        assert question.order == 1
        assert question.global_order == 1
        assert question.option == {"A": "x", "B": "y"}
        assert question.score == 5

    def test_create_accepts_json_questions_field(self, client: TestClient, db_session: Session):
        exam = make_exam(db_session)
        part = make_part(db_session, exams=(exam,))

        api_call(
            client, "POST", "/questions",
            params={"part_id": part.id, "exam_id": exam.id},
            data={
                "title": "Reading",
                "questions": '[{"title": "Q1", "option": {"A": "x"}, "correct_option": "A", "score": 1},'
                             ' {"title": "Q2", "option": "{\\"A\\": \\"y\\"}", "correct_option": "A", "score": 2}]',
            },
            expected_status=201,
        )

        questions = db_session.query(Question).order_by(Question.global_order).all()
        assert [q.title for q in questions] == ["Q1", "Q2"]
        assert questions[1].option == {"A": "y"}

    def test_create_without_exam_id(self, client: TestClient, db_session: Session):
        part = make_part(db_session)
        body = api_call(
            client, "POST", "/questions",
            params={"part_id": part.id},
            data=question_fields(1),
            expected_status=400,
        )
        assert_error(body, "Exam or part is required!")

    def test_create_with_unknown_part(self, client: TestClient, db_session: Session):
        exam = make_exam(db_session)
        body = api_call(
            client, "POST", "/questions",
            params={"part_id": 9999, "exam_id": exam.id},
            data=question_fields(1),
            expected_status=404,
        )
        assert_error(body, "Part or Exam not found")

    def test_create_rejects_invalid_correct_option(self, client: TestClient, db_session: Session):
        exam = make_exam(db_session)
        part = make_part(db_session, exams=(exam,))
        fields = question_fields(1)
        fields["questions[0][correct_option]"] = "E"

        body = api_call(
            client, "POST", "/questions",
            params={"part_id": part.id, "exam_id": exam.id},
            data=fields,
            expected_status=400,
        )
        assert_field_error(body, "questions.0.correct_option")
        assert db_session.query(QuestionGroup).count() == 0

    def test_create_rejects_empty_question_list(self, client: TestClient, db_session: Session):
        exam = make_exam(db_session)
        part = make_part(db_session, exams=(exam,))
        body = api_call(
            client, "POST", "/questions",
            params={"part_id": part.id, "exam_id": exam.id},
            data={"title": "Empty"},
            expected_status=400,
        )
        assert_field_error(body, "questions")

    def test_create_rejects_unsupported_upload(self, client: TestClient, db_session: Session):
        exam = make_exam(db_session)
        part = make_part(db_session, exams=(exam,))
        response = client.post(
            "/questions",
            params={"part_id": part.id, "exam_id": exam.id},
            data=question_fields(1),
            files=[("elements", ("notes.txt", b"hello", "text/plain"))],
        )
        assert response.status_code == 400
        assert_error(response.json(), "Only images and audio files are allowed!")
        assert db_session.query(QuestionGroup).count() == 0

    def test_update_question_fields(self, client: TestClient, db_session: Session):
        exam = make_exam(db_session)
        part = make_part(db_session, exams=(exam,))
        create_group(client, part_id=part.id, exam_id=exam.id, fields=question_fields(1))
        question = db_session.query(Question).one()

        body = api_call(
            client, "PUT", "/questions",
            params={"question_id": question.id},
            data={"title": "Renamed", "option": '{"A": "1", "B": "2", "C": "3"}', "correct_option": "C"},
        )

        assert body["message"] == "Question updated successfully"
        assert body["question"]["title"] == "Renamed"
        assert body["question"]["option"] == {"A": "1", "B": "2", "C": "3"}
        assert body["question"]["correct_option"] == "C"
        assert body["question"]["order"] == 1

    def test_update_with_malformed_option_json(self, client: TestClient, db_session: Session):
        exam = make_exam(db_session)
        part = make_part(db_session, exams=(exam,))
        create_group(client, part_id=part.id, exam_id=exam.id, fields=question_fields(1))
        question = db_session.query(Question).one()

        body = api_call(
            client, "PUT", "/questions",
            params={"question_id": question.id},
            data={"title": "Changed", "option": "{bad json"},
            expected_status=400,
        )

        assert_error(body, "Invalid options format")
        db_session.expire_all()
        unchanged = db_session.get(Question, question.id)
        assert unchanged.title == "Q1"
        assert unchanged.option == {"A": "x", "B": "y"}

    def test_update_without_question_id(self, client: TestClient):
        body = api_call(client, "PUT", "/questions", data={"title": "x"}, expected_status=400)
        assert_error(body, "Question ID is required!")

    def test_update_unknown_question(self, client: TestClient):
        body = api_call(
            client, "PUT", "/questions", params={"question_id": 424242}, data={"title": "x"}, expected_status=404
        )
        assert_error(body, "Question not found")

    def test_delete_question(self, client: TestClient, db_session: Session):
        exam = make_exam(db_session)
        part = make_part(db_session, exams=(exam,))
        create_group(client, part_id=part.id, exam_id=exam.id, fields=question_fields(2))
        first = db_session.query(Question).order_by(Question.order).first()

        body = api_call(client, "DELETE", "/questions", params={"question_id": first.id})

        assert body["message"] == "Question deleted successfully"
        assert body["question"]["deleted_at"] is not None

        listing = api_call(client, "GET", "/questions", params={"exam_id": exam.id, "part_id": part.id})
        assert listing["total"] == 1
        assert [q["title"] for q in listing["data"][0]["questions"]] == ["Q2"]

    def test_delete_without_question_id(self, client: TestClient):
        body = api_call(client, "DELETE", "/questions", expected_status=400)
        assert_error(body, "Question ID is required!")

    def test_delete_group(self, client: TestClient, db_session: Session):
        exam = make_exam(db_session)
        part = make_part(db_session, exams=(exam,))
        group = create_group(client, part_id=part.id, exam_id=exam.id, fields=question_fields(2))

        body = api_call(client, "DELETE", f"/questions/groups/{group['id']}")
        assert body["group"]["deleted_at"] is not None

        listing = api_call(client, "GET", "/questions", params={"exam_id": exam.id, "part_id": part.id})
        assert listing["data"] == []
        assert listing["total"] == 0

        api_call(client, "DELETE", f"/questions/groups/{group['id']}", expected_status=404)

    def test_read_requires_exam_part_link(self, client: TestClient, db_session: Session):
        exam = make_exam(db_session)
        part = make_part(db_session)
        body = api_call(
            client, "GET", "/questions", params={"exam_id": exam.id, "part_id": part.id}, expected_status=404
        )
        assert_error(body, "Exam or part not found!")

    def test_read_without_ids(self, client: TestClient):
        body = api_call(client, "GET", "/questions", expected_status=400)
        assert_error(body, "Exam or part is required!")

    def test_read_rejects_non_positive_page(self, client: TestClient):
        body = api_call(client, "GET", "/questions", params={"exam_id": 1, "part_id": 1, "page": 0}, expected_status=400)
        assert_field_error(body, "page")

    def test_all_for_unknown_exam(self, client: TestClient):
        body = api_call(client, "GET", "/questions/exams/999", expected_status=404)
        assert_error(body, "Exam not found")

    def test_group_upload_is_stored(self, client: TestClient, db_session: Session, upload_dir):
        exam = make_exam(db_session, name="Mock Test 1")
        part = make_part(db_session, name="Part 1", exams=(exam,))
        create_group(
            client,
            part_id=part.id,
            exam_id=exam.id,
            fields=question_fields(1),
            files=[("elements", ("passage.png", PNG_BYTES, "image/png"))],
        )

        element = db_session.query(Element).one()
        assert element.group_id is not None
        assert element.type.value == "image"
        assert element.url.startswith("/uploads/Mock_Test_1/Part_1/")
        assert element.url.endswith("passage.png")
        assert len(list((upload_dir / "Mock_Test_1" / "Part_1").iterdir())) == 1

    def test_files_for_missing_json_questions_are_not_stored(
        self, client: TestClient, db_session: Session, upload_dir
    ):
        exam = make_exam(db_session)
        part = make_part(db_session, exams=(exam,))

        api_call(
            client, "POST", "/questions",
            params={"part_id": part.id, "exam_id": exam.id},
            data={"questions": '[{"title": "Q1", "option": {"A": "x"}, "correct_option": "A", "score": 1}]'},
            files=[
                ("questions[0][elements]", ("kept.png", PNG_BYTES, "image/png")),
                ("questions[3][elements]", ("stray.png", PNG_BYTES, "image/png")),
            ],
            expected_status=201,
        )

        stored = [path.name for path in upload_dir.rglob("*") if path.is_file()]
        assert len(stored) == 1
        assert stored[0].endswith("kept.png")
        element = db_session.query(Element).one()
        assert element.question_id is not None

    def test_responses_carry_request_id(self, client: TestClient):
        response = client.get("/questions/exams/1")
        assert response.headers.get("X-Request-ID")
