from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.constants import ElementTypeEnum
from app.models.element import Element
from app.models.question import Question
from app.services.attachment_storage import attachment_storage
from tests.helpers.asserts import api_call
from tests.helpers.factories import MP3_BYTES, PNG_BYTES, create_group, make_exam, make_part, question_fields


def _question_with_two_attachments(client, db_session):
    exam = make_exam(db_session)
    part = make_part(db_session, exams=(exam,))
    create_group(
        client,
        part_id=part.id,
        exam_id=exam.id,
        fields=question_fields(1),
        files=[
            ("questions[0][elements]", ("first.png", PNG_BYTES, "image/png")),
            ("questions[0][elements]", ("second.png", PNG_BYTES, "image/png")),
        ],
    )
    return db_session.query(Question).one()


def test_new_attachments_replace_old_ones(client: TestClient, db_session: Session):
    question = _question_with_two_attachments(client, db_session)
    old_paths = [attachment_storage.path_for_url(e.url) for e in question.elements]
    assert len(old_paths) == 2 and all(p.exists() for p in old_paths)

    body = api_call(
        client, "PUT", "/questions",
        params={"question_id": question.id},
        data={"title": "With audio"},
        files=[("elements", ("clip.mp3", MP3_BYTES, "audio/mpeg"))],
    )

    assert len(body["question"]["elements"]) == 1
    assert body["question"]["elements"][0]["type"] == "audio"
    elements = db_session.query(Element).filter(Element.question_id == question.id).all()
    assert len(elements) == 1
    assert attachment_storage.path_for_url(elements[0].url).exists()
    assert not any(p.exists() for p in old_paths)


def test_update_without_files_keeps_attachments(client: TestClient, db_session: Session):
    question = _question_with_two_attachments(client, db_session)

    body = api_call(client, "PUT", "/questions", params={"question_id": question.id}, data={"score": "3"})

    assert body["question"]["score"] == 3
    assert len(body["question"]["elements"]) == 2


def test_missing_old_file_does_not_block_update(client: TestClient, db_session: Session):
    question = _question_with_two_attachments(client, db_session)
    for element in question.elements:
        attachment_storage.path_for_url(element.url).unlink()

    body = api_call(
        client, "PUT", "/questions",
        params={"question_id": question.id},
        files=[("elements", ("new.png", PNG_BYTES, "image/png"))],
    )

    assert len(body["question"]["elements"]) == 1


def test_cloud_attachments_are_not_deleted_from_disk(client: TestClient, db_session: Session, monkeypatch):
    exam = make_exam(db_session)
    part = make_part(db_session, exams=(exam,))
    create_group(client, part_id=part.id, exam_id=exam.id, fields=question_fields(1))
    question = db_session.query(Question).one()
    db_session.add(Element(type=ElementTypeEnum.IMAGE, url="https://cdn.example.com/q1.png", question_id=question.id, cloud_id=True))
    db_session.commit()

    deleted = []
    monkeypatch.setattr(attachment_storage, "delete_file", lambda url: deleted.append(url) or True)

    body = api_call(
        client, "PUT", "/questions",
        params={"question_id": question.id},
        files=[("elements", ("new.png", PNG_BYTES, "image/png"))],
    )

    assert deleted == []
    assert [e["cloudId"] for e in body["question"]["elements"]] == [False]
