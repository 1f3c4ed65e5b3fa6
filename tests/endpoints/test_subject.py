from fastapi.testclient import TestClient

from tests.helpers.asserts import api_call, assert_error, assert_field_error


class TestSubjectEndpoints:
    def test_create_and_list_subjects(self, client: TestClient):
        created = api_call(client, "POST", "/subjects", json={"name": "IELTS"}, expected_status=201)
        assert created["data"]["name"] == "IELTS"

        body = api_call(client, "GET", "/subjects")
        assert [s["name"] for s in body["data"]] == ["IELTS"]

    def test_duplicate_subject(self, client: TestClient):
        api_call(client, "POST", "/subjects", json={"name": "TOEIC"}, expected_status=201)
        assert_error(api_call(client, "POST", "/subjects", json={"name": "TOEIC"}, expected_status=409), "TOEIC already exists!")

    def test_subject_name_is_required(self, client: TestClient):
        assert_field_error(api_call(client, "POST", "/subjects", json={}, expected_status=400), "name")
