"""HTTP tests for the users routes, the API-key guard and the request logger."""

from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from loguru import logger
from sqlmodel import Session, select

from src.crud_api.core.exceptions import PersistenceError
from src.crud_api.entities.core.user import User, UserTable


@pytest.fixture
def log_records(client: TestClient) -> Generator[list[dict[str, Any]]]:
    """Loguru records emitted after the app configured logging."""
    records: list[dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    try:
        yield records
    finally:
        logger.remove(handler_id)


class TestCreateUser:
    def test_create_returns_201_with_user(self, client: TestClient, api_headers):
        response = client.post("/users", json={"name": "Test User", "age": 30}, headers=api_headers)

        assert response.status_code == 201
        body = response.json()
        assert isinstance(body["id"], int)
        assert body == {"id": body["id"], "name": "Test User", "age": 30}

    def test_created_user_is_persisted(self, client: TestClient, api_headers, session: Session):
        created = client.post("/users", json={"name": "Stored", "age": 41}, headers=api_headers).json()

        row = session.exec(select(UserTable).where(UserTable.id == created["id"])).one()
        assert (row.name, row.age) == ("Stored", 41)

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"name": "Test User"},
            {"age": 30},
            {"name": "", "age": 30},
            {"name": "Test User", "age": "thirty"},
            {"name": "Test User", "age": "30"},
            {"name": "Test User", "age": 1.5},
            {"name": ["Test User"], "age": 30},
        ],
    )
    def test_invalid_body_is_400(self, client: TestClient, api_headers, body):
        response = client.post("/users", json=body, headers=api_headers)

        assert response.status_code == 400
        payload = response.json()
        assert payload["code"] == "VALIDATION_ERROR"
        assert payload["errors"]

    def test_malformed_json_is_400(self, client: TestClient, api_headers):
        response = client.post(
            "/users",
            content=b'{"name": "Test User", ',
            headers={**api_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400

    def test_invalid_body_never_reaches_store(self, client: TestClient, api_headers):
        client.post("/users", json={"name": "Test User"}, headers=api_headers)

        assert client.get("/users", headers=api_headers).json() == []


class TestListUsers:
    def test_empty(self, client: TestClient, api_headers):
        response = client.get("/users", headers=api_headers)

        assert response.status_code == 200
        assert response.json() == []

    def test_seeded_in_insertion_order(self, seeded_user_service, client: TestClient, api_headers):
        response = client.get("/users", headers=api_headers)

        assert response.status_code == 200
        assert response.json() == [
            {"id": 1, "name": "John Doe", "age": 25},
            {"id": 2, "name": "Jane Doe", "age": 28},
        ]

    def test_lists_exactly_what_was_created(self, client: TestClient, api_headers):
        created = [
            client.post("/users", json={"name": f"user-{i}", "age": i}, headers=api_headers).json()
            for i in range(5)
        ]

        assert client.get("/users", headers=api_headers).json() == created


class TestGetUser:
    def test_found(self, seeded_user_service, client: TestClient, api_headers):
        response = client.get("/users/1", headers=api_headers)

        assert response.status_code == 200
        assert response.json() == {"id": 1, "name": "John Doe", "age": 25}

    def test_not_found(self, seeded_user_service, client: TestClient, api_headers):
        response = client.get("/users/999", headers=api_headers)

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == "NOT_FOUND"
        assert body["detail"] == "User with id 999 not found"

    def test_id_beyond_store_range_is_404(self, client: TestClient, api_headers):
        response = client.get(f"/users/{2**64}", headers=api_headers)

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == "NOT_FOUND"
        assert body["request_id"]

    def test_non_integer_id_is_400(self, client: TestClient, api_headers):
        response = client.get("/users/abc", headers=api_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestApiKeyGuard:
    @pytest.mark.parametrize(
        ("method", "path", "body"),
        [
            ("POST", "/users", {"name": "Test User", "age": 30}),
            ("POST", "/users", {"name": "Test User"}),
            ("GET", "/users", None),
            ("GET", "/users/1", None),
            ("GET", "/users/abc", None),
        ],
    )
    @pytest.mark.parametrize("headers", [{}, {"X-Api-Key": "WRONG"}, {"X-Api-Key": ""}])
    def test_missing_or_wrong_key_is_401(self, client: TestClient, method, path, body, headers):
        response = client.request(method, path, json=body, headers=headers)

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"

    def test_rejected_create_has_no_side_effect(self, client: TestClient, api_headers):
        client.post("/users", json={"name": "Test User", "age": 30})

        assert client.get("/users", headers=api_headers).json() == []

    def test_service_never_invoked_without_key(
        self, spy_client: TestClient, spy_user_service: MagicMock
    ):
        spy_client.post("/users", json={"name": "Test User", "age": 30})
        spy_client.get("/users")
        spy_client.get("/users/1")

        assert spy_user_service.mock_calls == []

    def test_header_name_is_case_insensitive(self, client: TestClient, api_key):
        response = client.get("/users", headers={"x-api-key": api_key})

        assert response.status_code == 200

    def test_health_is_not_guarded(self, client: TestClient):
        assert client.get("/health").status_code == 200


class TestErrorPropagation:
    def test_persistence_error_is_500(
        self, spy_client: TestClient, spy_user_service: MagicMock, api_headers
    ):
        spy_user_service.find_all.side_effect = PersistenceError("list users")

        response = spy_client.get("/users", headers=api_headers)

        assert response.status_code == 500
        assert response.json()["code"] == "PERSISTENCE_ERROR"

    def test_service_result_is_returned_unchanged(
        self, spy_client: TestClient, spy_user_service: MagicMock, api_headers
    ):
        spy_user_service.find_one.return_value = User(id=5, name="Mocked", age=50)

        response = spy_client.get("/users/5", headers=api_headers)

        assert response.json() == {"id": 5, "name": "Mocked", "age": 50}
        spy_user_service.find_one.assert_called_once_with(5)


class TestRequestLogging:
    def _messages(self, records: list[dict[str, Any]]) -> list[str]:
        return [r["message"] for r in records]

    def test_start_and_end_are_logged(self, client: TestClient, log_records, api_headers):
        client.get("/users", headers=api_headers)

        assert self._messages(log_records).count("request.start") == 1
        end = next(r for r in log_records if r["message"] == "request.end")
        assert end["extra"]["status_code"] == 200
        assert end["extra"]["duration_ms"] >= 0
        assert end["extra"]["path"] == "/users"
        assert end["extra"]["method"] == "GET"

    def test_rejected_requests_are_logged_with_status(self, client: TestClient, log_records):
        client.get("/users")

        end = next(r for r in log_records if r["message"] == "request.end")
        assert end["extra"]["status_code"] == 401

    def test_request_id_is_propagated(self, client: TestClient, log_records, api_headers):
        response = client.get("/users/42", headers={**api_headers, "X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert response.json()["request_id"] == "req-123"
        assert all(
            r["extra"]["request_id"] == "req-123"
            for r in log_records
            if r["message"].startswith("request.")
        )

    def test_request_id_is_generated(self, client: TestClient, api_headers):
        response = client.get("/users", headers=api_headers)

        assert response.headers["X-Request-ID"]

    def test_unhandled_errors_are_logged_and_reraised(
        self, spy_client: TestClient, spy_user_service: MagicMock, api_headers
    ):
        records: list[dict[str, Any]] = []
        handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
        spy_user_service.find_all.side_effect = RuntimeError("boom")
        try:
            with pytest.raises(RuntimeError, match="boom"):
                spy_client.get("/users", headers=api_headers)
        finally:
            logger.remove(handler_id)

        error = next(r for r in records if r["message"] == "request.error")
        assert error["extra"]["error_type"] == "RuntimeError"
