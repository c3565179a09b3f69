"""
Tests for the exception handlers.

Each error kind must reach the client with its mapped status code and the
standard error envelope.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, OperationalError

from core.errors import DomainError, ErrorKind, FieldError
from core.middleware.error_handling import sanitize_error_message, setup_error_handlers


class Item(BaseModel):
    count: int


@pytest.fixture
def app():
    app = FastAPI()
    setup_error_handlers(app)

    @app.get("/domain/{kind}")
    async def raise_domain(kind: str):
        raise DomainError(ErrorKind(kind), f"{kind} happened", [FieldError("field", "bad")])

    @app.get("/integrity")
    async def raise_integrity():
        raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

    @app.get("/operational")
    async def raise_operational():
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    @app.get("/crash")
    async def crash():
        raise RuntimeError('password="hunter2"')

    @app.post("/items")
    async def create_item(item: Item):
        return item

    return app


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


class TestSanitization:
    @pytest.mark.parametrize(
        "message",
        ['password="secret123"', "token: abc.def", "api_key=sk_live_1", 'secret="x"'],
    )
    def test_sensitive_values_redacted(self, message):
        assert "[REDACTED]" in sanitize_error_message(message)

    def test_domain_messages_untouched(self):
        message = "Cannot delete job role with 2 active application(s)."
        assert sanitize_error_message(message) == message


class TestDomainErrors:
    @pytest.mark.parametrize(
        "kind,status_code",
        [
            ("validation", 400),
            ("not_found", 404),
            ("business_logic", 400),
            ("conflict", 409),
            ("internal", 500),
        ],
    )
    def test_kind_maps_to_status(self, client, kind, status_code):
        response = client.get(f"/domain/{kind}")

        assert response.status_code == status_code
        error = response.json()["error"]
        assert error["code"] == kind
        assert error["message"] == f"{kind} happened"
        assert error["details"] == [{"field": "field", "message": "bad"}]
        assert error["path"] == f"/domain/{kind}"
        assert error["method"] == "GET"


class TestInfrastructureErrors:
    def test_request_validation_is_422(self, client):
        response = client.post("/items", json={"count": "many"})

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "request_validation"
        assert error["details"][0]["field"] == "body.count"

    def test_integrity_error_is_conflict(self, client):
        response = client.get("/integrity")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "conflict"

    def test_database_error_is_generic_500(self, client):
        response = client.get("/operational")

        assert response.status_code == 500
        assert response.json()["error"]["message"] == "A database error occurred"
        assert "locked" not in response.text

    def test_unhandled_error_hides_details(self, client):
        response = client.get("/crash")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "internal"
        assert "hunter2" not in response.text
