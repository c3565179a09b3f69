"""Tests for the domain error taxonomy."""

import pytest

from core.errors import HTTP_STATUS_BY_KIND, DomainError, ErrorKind, FieldError


class TestErrorKinds:
    def test_every_kind_has_a_status(self):
        assert set(HTTP_STATUS_BY_KIND) == set(ErrorKind)

    @pytest.mark.parametrize(
        "factory,kind,status_code",
        [
            (DomainError.validation, ErrorKind.VALIDATION, 400),
            (DomainError.not_found, ErrorKind.NOT_FOUND, 404),
            (DomainError.business_logic, ErrorKind.BUSINESS_LOGIC, 400),
            (DomainError.conflict, ErrorKind.CONFLICT, 409),
            (DomainError.internal, ErrorKind.INTERNAL, 500),
        ],
    )
    def test_constructors(self, factory, kind, status_code):
        error = factory("boom")

        assert error.kind is kind
        assert error.status_code == status_code
        assert error.message == "boom"
        assert str(error) == "boom"
        assert error.errors == []


class TestFieldErrors:
    def test_from_field_errors_joins_messages(self):
        error = DomainError.from_field_errors(
            [FieldError("user_id", "Valid user ID is required"), FieldError("cv_text", "CV text is required")]
        )

        assert error.kind is ErrorKind.VALIDATION
        assert error.message == "Valid user ID is required, CV text is required"

    def test_to_dict(self):
        assert FieldError("band", "bad").to_dict() == {"field": "band", "message": "bad"}
