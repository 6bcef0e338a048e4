"""Tests for custom exception hierarchy."""

import pytest
from pydantic import ValidationError

from people_dao.errors import (
    ConflictError,
    PeopleDaoError,
    RecordNotFoundError,
    RecordValidationError,
    StorageError,
)
from people_dao.types import PersonCreate


class TestExceptionHierarchy:
    def test_all_inherit_from_base(self):
        for cls in (RecordValidationError, RecordNotFoundError, ConflictError, StorageError):
            assert issubclass(cls, PeopleDaoError)

    def test_conflict_is_not_a_storage_error(self):
        assert not issubclass(ConflictError, StorageError)

    def test_http_statuses(self):
        assert RecordValidationError.http_status == 400
        assert RecordNotFoundError.http_status == 404
        assert ConflictError.http_status == 409
        assert StorageError.http_status == 500


class TestAttributes:
    def test_not_found(self):
        err = RecordNotFoundError("gone", record_id="abc")
        assert err.record_id == "abc"
        assert err.error_type == "not_found"
        assert "gone" in str(err)

    def test_conflict(self):
        assert ConflictError("dup", field="email").field == "email"

    def test_storage_keeps_original(self):
        cause = OSError("disk")
        assert StorageError("failed", original=cause).original is cause

    def test_validation_defaults(self):
        assert RecordValidationError("bad").errors == []


class TestFromPydantic:
    def test_collects_field_messages(self):
        with pytest.raises(ValidationError) as exc_info:
            PersonCreate.model_validate({"name": "Ana"})
        err = RecordValidationError.from_pydantic(exc_info.value)
        assert err.errors
        assert err.errors[0].startswith("email:")
        assert "email" in err.message
