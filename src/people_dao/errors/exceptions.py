"""Custom exception hierarchy for people_dao."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError


class PeopleDaoError(Exception):
    """Base exception for all people_dao errors."""

    error_type = "error"
    http_status = 500

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class RecordValidationError(PeopleDaoError):
    """Caller input is missing required fields or malformed.

    Raised before any storage access is attempted.
    """

    error_type = "validation_error"
    http_status = 400

    def __init__(self, message: str = "", errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> RecordValidationError:
        errors = []
        for err in exc.errors():
            loc = ".".join(str(part) for part in err["loc"]) or "input"
            errors.append(f"{loc}: {err['msg']}")
        return cls("Invalid person data: " + "; ".join(errors), errors=errors)


class RecordNotFoundError(PeopleDaoError):
    """An operation that requires an existing record found none.

    Only update and delete raise this; lookups return None or [] instead.
    """

    error_type = "not_found"
    http_status = 404

    def __init__(self, message: str = "", record_id: str | None = None) -> None:
        super().__init__(message)
        self.record_id = record_id


class ConflictError(PeopleDaoError):
    """Uniqueness violation, e.g. a duplicate email on create."""

    error_type = "conflict"
    http_status = 409

    def __init__(self, message: str = "", field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class StorageError(PeopleDaoError):
    """Storage is unreachable or rejected the operation. Never retried."""

    error_type = "storage_error"
    http_status = 500

    def __init__(self, message: str = "", original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original
