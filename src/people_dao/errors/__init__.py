"""Error taxonomy — validation, not-found, conflict, storage."""

from people_dao.errors.exceptions import (
    ConflictError,
    PeopleDaoError,
    RecordNotFoundError,
    RecordValidationError,
    StorageError,
)

__all__ = [
    "PeopleDaoError",
    "RecordValidationError",
    "RecordNotFoundError",
    "ConflictError",
    "StorageError",
]
