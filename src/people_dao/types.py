"""Shared Pydantic models for people_dao."""

from __future__ import annotations

import re
from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")

# ── Enums ──


class SearchField(StrEnum):
    NAME = "name"
    EMAIL = "email"
    PHONE = "phone"


# ── Records ──


class Person(BaseModel):
    """A stored person record, as returned by storage."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str
    phone: str | None = None
    birth_date: date | None = None
    address: str | None = None
    created_at: datetime
    updated_at: datetime


# ── Input models ──


class PersonCreate(BaseModel):
    """Fields accepted when creating a person. Storage fills id and timestamps."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str
    email: str
    phone: str | None = None
    birth_date: date | None = None
    address: str | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("email")
    @classmethod
    def _email_shape(cls, value: str) -> str:
        if not _EMAIL_RE.match(value):
            raise ValueError("email must look like user@domain")
        return value

    @field_validator("phone", "address")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        return value or None


class PersonUpdate(BaseModel):
    """Partial update. id and email are immutable and rejected as unknown fields."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str | None = None
    phone: str | None = None
    birth_date: date | None = None
    address: str | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str | None) -> str | None:
        # Only runs for explicitly supplied values; name can never be cleared.
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("phone", "address")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        return value or None

    def changes(self) -> dict[str, object]:
        """Only the fields the caller actually supplied."""
        return self.model_dump(exclude_unset=True)
