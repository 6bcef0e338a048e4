"""Cache entry and statistics models."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

V = TypeVar("V")


class CacheEntry(BaseModel, Generic[V]):
    """A cached read result with an absolute expiry."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    key: str
    value: V
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        # Valid strictly before expires_at.
        return now >= self.expires_at

    def age(self, now: float) -> float:
        return now - self.created_at


class CacheStats(BaseModel):
    """Cache introspection. Keys are truncated digest prefixes."""

    size: int = 0
    keys: list[str] = Field(default_factory=list)
    hits: int = 0
    misses: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0
