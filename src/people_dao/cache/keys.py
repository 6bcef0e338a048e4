"""Cache key generation — SHA256 digests of canonical query descriptors."""

from __future__ import annotations

import hashlib
import json
from typing import Any

KEY_PREFIX_LENGTH = 16


def derive_key(query_descriptor: str) -> str:
    """Return the SHA256 hex digest of a query descriptor.

    Same descriptor always yields the same 64-char key.
    """
    return hashlib.sha256(query_descriptor.encode("utf-8")).hexdigest()


def describe_query(table: str, column: str, value: Any) -> str:
    """Canonical descriptor for an exact-match lookup.

    Serialized as sorted JSON so that equal lookups describe identically
    regardless of how the caller spelled them.
    """
    return json.dumps(
        {"op": "select", "table": table, "where": {column: value}},
        sort_keys=True,
        default=str,
    )


def key_prefix(key: str) -> str:
    """Shortened form of a key for logs and stats."""
    return key[:KEY_PREFIX_LENGTH]
