"""Request router — maps HTTP-style requests onto PersonDAO calls.

Framework-agnostic: dispatch() takes a method, path, query mapping and
decoded JSON body and returns a Response with a status and a JSON-ready body.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from people_dao.dao import PersonDAO
from people_dao.errors import PeopleDaoError
from people_dao.types import Person, SearchField

logger = logging.getLogger(__name__)

BASE_PATH = "people"


@dataclass
class Response:
    status: int
    body: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=lambda: {"Content-Type": "application/json"})


def _serialize(result: Person | list[Person] | None) -> Any:
    if result is None:
        return None
    if isinstance(result, list):
        return [person.model_dump(mode="json") for person in result]
    return result.model_dump(mode="json")


class Router:
    """Dispatch table over a PersonDAO.

    | request                               | DAO call       |
    |---------------------------------------|----------------|
    | GET    /people                        | list_all       |
    | GET    /people?search=<f>&value=<v>   | find_by_<f>    |
    | GET    /people/<id>                   | get_by_id      |
    | POST   /people                        | create         |
    | PUT    /people/<id>  (or PATCH)       | update         |
    | DELETE /people/<id>                   | delete         |
    """

    def __init__(self, dao: PersonDAO, include_cache_stats: bool = True) -> None:
        self._dao = dao
        self._include_cache_stats = include_cache_stats

    def dispatch(
        self,
        method: str,
        path: str,
        query: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> Response:
        method = method.upper()
        query = query or {}
        parts = [p for p in path.split("/") if p]

        if method == "OPTIONS":
            return Response(204)
        if not parts or parts[0] != BASE_PATH or len(parts) > 2:
            return _error(404, "Endpoint not found")

        record_id = parts[1] if len(parts) == 2 else None
        try:
            return self._route(method, record_id, query, body)
        except PeopleDaoError as e:
            if e.http_status >= 500:
                logger.error("%s %s failed: %s", method, path, e)
            else:
                logger.info("%s %s rejected (%s): %s", method, path, e.error_type, e)
            return _error(e.http_status, e.message or e.error_type)

    def _route(
        self,
        method: str,
        record_id: str | None,
        query: Mapping[str, str],
        body: Any,
    ) -> Response:
        if record_id is None:
            if method == "GET":
                if "search" in query:
                    return self._search(query.get("search", ""), query.get("value"))
                return self._read_response(self._dao.list_all())
            if method == "POST":
                person = self._dao.create(body if body is not None else {})
                return Response(201, {"data": _serialize(person)})
            return _error(405, f"Method {method} not allowed on /{BASE_PATH}")

        if method == "GET":
            person = self._dao.get_by_id(record_id)
            if person is None:
                return _error(404, "Person not found")
            return Response(200, {"data": _serialize(person)})
        if method in ("PUT", "PATCH"):
            person = self._dao.update(record_id, body if body is not None else {})
            return Response(200, {"data": _serialize(person)})
        if method == "DELETE":
            self._dao.delete(record_id)
            return Response(200, {"success": True})
        return _error(405, f"Method {method} not allowed on /{BASE_PATH}/<id>")

    def _search(self, search: str, value: str | None) -> Response:
        if not value:
            return _error(400, "Search requires a non-empty 'value'")
        try:
            search_field = SearchField(search.lower())
        except ValueError:
            return _error(400, f"Invalid search type '{search}'")

        result: Person | list[Person] | None
        if search_field is SearchField.NAME:
            result = self._dao.find_by_name(value)
        elif search_field is SearchField.EMAIL:
            result = self._dao.find_by_email(value)
        else:
            result = self._dao.find_by_phone(value)
        return self._read_response(result)

    def _read_response(self, result: Person | list[Person] | None) -> Response:
        body: dict[str, Any] = {"data": _serialize(result)}
        if self._include_cache_stats:
            stats = self._dao.cache_stats()
            body["cache"] = {"size": stats.size, "keys": stats.keys}
        return Response(200, body)


def _error(status: int, message: str) -> Response:
    return Response(status, {"error": message})
